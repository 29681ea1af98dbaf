"""Command-line interface for Time Tracker."""
