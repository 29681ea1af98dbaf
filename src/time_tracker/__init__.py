"""Time Tracker - personal time tracking web service."""

__title__ = "time-tracker"
__description__ = "Log work time against named tracks."
__version__ = "1.0.0"

__all__ = ["__title__", "__description__", "__version__"]
