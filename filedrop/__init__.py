"""FileDrop - single-use file relay."""

__version__ = "1.0.0"
