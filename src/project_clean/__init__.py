"""Remove build artifacts from project trees."""

__version__ = "0.6.0"
