"""Category and tag taxonomy service."""

__version__ = "0.1.0"
