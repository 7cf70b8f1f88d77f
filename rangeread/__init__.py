"""Read a numeric range off a photographed display and confirm it with a human."""

__version__ = "0.1.0"
