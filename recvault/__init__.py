"""Personal record vault with MongoDB storage and local JSON fallback."""

__version__ = "0.1.0"
