"""Version information for zklock."""

__version__ = "1.0.0"
