"""permaudit - find mistakes in filesystem owner and permission settings."""

__version__ = "1.0.0"
