"""User management API backed by MongoDB."""

__version__ = "1.0.0"
