"""Command-line interface for the compatibility gate."""

__version__ = "0.1.0"
