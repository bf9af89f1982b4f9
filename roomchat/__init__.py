"""roomchat - line-based TCP chat relay with rooms."""

__version__ = "1.0.0"
