"""Detect whether the last software update on this server succeeded."""

__version__ = "0.1.0"
