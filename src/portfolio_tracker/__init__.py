"""Shared two-user portfolio tracker with multi-provider quote resolution."""

__version__ = "0.1.0"
