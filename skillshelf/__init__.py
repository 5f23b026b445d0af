"""Unified skill management across agent tool directories."""

__version__ = "0.1.0"
