"""Aurum — AI-assisted personal wealth tracking."""

__version__ = "0.1.0"
