"""Wardrobe-aware outfit recommendation pipeline."""

__version__ = "0.1.0"
