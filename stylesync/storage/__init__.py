"""Persistent wardrobe storage."""

from .repository import WardrobeStore

__all__ = ["WardrobeStore"]
