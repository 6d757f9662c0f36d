"""Garment classification."""

from .analyzer import ItemAnalysis, ItemAnalyzer

__all__ = ["ItemAnalysis", "ItemAnalyzer"]
