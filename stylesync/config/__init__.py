"""Configuration loading for the stylist pipeline."""

from .settings import StylistSettings, get_settings

__all__ = ["StylistSettings", "get_settings"]
