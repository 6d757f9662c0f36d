"""Prompt building and outfit visual generation."""

from .image_gen import VisualSynthesizer
from .prompt_builder import PromptBuilder, VisualPromptContext

__all__ = ["PromptBuilder", "VisualPromptContext", "VisualSynthesizer"]
