"""Outfit recommendation pipeline."""

from .orchestrator import RecommendationOrchestrator, resolve_owned
from .schemas import RESPONSE_SCHEMA, parse_batch

__all__ = ["RESPONSE_SCHEMA", "RecommendationOrchestrator", "parse_batch", "resolve_owned"]
