"""Integration check helpers."""

from .checks import IntegrationCheckResult, check_capability, check_wardrobe_store, run_all_checks

__all__ = ["IntegrationCheckResult", "check_capability", "check_wardrobe_store", "run_all_checks"]
