"""Error taxonomy shared by the store, the capability client and the pipeline."""

from __future__ import annotations


class StylistError(RuntimeError):
    """Base class for all pipeline errors."""


class CredentialsMissing(StylistError):
    """Raised when no API key is configured for the generation capability."""

    def __init__(self, message: str = "AITunnel API key is not configured.") -> None:
        super().__init__(message)


class CapabilityFailure(StylistError):
    """Raised when the generation capability fails or times out."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ValidationFailure(CapabilityFailure):
    """Raised when the capability response does not match the expected schema."""


class StoreError(StylistError):
    """Base class for wardrobe store errors."""


class NotFound(StoreError):
    """Raised when a wardrobe item id is not present in the store."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Wardrobe item {item_id!r} does not exist.")


class DuplicateId(StoreError):
    """Raised when inserting an item whose id is already stored."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Wardrobe item {item_id!r} already exists.")


__all__ = [
    "CapabilityFailure",
    "CredentialsMissing",
    "DuplicateId",
    "NotFound",
    "StoreError",
    "StylistError",
    "ValidationFailure",
]
