"""Shared fixtures and the in-memory generation capability double."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import pytest

from stylesync.api.provider import CapabilityProvider
from stylesync.config.settings import StylistSettings
from stylesync.models import ClothingCategory, ImagePayload, WardrobeItem
from stylesync.storage import WardrobeStore

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


class FakeCapability:
    """Canned implementation of the generation capability."""

    def __init__(
        self,
        *,
        classification: Mapping[str, Any] | None = None,
        recommendations: Any = None,
        image: ImagePayload | None = None,
        error: Exception | None = None,
    ) -> None:
        self.classification = classification or {
            "category": "outerwear",
            "description": "Dark blue denim jacket",
            "tags": ["denim", "blue", "vintage"],
        }
        self.recommendations = [] if recommendations is None else recommendations
        self.image = image
        self.error = error
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    async def classify_image(self, image: ImagePayload, instruction: str) -> Mapping[str, Any]:
        self.calls.append(("classify", instruction))
        if self.error:
            raise self.error
        return self.classification

    async def generate_recommendations(self, prompt: str, *, system_instruction: str, schema: Mapping[str, Any]) -> Any:
        self.calls.append(("recommend", prompt))
        if self.error:
            raise self.error
        return self.recommendations

    async def generate_image(self, prompt: str, *, aspect_ratio: str) -> ImagePayload | None:
        self.calls.append(("image", prompt))
        if self.error:
            raise self.error
        return self.image

    async def close(self) -> None:
        self.closed = True

    def prompts(self, operation: str) -> list[Any]:
        return [payload for name, payload in self.calls if name == operation]


def make_provider(capability: FakeCapability, api_key: str = "test-key") -> CapabilityProvider:
    settings = StylistSettings(api_key=api_key, recommendation_count=3)
    return CapabilityProvider(settings_factory=lambda: settings, factory=lambda _: capability)


def make_item(description: str, category: ClothingCategory = ClothingCategory.TOP, **kwargs: Any) -> WardrobeItem:
    return WardrobeItem.create(
        image=ImagePayload(data=PNG_BYTES, media_type="image/png"),
        category=category,
        description=description,
        tags=kwargs.get("tags", ("casual",)),
    )


@pytest.fixture()
def capability() -> FakeCapability:
    return FakeCapability()


@pytest.fixture()
def provider(capability: FakeCapability) -> CapabilityProvider:
    return make_provider(capability)


@pytest.fixture()
def keyless_provider(capability: FakeCapability) -> CapabilityProvider:
    return make_provider(capability, api_key="")


@pytest.fixture()
def store(tmp_path: Path) -> WardrobeStore:
    return WardrobeStore(tmp_path / "wardrobe")
