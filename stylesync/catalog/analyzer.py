"""Garment classification through the generation capability."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from stylesync.api.provider import CapabilityProvider
from stylesync.errors import CredentialsMissing, StylistError
from stylesync.models import DEFAULT_CATEGORY, ClothingCategory, ImagePayload, WardrobeItem
from stylesync.storage import WardrobeStore

logger = logging.getLogger(__name__)

UNKNOWN_DESCRIPTION = "Unknown item"
DEGRADED_DESCRIPTION = "Uploaded item"


@dataclass(slots=True)
class ItemAnalysis:
    """Classification result for a single garment photo."""

    category: ClothingCategory
    description: str
    tags: list[str] = field(default_factory=list)
    degraded: bool = False


def build_instruction() -> str:
    categories = ", ".join(member.value for member in ClothingCategory)
    return (
        "Analyse this clothing photo.\n"
        f"1. Classify it as exactly one of: {categories}.\n"
        "2. Give a short description (for example: dark blue denim jacket, vintage wash).\n"
        "3. Give 3-5 keyword tags (color, material, style).\n"
        "Reply with a JSON object containing the fields category, description and tags."
    )


class ItemAnalyzer:
    """Turns an image capture into a classified wardrobe record.

    Classification is enrichment only: every failure except missing
    credentials degrades into a placeholder analysis so the item can still
    be stored.
    """

    def __init__(self, provider: CapabilityProvider, store: WardrobeStore | None = None) -> None:
        self._provider = provider
        self._store = store

    async def analyze(self, image_bytes: bytes, media_type: str = "image/jpeg") -> ItemAnalysis:
        """Classify the garment shown in ``image_bytes``."""

        capability = self._provider.get()
        image = ImagePayload(data=image_bytes, media_type=media_type or "image/jpeg")
        try:
            raw = await capability.classify_image(image, build_instruction())
        except CredentialsMissing:
            raise
        except StylistError as exc:
            logger.warning("Garment analysis failed, storing a degraded record: %s", exc)
            return ItemAnalysis(
                category=DEFAULT_CATEGORY,
                description=DEGRADED_DESCRIPTION,
                tags=[],
                degraded=True,
            )
        return self._normalise(raw)

    async def ingest(self, image_bytes: bytes, media_type: str = "image/jpeg") -> WardrobeItem:
        """Analyse an image and store the resulting wardrobe item."""

        if self._store is None:
            raise RuntimeError("ItemAnalyzer was created without a wardrobe store.")
        analysis = await self.analyze(image_bytes, media_type)
        item = WardrobeItem.create(
            image=ImagePayload(data=image_bytes, media_type=media_type or "image/jpeg"),
            category=analysis.category,
            description=analysis.description,
            tags=analysis.tags,
        )
        return await self._store.put(item)

    @staticmethod
    def _normalise(raw: Mapping[str, Any]) -> ItemAnalysis:
        category = ClothingCategory.from_label(raw.get("category"))
        if category is None:
            logger.warning(
                "Unrecognised category %r, falling back to %s.",
                raw.get("category"),
                DEFAULT_CATEGORY.value,
            )
            category = DEFAULT_CATEGORY

        description = raw.get("description")
        if not isinstance(description, str) or not description.strip():
            description = UNKNOWN_DESCRIPTION

        tags = raw.get("tags")
        if not isinstance(tags, list):
            tags = []
        return ItemAnalysis(
            category=category,
            description=description.strip(),
            tags=[str(tag) for tag in tags if str(tag).strip()],
        )
