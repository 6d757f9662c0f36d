"""High-level operations combining the wardrobe store and the generation pipeline."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from pathlib import Path
from typing import Sequence

from stylesync.api.provider import CapabilityProvider
from stylesync.catalog import ItemAnalyzer
from stylesync.config.settings import StylistSettings
from stylesync.imggen import VisualSynthesizer
from stylesync.imggen.postproc import detect_media_type, render_placeholder
from stylesync.models import ClothingCategory, ImagePayload, OutfitRecommendation, UserPreferences, WardrobeItem
from stylesync.recommender import RecommendationOrchestrator, resolve_owned
from stylesync.storage import WardrobeStore

logger = logging.getLogger(__name__)

SAMPLE_ITEMS = (
    (ClothingCategory.TOP, "Cute white tee", "#FFB7B2", "Tee"),
    (ClothingCategory.BOTTOM, "Jeans", "#C7CEEA", "Jeans"),
    (ClothingCategory.OUTERWEAR, "Warm wool coat", "#E2D5C4", "Coat"),
    (ClothingCategory.SHOES, "White sneakers", "#B5EAD7", "Shoes"),
)


class StylistLogic:
    """Encapsulates wardrobe management, outfit planning and visual generation."""

    def __init__(
        self,
        provider: CapabilityProvider,
        store: WardrobeStore,
    ) -> None:
        self._provider = provider
        self._store = store
        self._analyzer = ItemAnalyzer(provider, store)
        self._orchestrator = RecommendationOrchestrator(provider)
        self._synthesizer = VisualSynthesizer(provider, store)

    @classmethod
    def from_settings(cls, settings: StylistSettings) -> StylistLogic:
        """Build the logic with an on-disk store and the default AITunnel client."""

        store = WardrobeStore(Path(settings.wardrobe_root))
        provider = CapabilityProvider(settings_factory=lambda: settings)
        return cls(provider, store)

    @property
    def store(self) -> WardrobeStore:
        return self._store

    @property
    def provider(self) -> CapabilityProvider:
        return self._provider

    async def add_item(self, image_bytes: bytes, media_type: str | None = None) -> WardrobeItem:
        """Classify a garment photo and store it."""

        declared = media_type or await asyncio.to_thread(detect_media_type, image_bytes)
        return await self._analyzer.ingest(image_bytes, declared)

    async def list_wardrobe(self) -> list[WardrobeItem]:
        """Return the wardrobe newest first."""

        items = await self._store.get_all()
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    async def remove_item(self, item_id: str) -> None:
        await self._store.delete(item_id)

    async def import_sample_items(self) -> list[WardrobeItem]:
        """Store a handful of placeholder garments for trying the pipeline out."""

        created: list[WardrobeItem] = []
        for category, description, color, caption in SAMPLE_ITEMS:
            image = await asyncio.to_thread(render_placeholder, color, caption)
            item = WardrobeItem.create(
                image=image,
                category=category,
                description=description,
                tags=("sample", caption),
            )
            created.append(await self._store.put(item))
        logger.info("Imported %d sample wardrobe items.", len(created))
        return created

    async def recommend(self, preferences: UserPreferences) -> list[OutfitRecommendation]:
        """Generate outfits, feeding the current wardrobe when the user asked for it."""

        if preferences.use_wardrobe:
            snapshot = tuple(await self._store.get_all())
            preferences = dataclasses.replace(
                preferences,
                use_wardrobe=bool(snapshot),
                wardrobe_items=snapshot,
            )
        else:
            preferences = dataclasses.replace(preferences, wardrobe_items=())
        return await self._orchestrator.recommend(preferences)

    async def generate_visual(self, recommendation: OutfitRecommendation) -> ImagePayload | None:
        """Return the recommendation's visual, generating it on first request."""

        if recommendation.generated_visual is not None:
            return recommendation.generated_visual
        image = await self._synthesizer.synthesize(recommendation)
        if image is not None and recommendation.generated_visual is None:
            recommendation.attach_visual(image)
        return recommendation.generated_visual

    async def generate_visuals(
        self,
        recommendations: Sequence[OutfitRecommendation],
    ) -> list[ImagePayload | None]:
        """Generate visuals for several cards concurrently."""

        return list(await asyncio.gather(*(self.generate_visual(rec) for rec in recommendations)))

    async def owned_count(self, recommendation: OutfitRecommendation) -> int:
        """Count outfit items that link to a wardrobe item still present in the store."""

        wardrobe = await self._store.get_all()
        return len(resolve_owned(recommendation, wardrobe))

    async def close(self) -> None:
        await self._provider.reset()
