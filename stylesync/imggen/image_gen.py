"""Best-effort outfit visual generation."""

from __future__ import annotations

import logging

from stylesync.api.provider import CapabilityProvider
from stylesync.errors import CredentialsMissing, NotFound, StylistError
from stylesync.imggen.prompt_builder import PromptBuilder
from stylesync.models import ImagePayload, OutfitRecommendation, WardrobeItem
from stylesync.storage import WardrobeStore

logger = logging.getLogger(__name__)


class VisualSynthesizer:
    """Generates a photorealistic depiction of one recommendation on demand.

    Callers check ``recommendation.has_visual`` before invoking
    :meth:`synthesize`; the synthesizer itself keeps no memo.
    """

    def __init__(
        self,
        provider: CapabilityProvider,
        store: WardrobeStore,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self._provider = provider
        self._store = store
        self._prompt_builder = prompt_builder or PromptBuilder()

    async def reference_items(self, recommendation: OutfitRecommendation) -> list[WardrobeItem]:
        """Return linked wardrobe items that still exist in the store."""

        resolved: list[WardrobeItem] = []
        for item_id in recommendation.linked_ids():
            try:
                resolved.append(await self._store.get_by_id(item_id))
            except NotFound:
                logger.info("Wardrobe item %s no longer exists; not matching it visually.", item_id)
        return resolved

    async def build_prompt(self, recommendation: OutfitRecommendation) -> str:
        references = await self.reference_items(recommendation)
        return self._prompt_builder.build(recommendation, references)

    async def synthesize(self, recommendation: OutfitRecommendation) -> ImagePayload | None:
        """Return the generated image, or ``None`` when generation fails."""

        capability = self._provider.get()
        aspect_ratio = self._provider.settings.image_aspect_ratio
        try:
            prompt = await self.build_prompt(recommendation)
            image = await capability.generate_image(prompt, aspect_ratio=aspect_ratio)
        except CredentialsMissing:
            raise
        except (StylistError, OSError, ValueError, LookupError, TypeError, AttributeError) as exc:
            logger.error("Visual generation failed for %s: %s", recommendation.id, exc)
            return None

        if image is None:
            logger.warning("Model returned no image for recommendation %s.", recommendation.id)
        return image
