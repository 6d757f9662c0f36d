"""Outfit recommendation pipeline built around the generation capability."""

from __future__ import annotations

import logging
from typing import Sequence

from stylesync.api.provider import CapabilityProvider
from stylesync.errors import CapabilityFailure, CredentialsMissing
from stylesync.models import (
    Gender,
    Occasion,
    OutfitItem,
    OutfitRecommendation,
    UserPreferences,
    WardrobeItem,
    WeatherType,
    monotonic_timestamp,
)
from stylesync.recommender.schemas import RESPONSE_SCHEMA, RecommendationPayload, parse_batch

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "fashionable, minimal"

SYSTEM_INSTRUCTION = (
    "You are a fashion consultant who excels at mixing and matching. "
    "Make the most of the clothes the user already owns and give concrete reasons for every pairing."
)

OCCASION_LABELS = {
    Occasion.CASUAL: "casual",
    Occasion.WORK: "work / business",
    Occasion.DATE: "date",
    Occasion.PARTY: "party",
    Occasion.GYM: "sport / gym",
    Occasion.FORMAL: "formal event",
}

WEATHER_LABELS = {
    WeatherType.SUNNY: "sunny",
    WeatherType.CLOUDY: "cloudy",
    WeatherType.RAINY: "rainy",
    WeatherType.SNOWY: "snowy",
    WeatherType.COLD: "cold",
    WeatherType.HOT: "hot",
}

GENDER_LABELS = {
    Gender.FEMALE: "woman",
    Gender.MALE: "man",
    Gender.UNISEX: "person (gender-neutral styling)",
}


class RecommendationOrchestrator:
    """Builds the generation request, validates the answer and assembles a batch."""

    def __init__(self, provider: CapabilityProvider, *, outfit_count: int | None = None) -> None:
        if outfit_count is not None and outfit_count < 1:
            raise ValueError(f"outfit_count must be at least 1, got {outfit_count}.")
        self._provider = provider
        self._outfit_count = outfit_count

    @property
    def outfit_count(self) -> int:
        if self._outfit_count is not None:
            return self._outfit_count
        return self._provider.settings.recommendation_count

    def build_inventory(self, preferences: UserPreferences) -> str:
        """Return the inventory listing, or an empty string when the wardrobe is not used."""

        if not preferences.use_wardrobe or not preferences.wardrobe_items:
            return ""
        lines = [
            f"- ID: {item.id}, category: {item.category.value}, description: {item.description}"
            for item in preferences.wardrobe_items
        ]
        return (
            "The user owns the following wardrobe inventory.\n"
            "Prefer these items when putting outfits together.\n"
            "Whenever you use an inventory item, put its exact ID in the wardrobeItemId field.\n"
            "If an outfit needs pieces the inventory lacks, suggest generic items and leave "
            "wardrobeItemId empty for them.\n\n"
            "Inventory:\n" + "\n".join(lines)
        )

    def build_prompt(self, preferences: UserPreferences) -> str:
        """Compose the single generation request for ``preferences``."""

        inventory = self.build_inventory(preferences)
        language = self._provider.settings.response_language
        parts = [
            "You are a professional personal stylist. "
            f"Suggest {self.outfit_count} complete outfits for a "
            f"{GENDER_LABELS.get(preferences.gender, str(preferences.gender))}.",
            f"Answer in {language}.",
            "Context:\n"
            f"- Occasion: {OCCASION_LABELS.get(preferences.occasion, str(preferences.occasion))}\n"
            f"- Weather: {WEATHER_LABELS.get(preferences.weather, str(preferences.weather))}\n"
            f"- Style: {preferences.style_params.strip() or DEFAULT_STYLE}",
        ]
        if inventory:
            parts.append(inventory)
        else:
            parts.append(
                "The user's wardrobe is not available. Suggest generic items to buy and "
                "leave wardrobeItemId empty for every item."
            )
        return "\n\n".join(parts)

    async def recommend(self, preferences: UserPreferences) -> list[OutfitRecommendation]:
        """Return a validated batch of recommendations, or raise without a partial batch."""

        capability = self._provider.get()
        prompt = self.build_prompt(preferences)
        try:
            raw = await capability.generate_recommendations(
                prompt,
                system_instruction=SYSTEM_INSTRUCTION,
                schema=RESPONSE_SCHEMA,
            )
        except CredentialsMissing:
            raise
        except CapabilityFailure as exc:
            logger.error("Failed to generate outfit recommendations: %s", exc)
            raise

        try:
            payloads = parse_batch(raw)
        except CapabilityFailure as exc:
            logger.error("Rejected recommendation response: %s", exc)
            raise
        if not payloads:
            logger.info("Model returned an empty recommendation batch.")
            return []

        known_ids = (
            {item.id for item in preferences.wardrobe_items} if preferences.use_wardrobe else set()
        )
        request_ms = monotonic_timestamp()
        context = preferences.snapshot()
        batch = [
            OutfitRecommendation(
                id=f"rec-{request_ms}-{index}",
                title=payload.title,
                description=payload.description,
                items=tuple(self._to_outfit_items(payload, known_ids)),
                reasoning=payload.reasoning,
                color_palette=tuple(payload.color_palette),
                context=context,
            )
            for index, payload in enumerate(payloads)
        ]
        logger.info("Generated %d outfit recommendations.", len(batch))
        return batch

    @staticmethod
    def _to_outfit_items(payload: RecommendationPayload, known_ids: set[str]) -> list[OutfitItem]:
        items: list[OutfitItem] = []
        for raw in payload.items:
            reference = raw.wardrobe_item_id
            if reference and reference not in known_ids:
                logger.warning("Dropping unknown wardrobe reference %r from %r.", reference, raw.name)
                reference = None
            items.append(OutfitItem(name=raw.name, color=raw.color, type=raw.type, wardrobe_item_id=reference))
        return items


def resolve_owned(
    recommendation: OutfitRecommendation,
    wardrobe: Sequence[WardrobeItem],
) -> list[WardrobeItem]:
    """Return wardrobe items referenced by ``recommendation`` that still exist."""

    by_id = {item.id: item for item in wardrobe}
    return [by_id[ref] for ref in recommendation.linked_ids() if ref in by_id]
