"""Prompt construction helpers for the outfit visual step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from stylesync.models import Gender, Occasion, OutfitRecommendation, UserPreferences, WardrobeItem, WeatherType

SUBJECTS = {
    Gender.FEMALE: "A fashionable Taiwanese woman, height approx 160cm. Petite but well-proportioned figure.",
    Gender.MALE: "A stylish Taiwanese man, height approx 175cm. Slim to average build.",
}
DEFAULT_SUBJECT = "A stylish Taiwanese person, height approx 165cm, natural build."

BACKGROUNDS = {
    Occasion.CASUAL: "Taiwanese street scene, nearby a bubble tea shop or convenience store, relaxed daytime vibe.",
    Occasion.WORK: "Modern office setting in Taipei or a clean urban business district background.",
    Occasion.DATE: (
        "A cozy cafe interior with warm lighting or a scenic spot in a creative park (like Huashan 1914)."
    ),
    Occasion.PARTY: "A trendy evening bistro or lounge bar entrance with ambient lighting.",
    Occasion.GYM: "A bright modern gym interior or an outdoor riverside running track in Taipei.",
    Occasion.FORMAL: "A high-end hotel lobby or banquet hall entrance.",
}
DEFAULT_BACKGROUND = "A clean, aesthetic urban street corner in Taiwan."

LIGHTING = {
    WeatherType.SUNNY: "Sunny day, bright natural sunlight, distinct shadows, vibrant colors.",
    WeatherType.CLOUDY: "Overcast day, soft diffused lighting, no harsh shadows, cozy atmosphere.",
    WeatherType.RAINY: (
        "Rainy day, holding a clear plastic umbrella, wet pavement reflections, moody cinematic lighting."
    ),
    WeatherType.SNOWY: "Cold weather, visible breath, soft winter lighting.",
    WeatherType.COLD: "Cold weather, visible breath, soft winter lighting.",
    WeatherType.HOT: "Hot summer day, bright intense sun, summer vibe.",
}
DEFAULT_LIGHTING = "Natural daylight."


@dataclass(slots=True)
class VisualPromptContext:
    """Scene information derived from the captured preferences."""

    subject: str = DEFAULT_SUBJECT
    background: str = DEFAULT_BACKGROUND
    lighting: str = DEFAULT_LIGHTING

    @classmethod
    def from_preferences(cls, preferences: UserPreferences) -> VisualPromptContext:
        return cls(
            subject=SUBJECTS.get(preferences.gender, DEFAULT_SUBJECT),
            background=BACKGROUNDS.get(preferences.occasion, DEFAULT_BACKGROUND),
            lighting=LIGHTING.get(preferences.weather, DEFAULT_LIGHTING),
        )


class PromptBuilder:
    """Builds the photography prompt for one recommendation."""

    def describe_outfit(self, recommendation: OutfitRecommendation) -> str:
        """Flatten the recommendation into a one-line outfit description."""

        garments = ", ".join(f"{item.color} {item.name}" for item in recommendation.items)
        return f"Outfit style: {recommendation.title}. Items: {garments}."

    def build(
        self,
        recommendation: OutfitRecommendation,
        reference_items: Sequence[WardrobeItem] = (),
        *,
        extra_instructions: Iterable[str] | None = None,
    ) -> str:
        """Return the full text prompt; identical inputs always give the same prompt."""

        context = VisualPromptContext.from_preferences(recommendation.context)
        outfit_details = self.describe_outfit(recommendation)
        if reference_items:
            lines = [
                f"- {item.category.value}: {item.description} (Keywords: {', '.join(item.tags)})"
                for item in reference_items
            ]
            outfit_details += (
                "\n\nWEARING THE FOLLOWING SPECIFIC ITEMS (MATCH COLOR AND STYLE EXACTLY):\n" + "\n".join(lines)
            )

        sections = [
            "High-quality fashion photography, street snap style.",
            f"Subject: {context.subject}",
            "Skin Tone: Natural Asian/Taiwanese skin tone.",
            "Pose: Natural, standing, confident look.",
            "",
            f"Outfit: {outfit_details}",
            "",
            f"Background: {context.background}",
            f"Lighting: {context.lighting}",
            "",
            "Style: Photorealistic, 8k, shot on 35mm film, highly detailed textures, depth of field.",
            "Ensure the clothing colors match the description exactly.",
        ]
        extras = " ".join(extra_instructions or [])
        if extras:
            sections.append(extras)
        return "\n".join(sections).strip()
