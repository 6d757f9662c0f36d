"""Response schema for the recommendation capability."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from stylesync.errors import ValidationFailure


class OutfitItemPayload(BaseModel):
    """Single garment as returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    name: StrictStr
    color: StrictStr
    type: StrictStr
    wardrobe_item_id: Optional[StrictStr] = Field(default=None, alias="wardrobeItemId")

    @field_validator("wardrobe_item_id")
    @classmethod
    def _blank_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


class RecommendationPayload(BaseModel):
    """One outfit suggestion as returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    title: StrictStr
    description: StrictStr
    items: list[OutfitItemPayload]
    reasoning: StrictStr
    color_palette: list[StrictStr] = Field(alias="colorPalette")


class RecommendationBatchPayload(BaseModel):
    """Ordered list of outfit suggestions."""

    recommendations: list[RecommendationPayload]


OUTFIT_ITEM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "color": {"type": "string"},
        "type": {"type": "string"},
        "wardrobeItemId": {
            "type": "string",
            "description": (
                "If the item comes from the user's wardrobe, the exact inventory ID. "
                "Leave empty for generic suggestions."
            ),
        },
    },
    "required": ["name", "color", "type"],
}

RECOMMENDATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "items": {"type": "array", "items": OUTFIT_ITEM_SCHEMA},
        "reasoning": {"type": "string"},
        "colorPalette": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["title", "description", "items", "reasoning", "colorPalette"],
}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "recommendations": {"type": "array", "items": RECOMMENDATION_SCHEMA},
    },
    "required": ["recommendations"],
}


def parse_batch(raw: Any) -> list[RecommendationPayload]:
    """Validate a decoded response; a bare array or a wrapping object is accepted."""

    if isinstance(raw, list):
        raw = {"recommendations": raw}
    if not isinstance(raw, dict):
        raise ValidationFailure("Recommendation response is not a list of outfits.")
    try:
        batch = RecommendationBatchPayload.model_validate(raw)
    except ValidationError as exc:
        raise ValidationFailure(
            f"Recommendation response does not match the expected schema: {exc.error_count()} error(s).",
        ) from exc
    return batch.recommendations
