"""Tests for domain value objects."""

from __future__ import annotations

import pytest

from stylesync.models import (
    ClothingCategory,
    ImagePayload,
    OutfitItem,
    OutfitRecommendation,
    UserPreferences,
    WardrobeItem,
)


def test_unknown_category_is_corrected_to_top() -> None:
    item = WardrobeItem(
        id="item-1",
        image=ImagePayload(b"data"),
        category="hat",  # type: ignore[arg-type]
        description="Bucket hat",
    )

    assert item.category is ClothingCategory.TOP


def test_created_items_have_unique_ids_and_increasing_timestamps() -> None:
    image = ImagePayload(b"data")
    first = WardrobeItem.create(image, ClothingCategory.TOP, "A")
    second = WardrobeItem.create(image, "one-piece", "B")

    assert first.id != second.id
    assert second.created_at > first.created_at
    assert second.category is ClothingCategory.ONE_PIECE


def test_image_payload_data_url_round_trip() -> None:
    payload = ImagePayload(b"\x00\x01binary", media_type="image/png")

    decoded = ImagePayload.from_data_url(payload.as_data_url())

    assert decoded == payload
    assert ImagePayload.from_data_url("https://example.com/a.png") is None


def test_visual_can_only_be_attached_once() -> None:
    recommendation = OutfitRecommendation(
        id="rec-1-0",
        title="Weekend",
        description="",
        items=(OutfitItem("tee", "white", "top"),),
        reasoning="",
        color_palette=("white",),
    )
    recommendation.attach_visual(ImagePayload(b"img"))

    with pytest.raises(ValueError):
        recommendation.attach_visual(ImagePayload(b"other"))
    assert recommendation.has_visual


def test_preferences_snapshot_is_an_equal_independent_value() -> None:
    preferences = UserPreferences(occasion="WORK", style_params="smart", wardrobe_items=[])

    snapshot = preferences.snapshot()

    assert snapshot == preferences
    assert snapshot is not preferences
    assert isinstance(snapshot.wardrobe_items, tuple)
