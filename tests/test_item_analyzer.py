"""Tests for garment classification and ingestion."""

from __future__ import annotations

import pytest

from conftest import PNG_BYTES, FakeCapability, make_provider
from stylesync.api.provider import CapabilityProvider
from stylesync.catalog import ItemAnalyzer
from stylesync.catalog.analyzer import DEGRADED_DESCRIPTION, UNKNOWN_DESCRIPTION
from stylesync.errors import CapabilityFailure, CredentialsMissing, ValidationFailure
from stylesync.models import ClothingCategory
from stylesync.storage import WardrobeStore


@pytest.mark.asyncio
async def test_analyze_returns_classification(provider: CapabilityProvider, capability: FakeCapability) -> None:
    analysis = await ItemAnalyzer(provider).analyze(PNG_BYTES, "image/png")

    assert analysis.category is ClothingCategory.OUTERWEAR
    assert analysis.description == "Dark blue denim jacket"
    assert analysis.tags == ["denim", "blue", "vintage"]
    assert not analysis.degraded
    instruction = capability.prompts("classify")[0]
    for member in ClothingCategory:
        assert member.value in instruction


@pytest.mark.asyncio
async def test_unrecognised_category_falls_back_to_top() -> None:
    capability = FakeCapability(classification={"category": "Jacket", "description": "Puffer", "tags": ["warm"]})

    analysis = await ItemAnalyzer(make_provider(capability)).analyze(PNG_BYTES)

    assert analysis.category is ClothingCategory.TOP
    assert analysis.description == "Puffer"


@pytest.mark.asyncio
async def test_missing_fields_get_placeholders() -> None:
    capability = FakeCapability(classification={"category": "shoes", "tags": "not-a-list"})

    analysis = await ItemAnalyzer(make_provider(capability)).analyze(PNG_BYTES)

    assert analysis.category is ClothingCategory.SHOES
    assert analysis.description == UNKNOWN_DESCRIPTION
    assert analysis.tags == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [CapabilityFailure("rate limited", status_code=429), ValidationFailure("not json")],
)
async def test_capability_failure_degrades(error: Exception) -> None:
    analysis = await ItemAnalyzer(make_provider(FakeCapability(error=error))).analyze(PNG_BYTES)

    assert analysis.category is ClothingCategory.TOP
    assert analysis.description == DEGRADED_DESCRIPTION
    assert analysis.tags == []
    assert analysis.degraded


@pytest.mark.asyncio
async def test_missing_credentials_propagates_before_any_call(
    keyless_provider: CapabilityProvider,
    capability: FakeCapability,
) -> None:
    with pytest.raises(CredentialsMissing):
        await ItemAnalyzer(keyless_provider).analyze(PNG_BYTES)

    assert capability.calls == []


@pytest.mark.asyncio
async def test_credentials_error_from_capability_is_not_degraded() -> None:
    analyzer = ItemAnalyzer(make_provider(FakeCapability(error=CredentialsMissing())))

    with pytest.raises(CredentialsMissing):
        await analyzer.analyze(PNG_BYTES)


@pytest.mark.asyncio
async def test_ingest_stores_analysed_item(provider: CapabilityProvider, store: WardrobeStore) -> None:
    item = await ItemAnalyzer(provider, store).ingest(PNG_BYTES, "image/png")

    assert await store.get_by_id(item.id) == item
    assert item.category is ClothingCategory.OUTERWEAR
    assert item.image.media_type == "image/png"


@pytest.mark.asyncio
async def test_ingest_stores_degraded_record_on_failure(store: WardrobeStore) -> None:
    analyzer = ItemAnalyzer(make_provider(FakeCapability(error=CapabilityFailure("timeout"))), store)

    item = await analyzer.ingest(PNG_BYTES)

    stored = await store.get_all()
    assert stored == [item]
    assert item.description == DEGRADED_DESCRIPTION


@pytest.mark.asyncio
async def test_ingest_without_credentials_writes_nothing(
    keyless_provider: CapabilityProvider,
    store: WardrobeStore,
) -> None:
    with pytest.raises(CredentialsMissing):
        await ItemAnalyzer(keyless_provider, store).ingest(PNG_BYTES)

    assert await store.get_all() == []
