"""Tests for the JSON-backed wardrobe store."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from conftest import make_item
from stylesync.errors import DuplicateId, NotFound, StoreError
from stylesync.models import ClothingCategory
from stylesync.storage import WardrobeStore


@pytest.mark.asyncio
async def test_put_then_get_all_round_trips_fields(store: WardrobeStore) -> None:
    item = make_item("Navy blazer", ClothingCategory.OUTERWEAR, tags=("navy", "wool"))

    await store.put(item)
    items = await store.get_all()

    assert items == [item]
    assert items[0].image.data == item.image.data
    assert items[0].tags == ("navy", "wool")


@pytest.mark.asyncio
async def test_items_survive_reopening_the_store(tmp_path: Path) -> None:
    first = WardrobeStore(tmp_path / "wardrobe")
    shirt = make_item("White shirt")
    jeans = make_item("Blue jeans", ClothingCategory.BOTTOM)
    await first.put(shirt)
    await first.put(jeans)

    reopened = WardrobeStore(tmp_path / "wardrobe")

    assert await reopened.get_all() == [shirt, jeans]
    assert await reopened.get_by_id(jeans.id) == jeans


@pytest.mark.asyncio
async def test_duplicate_id_is_rejected_and_first_item_kept(store: WardrobeStore) -> None:
    original = make_item("Original tee")
    impostor = dataclasses.replace(make_item("Impostor"), id=original.id)
    await store.put(original)

    with pytest.raises(DuplicateId):
        await store.put(impostor)

    items = await store.get_all()
    assert [item.description for item in items] == ["Original tee"]


@pytest.mark.asyncio
async def test_delete_missing_id_is_a_noop(store: WardrobeStore) -> None:
    item = make_item("Sneakers", ClothingCategory.SHOES)
    await store.put(item)

    await store.delete("does-not-exist")

    assert await store.get_all() == [item]


@pytest.mark.asyncio
async def test_delete_removes_item_and_image(store: WardrobeStore) -> None:
    item = make_item("Scarf", ClothingCategory.ACCESSORY)
    await store.put(item)

    await store.delete(item.id)

    assert await store.get_all() == []
    with pytest.raises(NotFound):
        await store.get_by_id(item.id)
    assert not any((store.root / "images").iterdir())


@pytest.mark.asyncio
async def test_get_all_keeps_insertion_order(store: WardrobeStore) -> None:
    items = [make_item(f"Item {index}") for index in range(4)]
    for item in reversed(items):
        await store.put(item)

    stored = await store.get_all()

    assert [item.description for item in stored] == ["Item 3", "Item 2", "Item 1", "Item 0"]


@pytest.mark.asyncio
async def test_no_temporary_files_left_behind(store: WardrobeStore) -> None:
    await store.put(make_item("Dress", ClothingCategory.ONE_PIECE))

    leftovers = [path.name for path in store.root.rglob("*.tmp")]

    assert leftovers == []


@pytest.mark.asyncio
async def test_unreadable_index_raises_store_error(tmp_path: Path) -> None:
    root = tmp_path / "broken"
    root.mkdir()
    (root / "wardrobe.json").write_text('{"records": []}', encoding="utf-8")

    with pytest.raises(StoreError, match="unreadable"):
        await WardrobeStore(root).get_all()


@pytest.mark.asyncio
async def test_item_ids_never_escape_the_images_directory(tmp_path: Path) -> None:
    store = WardrobeStore(tmp_path / "closet" / "wardrobe")
    item = dataclasses.replace(make_item("Odd id"), id="../../escaped")

    await store.put(item)

    written = [path for path in tmp_path.rglob("*") if path.is_file()]
    assert all(store.root in path.parents for path in written)
    assert not (tmp_path / "escaped.png").exists()
    assert (await WardrobeStore(store.root).get_by_id("../../escaped")).image == item.image

    await store.delete(item.id)
    assert not any((store.root / "images").iterdir())
