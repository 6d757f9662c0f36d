"""JSON-backed persistent store for wardrobe items."""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import mimetypes
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from stylesync.errors import DuplicateId, NotFound, StoreError
from stylesync.models import ImagePayload, WardrobeItem

logger = logging.getLogger(__name__)

INDEX_FILENAME = "wardrobe.json"
IMAGES_DIRNAME = "images"


def _extension_for(media_type: str) -> str:
    if media_type == "image/jpeg":
        return ".jpg"
    return mimetypes.guess_extension(media_type) or ".bin"


class WardrobeStore:
    """Keeps wardrobe items on disk: one ordered JSON index plus one file per image.

    Every write goes through a temporary file followed by an atomic rename, so
    an interrupted ``put`` or ``delete`` never leaves a partially written item
    visible to readers.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root)
        self._images_root = self._root / IMAGES_DIRNAME
        self._images_root.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()
        self._items: Dict[str, WardrobeItem] | None = None

    @property
    def root(self) -> Path:
        return self._root

    def _index_path(self) -> Path:
        return self._root / INDEX_FILENAME

    def _image_path(self, item_id: str, media_type: str) -> Path:
        digest = hashlib.sha256(item_id.encode("utf-8")).hexdigest()
        return self._images_root / f"{digest}{_extension_for(media_type)}"

    async def put(self, item: WardrobeItem) -> WardrobeItem:
        """Insert a new item; an existing id is a hard conflict."""

        async with self._lock:
            items = await self._ensure_loaded()
            if item.id in items:
                raise DuplicateId(item.id)
            image_path = self._image_path(item.id, item.image.media_type)
            await asyncio.to_thread(self._write_atomic, image_path, item.image.data)
            updated = {**items, item.id: item}
            await self._write_index(updated)
            self._items = updated
        logger.info("Stored wardrobe item %s (%s).", item.id, item.category.value)
        return item

    async def get_all(self) -> List[WardrobeItem]:
        """Return every item in insertion order."""

        async with self._lock:
            items = await self._ensure_loaded()
            return list(items.values())

    async def get_by_id(self, item_id: str) -> WardrobeItem:
        """Return the item with ``item_id`` or raise :class:`NotFound`."""

        async with self._lock:
            items = await self._ensure_loaded()
            try:
                return items[item_id]
            except KeyError:
                raise NotFound(item_id) from None

    async def delete(self, item_id: str) -> None:
        """Remove an item; deleting an unknown id is a no-op."""

        async with self._lock:
            items = await self._ensure_loaded()
            item = items.get(item_id)
            if item is None:
                return
            updated = {key: value for key, value in items.items() if key != item_id}
            await self._write_index(updated)
            self._items = updated
            image_path = self._image_path(item.id, item.image.media_type)
            await asyncio.to_thread(image_path.unlink, missing_ok=True)
        logger.info("Deleted wardrobe item %s.", item_id)

    async def _ensure_loaded(self) -> Dict[str, WardrobeItem]:
        if self._items is None:
            self._items = await asyncio.to_thread(self._read_items)
        return self._items

    def _read_items(self) -> Dict[str, WardrobeItem]:
        path = self._index_path()
        if not path.exists():
            return {}
        try:
            records = json.loads(path.read_text(encoding="utf-8"))["items"]
        except (ValueError, KeyError, TypeError) as exc:
            raise StoreError(f"Wardrobe index {path} is unreadable.") from exc
        items: Dict[str, WardrobeItem] = {}
        for record in records:
            image_path = self._images_root / Path(record["image_file"]).name
            if not image_path.exists():
                logger.warning("Image for wardrobe item %s is missing; skipping.", record.get("id"))
                continue
            item = WardrobeItem(
                id=record["id"],
                image=ImagePayload(data=image_path.read_bytes(), media_type=record["media_type"]),
                category=record["category"],
                description=record.get("description", ""),
                tags=tuple(record.get("tags", [])),
                created_at=int(record.get("created_at", 0)),
            )
            items[item.id] = item
        return items

    async def _write_index(self, items: Dict[str, WardrobeItem]) -> None:
        records = [self._to_record(item) for item in items.values()]
        body = json.dumps({"items": records}, ensure_ascii=False, indent=2)
        await asyncio.to_thread(self._write_atomic, self._index_path(), body.encode("utf-8"))

    def _to_record(self, item: WardrobeItem) -> Dict[str, Any]:
        return {
            "id": item.id,
            "category": item.category.value,
            "description": item.description,
            "tags": list(item.tags),
            "created_at": item.created_at,
            "media_type": item.image.media_type,
            "image_file": self._image_path(item.id, item.image.media_type).name,
        }

    @staticmethod
    def _write_atomic(path: Path, body: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(body)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
