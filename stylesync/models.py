"""Domain objects shared by the wardrobe store and the recommendation pipeline."""

from __future__ import annotations

import base64
import binascii
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class ClothingCategory(str, Enum):
    """Fixed set of garment categories a wardrobe item can belong to."""

    TOP = "top"
    BOTTOM = "bottom"
    SHOES = "shoes"
    OUTERWEAR = "outerwear"
    ACCESSORY = "accessory"
    ONE_PIECE = "one-piece"

    @classmethod
    def from_label(cls, value: object) -> ClothingCategory | None:
        """Return the member whose value equals ``value`` exactly, if any."""

        for member in cls:
            if member.value == value:
                return member
        return None


DEFAULT_CATEGORY = ClothingCategory.TOP


class Occasion(str, Enum):
    """Occasions the user can dress for."""

    CASUAL = "CASUAL"
    WORK = "WORK"
    DATE = "DATE"
    PARTY = "PARTY"
    GYM = "GYM"
    FORMAL = "FORMAL"


class WeatherType(str, Enum):
    """Weather conditions understood by the stylist."""

    SUNNY = "SUNNY"
    CLOUDY = "CLOUDY"
    RAINY = "RAINY"
    SNOWY = "SNOWY"
    COLD = "COLD"
    HOT = "HOT"


class Gender(str, Enum):
    """Target audience of the recommendation."""

    FEMALE = "FEMALE"
    MALE = "MALE"
    UNISEX = "UNISEX"


_clock_lock = threading.Lock()
_last_timestamp = 0


def monotonic_timestamp() -> int:
    """Return wall-clock milliseconds, strictly increasing within the process."""

    global _last_timestamp
    with _clock_lock:
        now = int(time.time() * 1000)
        if now <= _last_timestamp:
            now = _last_timestamp + 1
        _last_timestamp = now
        return now


@dataclass(slots=True, frozen=True)
class ImagePayload:
    """Binary image content together with its declared media type."""

    data: bytes
    media_type: str = "image/jpeg"

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def as_data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.to_base64()}"

    @classmethod
    def from_data_url(cls, url: str) -> ImagePayload | None:
        """Decode a ``data:<type>;base64,<payload>`` URL, or return ``None``."""

        if not url.startswith("data:") or "," not in url:
            return None
        header, encoded = url.split(",", 1)
        media_type = header[len("data:"):].split(";", 1)[0] or "image/png"
        try:
            return cls(data=base64.b64decode(encoded), media_type=media_type)
        except (ValueError, binascii.Error):
            return None


@dataclass(slots=True, frozen=True)
class WardrobeItem:
    """A clothing item owned by the user."""

    id: str
    image: ImagePayload
    category: ClothingCategory
    description: str
    tags: tuple[str, ...] = ()
    created_at: int = 0

    def __post_init__(self) -> None:
        category = ClothingCategory.from_label(self.category)
        object.__setattr__(self, "category", category or DEFAULT_CATEGORY)
        object.__setattr__(self, "tags", tuple(str(tag) for tag in self.tags))

    @classmethod
    def create(
        cls,
        image: ImagePayload,
        category: ClothingCategory | str,
        description: str,
        tags: Iterable[str] = (),
    ) -> WardrobeItem:
        """Build a new item with a fresh identity and creation timestamp."""

        return cls(
            id=str(uuid.uuid4()),
            image=image,
            category=category,  # type: ignore[arg-type]
            description=description,
            tags=tuple(tags),
            created_at=monotonic_timestamp(),
        )


@dataclass(slots=True, frozen=True)
class UserPreferences:
    """Per-request styling preferences; never persisted."""

    occasion: Occasion | str = Occasion.CASUAL
    weather: WeatherType | str = WeatherType.SUNNY
    gender: Gender | str = Gender.UNISEX
    style_params: str = ""
    use_wardrobe: bool = True
    wardrobe_items: tuple[WardrobeItem, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "wardrobe_items", tuple(self.wardrobe_items))

    def snapshot(self) -> UserPreferences:
        """Return an independent copy suitable for attaching to a recommendation."""

        return UserPreferences(
            occasion=self.occasion,
            weather=self.weather,
            gender=self.gender,
            style_params=self.style_params,
            use_wardrobe=self.use_wardrobe,
            wardrobe_items=tuple(self.wardrobe_items),
        )


@dataclass(slots=True, frozen=True)
class OutfitItem:
    """One garment of a recommended outfit."""

    name: str
    color: str
    type: str
    wardrobe_item_id: str | None = None

    @property
    def is_linked(self) -> bool:
        return bool(self.wardrobe_item_id)


@dataclass(slots=True)
class OutfitRecommendation:
    """A complete outfit suggestion produced by one generation request."""

    id: str
    title: str
    description: str
    items: tuple[OutfitItem, ...]
    reasoning: str
    color_palette: tuple[str, ...]
    context: UserPreferences = field(default_factory=UserPreferences)
    generated_visual: ImagePayload | None = None

    @property
    def has_visual(self) -> bool:
        return self.generated_visual is not None

    def attach_visual(self, visual: ImagePayload) -> None:
        """Store the generated visual; a recommendation accepts only one."""

        if self.generated_visual is not None:
            raise ValueError(f"Recommendation {self.id} already has a generated visual.")
        self.generated_visual = visual

    def linked_ids(self) -> list[str]:
        return [item.wardrobe_item_id for item in self.items if item.wardrobe_item_id]


__all__ = [
    "ClothingCategory",
    "DEFAULT_CATEGORY",
    "Gender",
    "ImagePayload",
    "Occasion",
    "OutfitItem",
    "OutfitRecommendation",
    "UserPreferences",
    "WardrobeItem",
    "WeatherType",
    "monotonic_timestamp",
]
