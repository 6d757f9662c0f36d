"""Pillow helpers for wardrobe and sample images."""

from __future__ import annotations

from io import BytesIO

from PIL import Image, ImageColor, ImageDraw, ImageFont, UnidentifiedImageError

from stylesync.models import ImagePayload

PLACEHOLDER_SIZE = 500


def detect_media_type(data: bytes, default: str = "image/jpeg") -> str:
    """Return the MIME type Pillow recognises for ``data``."""

    try:
        with Image.open(BytesIO(data)) as img:
            return Image.MIME.get(img.format or "", default)
    except UnidentifiedImageError:
        return default


def render_placeholder(color: str, text: str, size: int = PLACEHOLDER_SIZE) -> ImagePayload:
    """Draw a flat-colour JPEG tile with a lighter disc and a centred caption."""

    base = ImageColor.getrgb(color)
    img = Image.new("RGB", (size, size), base)
    draw = ImageDraw.Draw(img)
    radius = int(size * 0.4)
    centre = size // 2
    disc = tuple(min(255, channel + (255 - channel) // 5) for channel in base)
    draw.ellipse((centre - radius, centre - radius, centre + radius, centre + radius), fill=disc)
    font = ImageFont.load_default()
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text((centre - (right - left) // 2, centre - (bottom - top) // 2), text, fill="white", font=font)

    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=80)
    return ImagePayload(data=buffer.getvalue(), media_type="image/jpeg")
