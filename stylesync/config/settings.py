"""Settings loader for the stylist pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate environment variables from a .env file if present."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(slots=True, frozen=True)
class StylistSettings:
    """Settings required by the wardrobe store and the generation capability."""

    api_key: str = ""
    base_url: str = "https://api.aitunnel.ru/v1"
    chat_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    image_aspect_ratio: str = "3:4"
    wardrobe_root: str = "storage/wardrobe"
    request_timeout: float = 60.0
    recommendation_count: int = 3
    response_language: str = "Traditional Chinese"
    log_level: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key.strip())


def _build_settings() -> StylistSettings:
    _load_env_file()
    return StylistSettings(
        api_key=os.getenv("STYLESYNC_API_KEY", os.getenv("AITUNNEL_API_KEY", "")),
        base_url=os.getenv("AITUNNEL_BASE_URL", "https://api.aitunnel.ru/v1"),
        chat_model=os.getenv("STYLESYNC_CHAT_MODEL", "gemini-2.5-flash"),
        image_model=os.getenv("STYLESYNC_IMAGE_MODEL", "gemini-2.5-flash-image"),
        image_aspect_ratio=os.getenv("STYLESYNC_IMAGE_ASPECT_RATIO", "3:4"),
        wardrobe_root=os.getenv("STYLESYNC_WARDROBE_ROOT", "storage/wardrobe"),
        request_timeout=float(os.getenv("STYLESYNC_REQUEST_TIMEOUT", "60")),
        recommendation_count=int(os.getenv("STYLESYNC_RECOMMENDATION_COUNT", "3")),
        response_language=os.getenv("STYLESYNC_RESPONSE_LANGUAGE", "Traditional Chinese"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache(maxsize=1)
def get_settings() -> StylistSettings:
    """Return cached settings instance."""

    return _build_settings()
