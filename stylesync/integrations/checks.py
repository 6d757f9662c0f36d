"""Connectivity checks for the generation capability and the wardrobe store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from stylesync.api.aitunnel_client import AITunnelClient
from stylesync.config.settings import StylistSettings, get_settings
from stylesync.errors import StylistError
from stylesync.storage import WardrobeStore


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except (StylistError, OSError) as exc:
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Service responded with non-success status.",
    )


async def check_capability(settings: StylistSettings | None = None) -> IntegrationCheckResult:
    """Ping the AITunnel model listing and return the result."""

    resolved = settings or get_settings()

    async def _ping() -> bool:
        client = AITunnelClient(resolved)
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="AITunnel",
        factory=_ping,
        success_message="AITunnel API is reachable.",
    )


async def check_wardrobe_store(settings: StylistSettings | None = None) -> IntegrationCheckResult:
    """Load the wardrobe index and confirm the root accepts writes."""

    root = Path((settings or get_settings()).wardrobe_root)

    async def _probe() -> bool:
        store = WardrobeStore(root)
        await store.get_all()
        return os.access(store.root, os.W_OK)

    return await _run_check(
        name="Wardrobe store",
        factory=_probe,
        success_message=f"Wardrobe store at {root} is readable and writable.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks."""

    return [await check_capability(), await check_wardrobe_store()]
