"""Process-scoped access to the generation capability."""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable

from stylesync.api.aitunnel_client import AITunnelClient
from stylesync.api.capability import GenerationCapability
from stylesync.config.settings import StylistSettings, get_settings
from stylesync.errors import CredentialsMissing

logger = logging.getLogger(__name__)

CapabilityFactory = Callable[[StylistSettings], GenerationCapability]


class CapabilityProvider:
    """Builds the capability client once and hands out the cached instance.

    ``reset`` discards the cached client and settings so that the next ``get``
    re-reads credentials; call it whenever the API key changes.
    """

    def __init__(
        self,
        settings_factory: Callable[[], StylistSettings] = get_settings,
        factory: CapabilityFactory = AITunnelClient,
    ) -> None:
        self._settings_factory = settings_factory
        self._factory = factory
        self._settings: StylistSettings | None = None
        self._client: GenerationCapability | None = None

    @property
    def settings(self) -> StylistSettings:
        if self._settings is None:
            self._settings = self._settings_factory()
        return self._settings

    def get(self) -> GenerationCapability:
        """Return the shared client or raise :class:`CredentialsMissing`."""

        if self._client is None:
            settings = self.settings
            if not settings.has_credentials:
                logger.error("Generation capability requested without an API key.")
                raise CredentialsMissing()
            self._client = self._factory(settings)
        return self._client

    async def set_api_key(self, api_key: str) -> None:
        """Replace the configured API key and rebuild the client on next use."""

        current = self.settings
        await self._drop_client()
        self._settings = dataclasses.replace(current, api_key=api_key)

    async def reset(self) -> None:
        """Close the cached client and forget cached settings."""

        await self._drop_client()
        self._settings = None
        if self._settings_factory is get_settings:
            get_settings.cache_clear()

    async def _drop_client(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            logger.info("Discarding cached generation client.")
            await client.close()
