"""Async wrapper around the AITunnel OpenAI-compatible endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence

import httpx
from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, AsyncOpenAI

from stylesync.config.settings import StylistSettings
from stylesync.errors import CapabilityFailure, CredentialsMissing, ValidationFailure
from stylesync.models import ImagePayload

logger = logging.getLogger(__name__)


class AITunnelClient:
    """Implements the generation capability on top of AITunnel chat models."""

    def __init__(self, settings: StylistSettings) -> None:
        if not settings.has_credentials:
            raise CredentialsMissing()

        base_url = settings.base_url.rstrip("/")
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=settings.request_timeout,
            headers={
                "Authorization": f"Bearer {settings.api_key}",
            },
        )
        self._openai = AsyncOpenAI(
            api_key=settings.api_key,
            base_url=base_url,
            timeout=settings.request_timeout,
        )
        self._download_client = httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True)

    async def close(self) -> None:
        """Close the underlying HTTP clients."""

        await self._client.aclose()
        await self._download_client.aclose()
        await self._openai.close()

    async def classify_image(self, image: ImagePayload, instruction: str) -> Mapping[str, Any]:
        """Ask the chat model to describe a garment photo as a JSON object."""

        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": image.as_data_url()}},
                    {"type": "text", "text": instruction},
                ],
            },
        ]
        content = await self._chat(messages, response_format={"type": "json_object"})
        parsed = self._decode_json(content)
        if not isinstance(parsed, Mapping):
            raise ValidationFailure("Classification response is not a JSON object.")
        return parsed

    async def generate_recommendations(
        self,
        prompt: str,
        *,
        system_instruction: str,
        schema: Mapping[str, Any],
    ) -> Any:
        """Request outfit recommendations constrained by a JSON schema."""

        messages = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": prompt},
        ]
        content = await self._chat(
            messages,
            response_format={
                "type": "json_schema",
                "json_schema": {"name": "outfit_recommendations", "schema": dict(schema)},
            },
        )
        return self._decode_json(content)

    async def generate_image(self, prompt: str, *, aspect_ratio: str) -> ImagePayload | None:
        """Generate a single image through the image-capable chat model."""

        payload = {
            "model": self._settings.image_model,
            "messages": [{"role": "user", "content": prompt}],
            "modalities": ["image", "text"],
            "image_config": {"aspect_ratio": aspect_ratio},
        }
        result = await self._request_json("POST", "/chat/completions", json_body=payload)
        image_url = self.image_url_from_payload(result)
        if not image_url:
            return None
        if image_url.startswith("data:"):
            return ImagePayload.from_data_url(image_url)
        if not image_url.startswith(("https://", "http://")):
            logger.warning("Ignoring unsupported image URL scheme: %s", image_url[:40])
            return None
        return await self._download_image(image_url)

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        try:
            models = await self._openai.models.list()
        except APIError as exc:
            raise CapabilityFailure(f"AITunnel model listing failed: {exc}") from exc
        return bool(models.data)

    async def _chat(self, messages: Sequence[Mapping[str, Any]], **kwargs: Any) -> str:
        try:
            response = await self._openai.chat.completions.create(
                model=self._settings.chat_model,
                messages=list(messages),  # type: ignore[arg-type]
                **kwargs,
            )
        except APITimeoutError as exc:
            raise CapabilityFailure("Timed out waiting for AITunnel.") from exc
        except APIStatusError as exc:
            raise CapabilityFailure(
                f"AITunnel returned error {exc.status_code}: {exc.message}",
                status_code=exc.status_code,
            ) from exc
        except (APIConnectionError, APIError) as exc:
            raise CapabilityFailure(f"AITunnel request failed: {exc}") from exc

        if not response.choices:
            raise ValidationFailure("Model returned no choices.")
        content = response.choices[0].message.content
        if not content:
            raise ValidationFailure("Model returned an empty message.")
        return content

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, endpoint, json=json_body)
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:
            raise CapabilityFailure("Timed out waiting for AITunnel.") from exc
        except httpx.HTTPStatusError as exc:
            raise CapabilityFailure(
                f"AITunnel returned error {exc.response.status_code}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise CapabilityFailure(f"AITunnel request failed: {exc}") from exc
        except ValueError as exc:
            raise ValidationFailure("AITunnel returned a non-JSON body.") from exc

    async def _download_image(self, url: str) -> ImagePayload | None:
        try:
            response = await self._download_client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise CapabilityFailure(f"Failed to download generated image: {exc}") from exc
        media_type = response.headers.get("content-type", "image/png").split(";", 1)[0]
        if not response.content:
            return None
        return ImagePayload(data=response.content, media_type=media_type)

    @staticmethod
    def _decode_json(content: str) -> Any:
        text = content.strip()
        if text.startswith("```"):
            text = text.strip("`")
            if text.lower().startswith("json"):
                text = text[4:]
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Model returned malformed JSON: %s", content[:200])
            raise ValidationFailure("Model response is not valid JSON.") from exc

    @staticmethod
    def image_url_from_payload(payload: Any) -> str | None:
        """Extract the image URL (usually a ``data:`` URL) from a chat completions response.

        Any body that does not have the chat completions shape yields ``None``.
        """

        choices = payload.get("choices") if isinstance(payload, Mapping) else None
        if not isinstance(choices, list) or not choices:
            logger.warning("AITunnel image response has no choices.")
            return None
        message = choices[0].get("message") if isinstance(choices[0], Mapping) else None
        if not isinstance(message, Mapping):
            logger.warning("AITunnel image response has no message.")
            return None
        image_url = None

        images = message.get("images")
        if isinstance(images, list) and images and isinstance(images[0], Mapping):
            image_info = images[0].get("image_url")
            if isinstance(image_info, Mapping):
                image_url = image_info.get("url")

        content = message.get("content")
        if image_url is None and isinstance(content, str) and content.startswith("data:"):
            image_url = content
        elif image_url is None and isinstance(content, list):
            for part in content:
                if (
                    isinstance(part, Mapping)
                    and part.get("type") == "image_url"
                    and isinstance(part.get("image_url"), Mapping)
                ):
                    image_url = part["image_url"].get("url")
                    if image_url:
                        break

        if not isinstance(image_url, str) or not image_url:
            logger.warning("AITunnel image response contains no image_url field.")
            return None
        return image_url
