"""Contract every generation backend must satisfy."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from stylesync.models import ImagePayload


@runtime_checkable
class GenerationCapability(Protocol):
    """Classification, structured recommendation and image synthesis operations.

    Implementations raise :class:`stylesync.errors.CapabilityFailure` (or its
    ``ValidationFailure`` subclass) for transport and decoding problems.
    """

    async def classify_image(self, image: ImagePayload, instruction: str) -> Mapping[str, Any]:
        """Return the decoded JSON object describing the garment in ``image``."""
        ...

    async def generate_recommendations(
        self,
        prompt: str,
        *,
        system_instruction: str,
        schema: Mapping[str, Any],
    ) -> Any:
        """Return the decoded JSON document produced for ``prompt``."""
        ...

    async def generate_image(self, prompt: str, *, aspect_ratio: str) -> ImagePayload | None:
        """Return a generated image, or ``None`` when the model produced none."""
        ...

    async def close(self) -> None:
        ...
