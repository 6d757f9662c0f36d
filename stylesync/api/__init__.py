"""Generation capability clients."""

from .aitunnel_client import AITunnelClient
from .capability import GenerationCapability
from .provider import CapabilityProvider

__all__ = ["AITunnelClient", "CapabilityProvider", "GenerationCapability"]
