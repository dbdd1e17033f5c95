"""Platform capability lookup."""

from sqlcomposer.platform.capabilities import PlatformCapabilities, get_capabilities

__all__ = [
    "PlatformCapabilities",
    "get_capabilities",
]
