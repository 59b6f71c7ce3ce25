"""Inbound ports - interfaces offered by GPU discovery."""

from gpu_discovery.ports.inbound.api import GPUDiscoveryAPI

__all__ = [
    "GPUDiscoveryAPI",
]
