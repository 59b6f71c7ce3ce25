"""Application layer for GPU discovery.

Wraps domain services with tracing and metrics.
"""

from gpu_discovery.application.coordinator import GPUDiscoveryCoordinator

__all__ = [
    "GPUDiscoveryCoordinator",
]
