"""Domain entities for GPU discovery.

- GPUDeviceInformation: snapshot of one successful discovery
- PerGPUDeviceInformation: one GPU within that snapshot
- GPUDevice: usable device handed to the resource manager
"""

from gpu_discovery.domain.entities.gpu_device import (
    GPUDevice,
    GPUDeviceInformation,
    PerGPUDeviceInformation,
)

__all__ = [
    "GPUDevice",
    "GPUDeviceInformation",
    "PerGPUDeviceInformation",
]
