"""Domain value objects for GPU discovery.

Value objects are immutable objects without identity that represent
core concepts like device indices and minor numbers.
"""

from gpu_discovery.domain.value_objects.gpu_identifiers import (
    AUTOMATICALLY_DISCOVER_GPU_DEVICES,
    DeviceIndex,
    MinorNumber,
    PCIBusId,
    device_file_path,
    format_device_spec,
)

__all__ = [
    "AUTOMATICALLY_DISCOVER_GPU_DEVICES",
    "DeviceIndex",
    "MinorNumber",
    "PCIBusId",
    "device_file_path",
    "format_device_spec",
]
