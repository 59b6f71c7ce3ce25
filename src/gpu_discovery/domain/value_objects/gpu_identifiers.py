"""GPU-related type-safe identifiers.

These value objects provide type safety for GPU-related identifiers
using Python's NewType for zero-runtime overhead.
"""

from __future__ import annotations

from typing import NewType

# Position of a GPU in the usable-device list handed to the resource manager
DeviceIndex = NewType("DeviceIndex", int)

# OS device-file minor number (/dev/nvidia<minor>)
MinorNumber = NewType("MinorNumber", int)

# PCI bus identifier as reported by nvidia-smi (e.g., "00000000:04:00.0")
PCIBusId = NewType("PCIBusId", str)

# Sentinel value of the allowed-devices setting that selects automatic discovery
AUTOMATICALLY_DISCOVER_GPU_DEVICES = "auto"


def device_file_path(minor_number: MinorNumber) -> str:
    """Return the device file of a GPU from its minor number."""
    return f"/dev/nvidia{minor_number}"


def format_device_spec(index: DeviceIndex, minor_number: MinorNumber) -> str:
    """Format a device as an ``<index>:<minor>`` allowed-devices entry."""
    return f"{index}:{minor_number}"
