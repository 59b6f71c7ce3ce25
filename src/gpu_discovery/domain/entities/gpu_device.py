"""GPU device entities produced by discovery and reconciliation.

GPUDeviceInformation is the immutable snapshot of one successful nvidia-smi
report. GPUDevice is the unit exchanged with the resource manager: a position
in the usable-device list paired with the device minor number.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from gpu_discovery.domain.value_objects.gpu_identifiers import (
    DeviceIndex,
    MinorNumber,
    PCIBusId,
    device_file_path,
    format_device_spec,
)


@dataclass(frozen=True)
class PerGPUDeviceInformation:
    """Properties of a single GPU as reported by the vendor tool."""
    minor_number: MinorNumber
    product_name: str = ""
    uuid: str = ""
    bus_id: Optional[PCIBusId] = None
    memory_total_mib: Optional[int] = None    # fb_memory_usage/total
    memory_used_mib: Optional[int] = None     # fb_memory_usage/used
    temperature_c: Optional[float] = None     # temperature/gpu_temp
    utilization_percent: Optional[float] = None
    power_draw_w: Optional[float] = None

    @property
    def device_file(self) -> str:
        return device_file_path(self.minor_number)


@dataclass(frozen=True)
class GPUDeviceInformation:
    """Result of one successful discovery invocation."""
    driver_version: str = ""
    gpus: tuple[PerGPUDeviceInformation, ...] = field(default_factory=tuple)

    @property
    def gpu_count(self) -> int:
        return len(self.gpus)

    def __str__(self) -> str:
        products = ", ".join(
            f"{gpu.product_name or 'unknown'} (minor {gpu.minor_number})"
            for gpu in self.gpus
        )
        return (
            f"GPUDeviceInformation(driver_version={self.driver_version!r}, "
            f"gpus=[{products}])"
        )


@dataclass(frozen=True)
class GPUDevice:
    """A GPU the resource manager may schedule onto.

    Equality and hashing use both fields, so two entries naming the same
    index but different minor numbers are distinct devices.
    """
    index: DeviceIndex
    minor_number: MinorNumber

    def __str__(self) -> str:
        return format_device_spec(self.index, self.minor_number)
