"""Reconcile discovered GPUs with the operator's allowed-devices setting.

Two sources produce the usable-device list:

- automatic discovery: every GPU of the last successful nvidia-smi report,
  indexed by position;
- a manual value such as ``"0:0,1:1"``: comma-separated ``<index>:<minorNumber>``
  pairs, validated strictly and kept in input order.
"""

from __future__ import annotations

import logging
import re

from gpu_discovery.domain.entities.gpu_device import GPUDevice, GPUDeviceInformation
from gpu_discovery.domain.exceptions import GPUDeviceSpecificationError
from gpu_discovery.domain.value_objects.gpu_identifiers import DeviceIndex, MinorNumber

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def devices_from_discovered_info(info: GPUDeviceInformation) -> list[GPUDevice]:
    """Build usable devices from a discovery snapshot.

    Minor numbers are passed through as reported.
    """
    logger.debug(f"Found {info.gpu_count} GPU devices")
    return [
        GPUDevice(index=DeviceIndex(i), minor_number=gpu.minor_number)
        for i, gpu in enumerate(info.gpus)
    ]


def parse_allowed_devices(allowed_devices: str) -> list[GPUDevice]:
    """Parse a manual allowed-devices value.

    Args:
        allowed_devices: Comma-separated ``<index>:<minorNumber>`` entries.

    Returns:
        Devices in the order they were written.

    Raises:
        GPUDeviceSpecificationError: If the value is empty, an entry is
            malformed, or an entry is repeated.
    """
    if not allowed_devices.strip():
        raise GPUDeviceSpecificationError.empty_value()

    devices: list[GPUDevice] = []
    for entry in allowed_devices.split(","):
        if not entry.strip():
            continue

        parts = entry.strip().split(":")
        if len(parts) != 2:
            raise GPUDeviceSpecificationError.wrong_value(entry, allowed_devices)

        device = _parse_device(entry, parts, allowed_devices)
        if device in devices:
            raise GPUDeviceSpecificationError.duplicate_value(entry, allowed_devices)
        devices.append(device)

    logger.info(f"Allowed GPU devices: {', '.join(str(d) for d in devices)}")
    return devices


def _parse_device(entry: str, parts: list[str], allowed_devices: str) -> GPUDevice:
    # Optional sign and ASCII digits only; int() alone would take "1_0" or " 1"
    if not all(_INTEGER_PATTERN.fullmatch(part) for part in parts):
        raise GPUDeviceSpecificationError.wrong_value(entry, allowed_devices)
    return GPUDevice(index=DeviceIndex(int(parts[0])), minor_number=MinorNumber(int(parts[1])))
