"""Parser for the ``nvidia-smi -x -q`` XML report.

Only ``minor_number`` is required for every ``<gpu>`` element. Descriptive
fields are optional and become None when absent or reported as ``N/A``.

Example report fragment::

    <nvidia_smi_log>
        <driver_version>535.104.05</driver_version>
        <gpu id="00000000:04:00.0">
            <product_name>Tesla P100-PCIE-12GB</product_name>
            <uuid>GPU-28604e81-21ec-cc48-6759-bf2648b22e16</uuid>
            <minor_number>0</minor_number>
            <fb_memory_usage><total>12193 MiB</total><used>0 MiB</used></fb_memory_usage>
            <utilization><gpu_util>0 %</gpu_util></utilization>
            <temperature><gpu_temp>31 C</gpu_temp></temperature>
            <power_readings><power_draw>24.84 W</power_draw></power_readings>
        </gpu>
    </nvidia_smi_log>
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Optional

from gpu_discovery.domain.entities.gpu_device import (
    GPUDeviceInformation,
    PerGPUDeviceInformation,
)
from gpu_discovery.domain.exceptions import DeviceInformationParseError
from gpu_discovery.domain.value_objects.gpu_identifiers import MinorNumber, PCIBusId

ROOT_TAG = "nvidia_smi_log"


class NvidiaSmiXmlParser:
    """Turn nvidia-smi XML output into GPUDeviceInformation."""

    def parse(self, output: str) -> GPUDeviceInformation:
        try:
            root = ET.fromstring(output)
        except ET.ParseError as e:
            raise DeviceInformationParseError(f"Invalid nvidia-smi XML output: {e}") from e

        if root.tag != ROOT_TAG:
            raise DeviceInformationParseError(
                f"Unexpected root element <{root.tag}>, expected <{ROOT_TAG}>"
            )

        gpus = tuple(self._parse_gpu(position, gpu) for position, gpu in enumerate(root.findall("gpu")))
        return GPUDeviceInformation(
            driver_version=_text(root, "driver_version") or "",
            gpus=gpus,
        )

    def _parse_gpu(self, position: int, gpu: ET.Element) -> PerGPUDeviceInformation:
        raw_minor = _text(gpu, "minor_number")
        try:
            minor_number = int(raw_minor) if raw_minor is not None else None
        except ValueError as e:
            raise DeviceInformationParseError(
                f"GPU #{position} has invalid minor_number {raw_minor!r}"
            ) from e
        if minor_number is None:
            raise DeviceInformationParseError(f"GPU #{position} has no minor_number")

        bus_id = gpu.get("id")
        power_draw = _text(gpu, "power_readings/power_draw") or _text(gpu, "gpu_power_readings/power_draw")

        return PerGPUDeviceInformation(
            minor_number=MinorNumber(minor_number),
            product_name=_text(gpu, "product_name") or "",
            uuid=_text(gpu, "uuid") or "",
            bus_id=PCIBusId(bus_id) if bus_id else None,
            memory_total_mib=_as_int(_text(gpu, "fb_memory_usage/total")),
            memory_used_mib=_as_int(_text(gpu, "fb_memory_usage/used")),
            temperature_c=_as_float(_text(gpu, "temperature/gpu_temp")),
            utilization_percent=_as_float(_text(gpu, "utilization/gpu_util")),
            power_draw_w=_as_float(power_draw),
        )


def _text(element: ET.Element, path: str) -> Optional[str]:
    value = element.findtext(path)
    if value is None:
        return None
    value = value.strip()
    if not value or value == "N/A":
        return None
    return value


def _number(value: Optional[str]) -> Optional[str]:
    # Strip the unit suffix, e.g. "12193 MiB" -> "12193"
    if value is None:
        return None
    return value.split()[0]


def _as_int(value: Optional[str]) -> Optional[int]:
    number = _number(value)
    try:
        return int(number) if number is not None else None
    except ValueError:
        return None


def _as_float(value: Optional[str]) -> Optional[float]:
    number = _number(value)
    try:
        return float(number) if number is not None else None
    except ValueError:
        return None
