"""Pytest configuration and shared fixtures for GPU discovery tests."""

from __future__ import annotations

import os
import stat
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from gpu_discovery.domain.entities.gpu_device import (
    GPUDeviceInformation,
    PerGPUDeviceInformation,
)
from gpu_discovery.domain.exceptions import DeviceInformationParseError, DiscoveryExecutionError
from gpu_discovery.domain.services.gpu_discovery import GPUDiscoverer
from gpu_discovery.domain.value_objects.gpu_identifiers import MinorNumber
from gpu_discovery.infrastructure.config import Config, DiscoveryConfig
from gpu_discovery.infrastructure.container import Container


SAMPLE_NVIDIA_SMI_XML = """<?xml version="1.0" ?>
<!DOCTYPE nvidia_smi_log SYSTEM "nvsmi_device_v11.dtd">
<nvidia_smi_log>
    <timestamp>Mon Oct 19 10:15:02 2026</timestamp>
    <driver_version>535.104.05</driver_version>
    <attached_gpus>2</attached_gpus>
    <gpu id="00000000:04:00.0">
        <product_name>Tesla P100-PCIE-12GB</product_name>
        <uuid>GPU-28604e81-21ec-cc48-6759-bf2648b22e16</uuid>
        <minor_number>0</minor_number>
        <fb_memory_usage>
            <total>12193 MiB</total>
            <used>0 MiB</used>
            <free>12193 MiB</free>
        </fb_memory_usage>
        <utilization>
            <gpu_util>0 %</gpu_util>
        </utilization>
        <temperature>
            <gpu_temp>31 C</gpu_temp>
        </temperature>
        <power_readings>
            <power_draw>24.84 W</power_draw>
        </power_readings>
    </gpu>
    <gpu id="00000000:82:00.0">
        <product_name>Tesla P100-PCIE-12GB</product_name>
        <uuid>GPU-46915a82-3fd2-8e11-ae26-a80b607c04f3</uuid>
        <minor_number>1</minor_number>
        <fb_memory_usage>
            <total>12193 MiB</total>
            <used>1024 MiB</used>
            <free>11169 MiB</free>
        </fb_memory_usage>
        <utilization>
            <gpu_util>N/A</gpu_util>
        </utilization>
        <temperature>
            <gpu_temp>34 C</gpu_temp>
        </temperature>
        <power_readings>
            <power_draw>N/A</power_draw>
        </power_readings>
    </gpu>
</nvidia_smi_log>
"""


def make_device_information(*minor_numbers: int) -> GPUDeviceInformation:
    """Build device information with one GPU per minor number."""
    return GPUDeviceInformation(
        driver_version="535.104.05",
        gpus=tuple(
            PerGPUDeviceInformation(
                minor_number=MinorNumber(minor),
                product_name="Tesla P100-PCIE-12GB",
            )
            for minor in minor_numbers
        ),
    )


class FakeCommandRunner:
    """Command runner returning canned output or raising canned errors."""

    def __init__(self, output: str = SAMPLE_NVIDIA_SMI_XML) -> None:
        self.output = output
        self.error: Exception | None = None
        self.calls: list[tuple[list[str], dict[str, str], float]] = []

    def run(
        self,
        command: Sequence[str],
        environment: Mapping[str, str],
        timeout_seconds: float,
    ) -> str:
        self.calls.append((list(command), dict(environment), timeout_seconds))
        if self.error is not None:
            raise self.error
        return self.output

    def fail_with(self, message: str = "nvidia-smi exited with code 9") -> None:
        self.error = DiscoveryExecutionError(message)

    def succeed(self) -> None:
        self.error = None


class FakeParser:
    """Parser returning canned device information."""

    def __init__(self, info: GPUDeviceInformation | None = None) -> None:
        self.info = info or make_device_information(0, 1)
        self.error: Exception | None = None
        self.outputs: list[str] = []

    def parse(self, output: str) -> GPUDeviceInformation:
        self.outputs.append(output)
        if self.error is not None:
            raise self.error
        return self.info

    def fail_with(self, message: str = "not xml") -> None:
        self.error = DeviceInformationParseError(message)


def write_executable(path: Path, script: str) -> Path:
    """Write a shell script and mark it executable."""
    path.write_text(script)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def reset_container():
    """Reset the DI container before each test."""
    Container.reset()
    yield
    Container.reset()


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration."""
    return Config()


@pytest.fixture
def fake_binary(tmp_path: Path) -> Path:
    """A file standing in for nvidia-smi; only its existence matters."""
    binary = tmp_path / "nvidia-smi"
    binary.write_text("")
    return binary


@pytest.fixture
def command_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def parser() -> FakeParser:
    return FakeParser()


@pytest.fixture
def discoverer(command_runner: FakeCommandRunner, parser: FakeParser, tmp_path: Path) -> GPUDiscoverer:
    """Uninitialized discoverer with fakes and an empty fallback directory."""
    return GPUDiscoverer(
        command_runner=command_runner,
        parser=parser,
        search_dirs=[str(tmp_path / "empty")],
    )


@pytest.fixture
def discovery_config(fake_binary: Path) -> DiscoveryConfig:
    """Discovery configuration pointing at the fake binary."""
    return DiscoveryConfig(path_to_executable=str(fake_binary))


# Pytest markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "gpu: mark test as requiring GPU")


requires_posix_shell = pytest.mark.skipif(
    os.name != "posix" or not os.path.exists("/bin/sh"),
    reason="requires a POSIX shell",
)
