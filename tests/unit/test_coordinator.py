"""Unit tests for the discovery coordinator."""

import pytest

from conftest import make_device_information
from gpu_discovery.application.coordinator import GPUDiscoveryCoordinator
from gpu_discovery.domain.entities.gpu_device import GPUDevice
from gpu_discovery.domain.exceptions import (
    DiscoveryConfigurationError,
    DiscoveryDisabledError,
    DiscoveryExecutionError,
)
from gpu_discovery.domain.services.gpu_discovery import MAX_REPEATED_ERROR_ALLOWED
from gpu_discovery.infrastructure.config import DiscoveryConfig
from gpu_discovery.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def metrics() -> MetricsRegistry:
    return MetricsRegistry()


@pytest.fixture
def coordinator(discoverer, discovery_config, metrics) -> GPUDiscoveryCoordinator:
    return GPUDiscoveryCoordinator(discoverer, discovery_config, metrics=metrics)


def sample(metrics: MetricsRegistry, name: str, labels: dict | None = None) -> float:
    return metrics.registry.get_sample_value(name, labels or {})


@pytest.mark.unit
class TestGPUDiscoveryCoordinator:
    """Test coordinator operations and metrics."""

    def test_initialize_publishes_metrics(self, coordinator, metrics, fake_binary):
        """Test initialization records the first discovery."""
        coordinator.initialize()

        assert sample(metrics, "gpu_discovery_attempts_total", {"result": "success"}) == 1
        assert sample(metrics, "gpu_discovered_devices") == 2
        assert sample(metrics, "gpu_discovery_consecutive_failures") == 0
        assert sample(
            metrics,
            "gpu_discovery_info",
            {"binary_path": str(fake_binary), "allowed_devices": "auto", "driver_version": "535.104.05"},
        ) == 1

    def test_refresh_failure_is_recorded_and_raised(self, coordinator, metrics, command_runner):
        """Test failures propagate and are counted."""
        coordinator.initialize()
        command_runner.fail_with()

        with pytest.raises(DiscoveryExecutionError):
            coordinator.refresh()

        assert sample(metrics, "gpu_discovery_attempts_total", {"result": "failure"}) == 1
        assert sample(metrics, "gpu_discovery_consecutive_failures") == 1
        # Last good result is still reported
        assert sample(metrics, "gpu_discovered_devices") == 2

    def test_unresolved_binary_is_not_a_failed_attempt(self, discoverer, metrics, tmp_path):
        """Test calls refused for configuration are labelled apart from failures."""
        coordinator = GPUDiscoveryCoordinator(
            discoverer, DiscoveryConfig(path_to_executable=str(tmp_path / "missing")), metrics=metrics
        )
        coordinator.initialize()
        with pytest.raises(DiscoveryConfigurationError):
            coordinator.refresh()

        assert sample(metrics, "gpu_discovery_attempts_total", {"result": "unconfigured"}) == 2
        assert sample(metrics, "gpu_discovery_attempts_total", {"result": "failure"}) is None
        assert sample(metrics, "gpu_discovery_duration_seconds_count") == 0

    def test_disabled_discovery_is_not_a_failed_attempt(self, coordinator, metrics, command_runner):
        """Test calls refused by the failure ceiling are labelled disabled."""
        coordinator.initialize()
        command_runner.fail_with()
        for _ in range(MAX_REPEATED_ERROR_ALLOWED):
            with pytest.raises(DiscoveryExecutionError):
                coordinator.refresh()
        with pytest.raises(DiscoveryDisabledError):
            coordinator.refresh()

        assert sample(metrics, "gpu_discovery_attempts_total", {"result": "failure"}) == MAX_REPEATED_ERROR_ALLOWED
        assert sample(metrics, "gpu_discovery_attempts_total", {"result": "disabled"}) == 1
        assert sample(metrics, "gpu_discovery_duration_seconds_count") == MAX_REPEATED_ERROR_ALLOWED + 1

    def test_refresh_success(self, coordinator, metrics, parser):
        """Test refresh returns new information."""
        coordinator.initialize()
        parser.info = make_device_information(0, 1, 2, 3)

        info = coordinator.refresh()

        assert info.gpu_count == 4
        assert sample(metrics, "gpu_discovered_devices") == 4
        # One observation from initialize, one from refresh
        assert sample(metrics, "gpu_discovery_duration_seconds_count") == 2

    def test_usable_devices(self, coordinator, metrics):
        """Test usable devices are returned and counted."""
        coordinator.initialize()

        assert coordinator.get_usable_devices() == [GPUDevice(0, 0), GPUDevice(1, 1)]
        assert sample(metrics, "gpu_usable_devices") == 2

    def test_status(self, coordinator, command_runner, fake_binary):
        """Test status reflects discoverer state."""
        command_runner.fail_with()
        coordinator.initialize()

        assert coordinator.get_status() == {
            "initialized": True,
            "binary_path": str(fake_binary),
            "allowed_devices": "auto",
            "consecutive_failures": 1,
            "discovered_gpus": None,
        }
        assert coordinator.get_device_information() is None

    def test_without_metrics(self, discoverer, fake_binary):
        """Test the coordinator works without a metrics registry."""
        coordinator = GPUDiscoveryCoordinator(
            discoverer,
            DiscoveryConfig(path_to_executable=str(fake_binary), allowed_devices="2:5"),
        )
        coordinator.initialize()
        assert coordinator.get_usable_devices() == [GPUDevice(2, 5)]
        assert coordinator.refresh().gpu_count == 2
