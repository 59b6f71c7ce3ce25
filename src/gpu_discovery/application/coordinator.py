"""GPU Discovery Application Coordinator.

Wraps the discoverer with tracing and metrics and provides the operations
used by the REST adapter and the resource-manager plugin.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from opentelemetry import trace

from gpu_discovery.domain.entities.gpu_device import GPUDevice, GPUDeviceInformation
from gpu_discovery.domain.exceptions import (
    DiscoveryConfigurationError,
    DiscoveryDisabledError,
    GPUDiscoveryError,
    NotInitializedError,
)
from gpu_discovery.infrastructure.config import DiscoveryConfig
from gpu_discovery.infrastructure.metrics import MetricsRegistry
from gpu_discovery.infrastructure.tracing import get_tracer
from gpu_discovery.ports.inbound.api import GPUDiscoveryAPI

logger = logging.getLogger(__name__)


class GPUDiscoveryCoordinator:
    """Coordinates GPU discovery operations with observability."""

    def __init__(
        self,
        discoverer: GPUDiscoveryAPI,
        config: DiscoveryConfig,
        metrics: Optional[MetricsRegistry] = None,
        tracer: Optional[trace.Tracer] = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            discoverer: GPU discoverer shared by the process.
            config: Discovery configuration passed to the discoverer.
            metrics: Prometheus metrics registry.
            tracer: OpenTelemetry tracer; a no-op tracer is used when None.
        """
        self._discoverer = discoverer
        self._config = config
        self._metrics = metrics
        self._tracer = tracer or get_tracer(__name__)

    def initialize(self) -> None:
        """Initialize the discoverer and publish the first results."""
        start = time.perf_counter()
        with self._tracer.start_as_current_span("gpu_discovery.initialize") as span:
            self._discoverer.initialize(self._config)
            span.set_attribute("gpu.binary_path", self._discoverer.path_of_gpu_binary or "")

        info = self._discoverer.last_discovered_gpu_information
        if self._metrics:
            self._metrics.info.info({
                "binary_path": self._discoverer.path_of_gpu_binary or "",
                "allowed_devices": self._config.allowed_devices,
                "driver_version": info.driver_version if info else "",
            })
            # nvidia-smi only runs at initialize when the binary was resolved
            if self._discoverer.path_of_gpu_binary is None:
                self._metrics.discovery_attempts_total.labels(result="unconfigured").inc()
            else:
                self._metrics.discovery_duration_seconds.observe(time.perf_counter() - start)
                self._metrics.discovery_attempts_total.labels(
                    result="failure" if self._discoverer.consecutive_failures else "success"
                ).inc()
            self._record_state()

        logger.info(f"GPU discovery initialized (binary: {self._discoverer.path_of_gpu_binary})")

    def refresh(self) -> GPUDeviceInformation:
        """Run discovery now.

        Attempts are counted by result: ``success`` and ``failure`` for runs
        of nvidia-smi, ``disabled`` and ``unconfigured`` for calls rejected
        before anything ran.

        Raises:
            GPUDiscoveryError: Propagated from the discoverer.
        """
        start = time.perf_counter()
        with self._tracer.start_as_current_span("gpu_discovery.discover") as span:
            try:
                info = self._discoverer.get_gpu_device_information()
            except GPUDiscoveryError as e:
                span.record_exception(e)
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                if self._metrics:
                    result = _rejected_result(e)
                    if result is None:
                        result = "failure"
                        self._metrics.discovery_duration_seconds.observe(time.perf_counter() - start)
                    self._metrics.discovery_attempts_total.labels(result=result).inc()
                    self._record_state()
                raise
            span.set_attribute("gpu.count", info.gpu_count)

        if self._metrics:
            self._metrics.discovery_duration_seconds.observe(time.perf_counter() - start)
            self._metrics.discovery_attempts_total.labels(result="success").inc()
            self._record_state()
        return info

    def get_usable_devices(self) -> list[GPUDevice]:
        """Get the GPUs usable by the resource manager.

        Raises:
            GPUDiscoveryError: If discovery never succeeded in auto mode or
                the allowed-devices value is invalid.
        """
        with self._tracer.start_as_current_span("gpu_discovery.usable_devices") as span:
            devices = self._discoverer.get_usable_devices()
            span.set_attribute("gpu.usable_count", len(devices))

        if self._metrics:
            self._metrics.usable_devices.set(len(devices))
        return devices

    def get_device_information(self) -> Optional[GPUDeviceInformation]:
        """Last successful discovery result without running nvidia-smi."""
        return self._discoverer.last_discovered_gpu_information

    def get_status(self) -> dict[str, Any]:
        """Get discovery status."""
        info = self._discoverer.last_discovered_gpu_information
        return {
            "initialized": self._discoverer.initialized,
            "binary_path": self._discoverer.path_of_gpu_binary,
            "allowed_devices": self._config.allowed_devices,
            "consecutive_failures": self._discoverer.consecutive_failures,
            "discovered_gpus": info.gpu_count if info else None,
        }

    def _record_state(self) -> None:
        info = self._discoverer.last_discovered_gpu_information
        self._metrics.discovery_consecutive_failures.set(self._discoverer.consecutive_failures)
        self._metrics.discovered_devices.set(info.gpu_count if info else 0)


def _rejected_result(error: GPUDiscoveryError) -> Optional[str]:
    """Metric label for a call refused before nvidia-smi ran, else None."""
    if isinstance(error, DiscoveryDisabledError):
        return "disabled"
    if isinstance(error, (DiscoveryConfigurationError, NotInitializedError)):
        return "unconfigured"
    return None
