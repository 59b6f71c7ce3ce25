"""Prometheus metrics for GPU discovery."""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)


class MetricsRegistry:
    """GPU discovery metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self.discovery_attempts_total = Counter("gpu_discovery_attempts_total", "Discovery attempts by result", ["result"], registry=self._registry)
        self.discovery_consecutive_failures = Gauge("gpu_discovery_consecutive_failures", "Failed discoveries since last success", registry=self._registry)
        self.discovery_duration_seconds = Histogram("gpu_discovery_duration_seconds", "nvidia-smi run and parse time", buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10), registry=self._registry)
        self.discovered_devices = Gauge("gpu_discovered_devices", "GPUs in the last successful discovery", registry=self._registry)
        self.usable_devices = Gauge("gpu_usable_devices", "GPUs usable by the resource manager", registry=self._registry)

        self.info = Info("gpu_discovery", "Discovery info", registry=self._registry)

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def export(self) -> str:
        """Export metrics in Prometheus text format."""
        return generate_latest(self._registry).decode("utf-8")


_metrics: MetricsRegistry | None = None


def get_metrics() -> MetricsRegistry:
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
