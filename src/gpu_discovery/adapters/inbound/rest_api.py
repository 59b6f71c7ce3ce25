"""FastAPI REST adapter for GPU discovery.

Exposes the last discovered GPU information and the usable-device list.

Usage:
    from gpu_discovery.adapters.inbound.rest_api import create_app, run_server

    app = create_app(coordinator)
    run_server(coordinator, metrics, host="0.0.0.0", port=8080)
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from gpu_discovery.application.coordinator import GPUDiscoveryCoordinator
from gpu_discovery.domain.entities.gpu_device import GPUDeviceInformation
from gpu_discovery.domain.exceptions import GPUDeviceSpecificationError, GPUDiscoveryError
from gpu_discovery.infrastructure.metrics import MetricsRegistry


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    initialized: bool
    binary_path: Optional[str]
    allowed_devices: Optional[str]
    consecutive_failures: int
    discovered_gpus: Optional[int]


class GPUInfoResponse(BaseModel):
    """Single discovered GPU."""

    minor_number: int
    product_name: str
    uuid: str
    bus_id: Optional[str]
    memory_total_mib: Optional[int]
    memory_used_mib: Optional[int]
    temperature_c: Optional[float]
    utilization_percent: Optional[float]
    power_draw_w: Optional[float]


class DeviceInformationResponse(BaseModel):
    """Discovered device information."""

    driver_version: str
    gpu_count: int
    gpus: list[GPUInfoResponse]


class UsableDeviceResponse(BaseModel):
    """GPU usable by the resource manager."""

    index: int
    minor_number: int


def _to_response(info: GPUDeviceInformation) -> DeviceInformationResponse:
    return DeviceInformationResponse(
        driver_version=info.driver_version,
        gpu_count=info.gpu_count,
        gpus=[
            GPUInfoResponse(
                minor_number=gpu.minor_number,
                product_name=gpu.product_name,
                uuid=gpu.uuid,
                bus_id=gpu.bus_id,
                memory_total_mib=gpu.memory_total_mib,
                memory_used_mib=gpu.memory_used_mib,
                temperature_c=gpu.temperature_c,
                utilization_percent=gpu.utilization_percent,
                power_draw_w=gpu.power_draw_w,
            )
            for gpu in info.gpus
        ],
    )


def create_app(
    coordinator: GPUDiscoveryCoordinator,
    metrics: Optional[MetricsRegistry] = None,
) -> FastAPI:
    """Create FastAPI application with GPU discovery endpoints.

    Args:
        coordinator: GPUDiscoveryCoordinator instance.
        metrics: Registry served on /metrics; the endpoint is omitted when None.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="GPU Discovery API",
        description="nvidia-smi based GPU discovery and allowed-devices reconciliation",
        version="1.0.0",
    )

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check():
        """Check discovery health status."""
        stats = coordinator.get_status()
        if not stats["initialized"]:
            state = "initializing"
        elif stats["discovered_gpus"] is None:
            state = "degraded"
        else:
            state = "healthy"
        return HealthResponse(status=state, **stats)

    @app.get("/gpus", response_model=DeviceInformationResponse, tags=["GPUs"])
    def get_device_information():
        """Get the last successfully discovered GPU information."""
        info = coordinator.get_device_information()
        if info is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="GPU discovery has not succeeded yet",
            )
        return _to_response(info)

    @app.post("/gpus/discover", response_model=DeviceInformationResponse, tags=["GPUs"])
    def discover():
        """Run GPU discovery now."""
        try:
            info = coordinator.refresh()
        except GPUDiscoveryError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
            )
        return _to_response(info)

    @app.get("/gpus/usable", response_model=list[UsableDeviceResponse], tags=["GPUs"])
    def get_usable_devices():
        """Get the GPUs the resource manager may schedule onto."""
        try:
            devices = coordinator.get_usable_devices()
        except GPUDeviceSpecificationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except GPUDiscoveryError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
            )
        return [
            UsableDeviceResponse(index=d.index, minor_number=d.minor_number)
            for d in devices
        ]

    if metrics is not None:

        @app.get("/metrics", response_class=PlainTextResponse, tags=["System"])
        async def export_metrics():
            """Prometheus metrics."""
            return metrics.export()

    return app


def run_server(
    coordinator: GPUDiscoveryCoordinator,
    metrics: Optional[MetricsRegistry] = None,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> None:
    """Run the REST API server.

    Args:
        coordinator: The discovery coordinator.
        metrics: Registry served on /metrics.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(coordinator, metrics=metrics)
    # Keep the structlog handlers installed by setup_logging
    uvicorn.run(app, host=host, port=port, log_config=None)
