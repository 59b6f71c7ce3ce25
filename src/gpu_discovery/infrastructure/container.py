"""Dependency injection container for GPU discovery."""

from dataclasses import dataclass
from typing import ClassVar

import structlog
from opentelemetry import trace

from gpu_discovery.adapters.outbound import NvidiaSmiXmlParser, SubprocessCommandRunner
from gpu_discovery.application.coordinator import GPUDiscoveryCoordinator
from gpu_discovery.domain.services.gpu_discovery import GPUDiscoverer
from gpu_discovery.infrastructure.config import Config, get_config
from gpu_discovery.infrastructure.logging import get_logger, setup_logging
from gpu_discovery.infrastructure.metrics import MetricsRegistry, get_metrics
from gpu_discovery.infrastructure.tracing import setup_tracing


@dataclass
class Container:
    """Dependency injection container for GPU discovery components.

    Owns the process's single GPUDiscoverer; callers receive it from here
    instead of reaching for a global.
    """

    config: Config
    logger: structlog.stdlib.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    discoverer: GPUDiscoverer
    coordinator: GPUDiscoveryCoordinator

    _instance: ClassVar["Container | None"] = None

    @classmethod
    def create(cls) -> "Container":
        """Create and initialize the container with all dependencies."""
        if cls._instance is not None:
            return cls._instance

        config = get_config()
        setup_logging()
        logger = get_logger("container")
        tracer = setup_tracing()
        metrics = get_metrics()

        discoverer = GPUDiscoverer(
            command_runner=SubprocessCommandRunner(),
            parser=NvidiaSmiXmlParser(),
        )
        coordinator = GPUDiscoveryCoordinator(
            discoverer=discoverer,
            config=config.discovery,
            metrics=metrics,
            tracer=tracer,
        )
        coordinator.initialize()

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            discoverer=discoverer,
            coordinator=coordinator,
        )

        logger.info(
            "gpu_discovery_container_initialized",
            environment=config.observability.environment,
            binary_path=discoverer.path_of_gpu_binary,
        )

        return cls._instance

    @classmethod
    def get(cls) -> "Container":
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None


def get_container() -> Container:
    """Get the dependency injection container."""
    return Container.get()
