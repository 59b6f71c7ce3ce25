"""Inbound port interfaces for GPU discovery.

Inbound ports define what the system offers to the resource-manager plugin.
Adapters expose these over REST.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from gpu_discovery.domain.entities.gpu_device import GPUDevice, GPUDeviceInformation

if TYPE_CHECKING:
    from gpu_discovery.infrastructure.config import DiscoveryConfig


class GPUDiscoveryAPI(Protocol):
    """Main API offered by GPU discovery."""

    def initialize(self, config: DiscoveryConfig) -> None:
        """Locate nvidia-smi and attempt a first discovery.

        Args:
            config: Discovery configuration.
        """
        ...

    def get_gpu_device_information(self) -> GPUDeviceInformation:
        """Run discovery now.

        Returns:
            The freshly discovered device information.
        """
        ...

    def get_usable_devices(self) -> list[GPUDevice]:
        """Get the GPUs the resource manager may schedule onto.

        Returns:
            Usable devices, in order.
        """
        ...

    @property
    def initialized(self) -> bool:
        """Whether initialize() has been called."""
        ...

    @property
    def last_discovered_gpu_information(self) -> Optional[GPUDeviceInformation]:
        """Last successful discovery, or None if it never succeeded."""
        ...

    @property
    def consecutive_failures(self) -> int:
        """Failed discoveries since the last success."""
        ...

    @property
    def path_of_gpu_binary(self) -> Optional[str]:
        """Resolved nvidia-smi path, or None if it was not found."""
        ...

    @property
    def environment(self) -> dict[str, str]:
        """Environment added when running nvidia-smi."""
        ...
