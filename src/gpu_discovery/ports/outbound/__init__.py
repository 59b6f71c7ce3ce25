"""Outbound ports - External dependency interfaces for GPU discovery.

Outbound ports define the interfaces for the external process and the
report parser that the discoverer depends on.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from gpu_discovery.domain.entities.gpu_device import GPUDeviceInformation


# =============================================================================
# Command Runner Port
# =============================================================================


class CommandRunnerPort(Protocol):
    """Protocol for running an external command to completion.

    Thread Safety:
        Implementations must not share mutable state between calls.
    """

    def run(
        self,
        command: Sequence[str],
        environment: Mapping[str, str],
        timeout_seconds: float,
    ) -> str:
        """Run a command and return its standard output.

        Args:
            command: Executable followed by its arguments.
            environment: Variables added to the inherited process environment.
            timeout_seconds: Hard limit; the process is killed when exceeded.

        Returns:
            Decoded standard output.

        Raises:
            DiscoveryExecutionError: If the command cannot start, times out
                or exits with a non-zero status.
        """
        ...


# =============================================================================
# Device Information Parser Port
# =============================================================================


class DeviceInformationParserPort(Protocol):
    """Protocol for turning raw tool output into device information."""

    def parse(self, output: str) -> GPUDeviceInformation:
        """Parse the report.

        Raises:
            DeviceInformationParseError: If the output is not a valid report.
        """
        ...


__all__ = [
    "CommandRunnerPort",
    "DeviceInformationParserPort",
]
