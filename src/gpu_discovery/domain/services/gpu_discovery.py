"""GPU discovery service using the nvidia-smi XML report.

This service locates nvidia-smi, runs it under a hard timeout, keeps the last
successful report and turns either that report or the operator's
allowed-devices setting into the list of GPUs the resource manager may use.

Failure handling:
    - every failed run (execution or parse) increments a consecutive-failure
      counter; any success resets it to zero
    - once the counter reaches MAX_REPEATED_ERROR_ALLOWED, discovery is
      disabled and no further process is started
    - the report cache only changes on success, so None always means
      "discovery never succeeded"

All public operations share one lock, so concurrent callers observe a
serialized history of discovery runs and cache reads.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional

from gpu_discovery.domain.entities.gpu_device import GPUDevice, GPUDeviceInformation
from gpu_discovery.domain.exceptions import (
    DeviceInformationParseError,
    DiscoveryConfigurationError,
    DiscoveryDisabledError,
    DiscoveryExecutionError,
    GPUDiscoveryError,
    NotInitializedError,
)
from gpu_discovery.domain.services.allowlist import (
    devices_from_discovered_info,
    parse_allowed_devices,
)
from gpu_discovery.domain.services.binary_locator import (
    DEFAULT_BINARY_SEARCH_DIRS,
    PATH_TO_EXECUTABLE_SETTING,
    resolve_binary_path,
)
from gpu_discovery.domain.value_objects.gpu_identifiers import (
    AUTOMATICALLY_DISCOVER_GPU_DEVICES,
)
from gpu_discovery.ports.outbound import CommandRunnerPort, DeviceInformationParserPort

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gpu_discovery.infrastructure.config import DiscoveryConfig

logger = logging.getLogger(__name__)

# Command should not run more than 10 seconds
MAX_EXEC_TIMEOUT_SECONDS = 10.0
MAX_REPEATED_ERROR_ALLOWED = 10

ALLOWED_DEVICES_SETTING = "GPU_DISCOVERY_DISCOVERY__ALLOWED_DEVICES"


class GPUDiscoverer:
    """Discover GPUs with nvidia-smi and resolve the usable-device list.

    One instance is created per process and shared by every caller; it must
    be initialized before any other operation is valid.
    """

    def __init__(
        self,
        command_runner: CommandRunnerPort,
        parser: DeviceInformationParserPort,
        search_dirs: Sequence[str] = DEFAULT_BINARY_SEARCH_DIRS,
    ) -> None:
        """Create an uninitialized discoverer.

        Args:
            command_runner: Runs nvidia-smi with a timeout.
            parser: Turns the XML report into device information.
            search_dirs: Fallback directories searched for nvidia-smi.
        """
        self._command_runner = command_runner
        self._parser = parser
        self._search_dirs = tuple(search_dirs)

        self._lock = threading.RLock()
        self._config: Optional[DiscoveryConfig] = None
        self._path_of_gpu_binary: Optional[str] = None
        self._environment: dict[str, str] = {}
        self._num_of_error_execution_since_last_succeed = 0
        self._last_discovered_gpu_information: Optional[GPUDeviceInformation] = None

    def initialize(self, config: DiscoveryConfig) -> None:
        """Store configuration, locate nvidia-smi and try one discovery.

        The diagnostic discovery never raises; a broken tool must not prevent
        the host process from starting.
        """
        with self._lock:
            self._config = config
            self._environment = dict(config.environment)
            self._num_of_error_execution_since_last_succeed = 0
            self._path_of_gpu_binary = resolve_binary_path(
                config.path_to_executable, self._search_dirs
            )

            try:
                logger.info("Trying to discover GPU information ...")
                info = self.get_gpu_device_information()
                logger.info(str(info))
            except GPUDiscoveryError as e:
                logger.warning(
                    f"Failed to discover GPU information from system, "
                    f"exception message: {e} continue..."
                )

    def get_gpu_device_information(self) -> GPUDeviceInformation:
        """Run nvidia-smi once and parse its report.

        Returns:
            The freshly discovered device information.

        Raises:
            NotInitializedError: If initialize() was never called.
            DiscoveryConfigurationError: If no executable was found.
            DiscoveryDisabledError: If too many consecutive runs failed.
            DiscoveryExecutionError: If the process failed or timed out.
            DeviceInformationParseError: If the report could not be parsed.
        """
        with self._lock:
            self._validate_initialized()

            if self._path_of_gpu_binary is None:
                raise DiscoveryConfigurationError(
                    f"Failed to find GPU discovery executable, please double check "
                    f"{PATH_TO_EXECUTABLE_SETTING} setting."
                )

            if self._num_of_error_execution_since_last_succeed >= MAX_REPEATED_ERROR_ALLOWED:
                msg = (
                    f"Failed to execute GPU device information detection script for "
                    f"{MAX_REPEATED_ERROR_ALLOWED} times, skip following executions."
                )
                logger.error(msg)
                raise DiscoveryDisabledError(msg)

            try:
                output = self._command_runner.run(
                    [self._path_of_gpu_binary, "-x", "-q"],
                    self._environment,
                    MAX_EXEC_TIMEOUT_SECONDS,
                )
                info = self._parser.parse(output)
            except DiscoveryExecutionError as e:
                self._num_of_error_execution_since_last_succeed += 1
                logger.debug(
                    f"Failed to execute {self._path_of_gpu_binary} exception message: {e}, continue ..."
                )
                raise
            except DeviceInformationParseError as e:
                self._num_of_error_execution_since_last_succeed += 1
                logger.warning(f"Failed to parse xml output: {e}")
                raise

            self._last_discovered_gpu_information = info
            self._num_of_error_execution_since_last_succeed = 0
            return info

    def get_usable_devices(self) -> list[GPUDevice]:
        """Resolve the GPUs usable by the resource manager.

        Raises:
            NotInitializedError: If initialize() was never called.
            DiscoveryConfigurationError: If automatic discovery is configured
                but has never succeeded.
            GPUDeviceSpecificationError: If the manual value is invalid.
        """
        with self._lock:
            config = self._validate_initialized()
            allowed_devices = config.allowed_devices

            if allowed_devices == AUTOMATICALLY_DISCOVER_GPU_DEVICES:
                return self._devices_from_auto_discovery()
            return parse_allowed_devices(allowed_devices)

    def _devices_from_auto_discovery(self) -> list[GPUDevice]:
        if self._last_discovered_gpu_information is None:
            msg = (
                f"{ALLOWED_DEVICES_SETTING} is set to {AUTOMATICALLY_DISCOVER_GPU_DEVICES}, "
                f"however automatically discovering GPU information failed, please check "
                f"the log for more details, as an alternative, admin can specify "
                f"{ALLOWED_DEVICES_SETTING} manually to enable GPU isolation."
            )
            logger.error(msg)
            raise DiscoveryConfigurationError(msg)
        return devices_from_discovered_info(self._last_discovered_gpu_information)

    def _validate_initialized(self) -> DiscoveryConfig:
        if self._config is None:
            raise NotInitializedError(
                f"Please initialize (call initialize) before use {type(self).__name__}"
            )
        return self._config

    @property
    def initialized(self) -> bool:
        with self._lock:
            return self._config is not None

    @property
    def last_discovered_gpu_information(self) -> Optional[GPUDeviceInformation]:
        """Last successful report, or None if discovery never succeeded."""
        with self._lock:
            return self._last_discovered_gpu_information

    @property
    def consecutive_failures(self) -> int:
        with self._lock:
            return self._num_of_error_execution_since_last_succeed

    @property
    def allowed_devices(self) -> Optional[str]:
        with self._lock:
            return self._config.allowed_devices if self._config else None

    @property
    def path_of_gpu_binary(self) -> Optional[str]:
        return self._path_of_gpu_binary

    @property
    def environment(self) -> dict[str, str]:
        """Variables added to the process environment when running nvidia-smi."""
        return self._environment
