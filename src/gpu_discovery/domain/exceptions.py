"""Errors raised by GPU discovery and allowed-devices reconciliation."""

from __future__ import annotations


class GPUDiscoveryError(Exception):
    """GPU discovery operation failed."""
    pass


class NotInitializedError(GPUDiscoveryError):
    """Discoverer used before initialize() was called."""
    pass


class DiscoveryConfigurationError(GPUDiscoveryError):
    """Discovery cannot run or be used with the current configuration."""
    pass


class DiscoveryDisabledError(GPUDiscoveryError):
    """Too many consecutive failures; discovery is no longer attempted."""
    pass


class DiscoveryExecutionError(GPUDiscoveryError):
    """The discovery executable failed to start, timed out or exited non-zero."""
    pass


class DeviceInformationParseError(GPUDiscoveryError):
    """Discovery output could not be parsed into device information."""
    pass


class GPUDeviceSpecificationError(GPUDiscoveryError):
    """The operator-supplied allowed-devices value is invalid.

    Messages always carry the offending entry and the full configured value.
    """

    @classmethod
    def empty_value(cls) -> GPUDeviceSpecificationError:
        return cls(
            "Allowed GPU devices were specified with an empty value. "
            "Expected a comma-separated list of <index>:<minorNumber> entries."
        )

    @classmethod
    def wrong_value(cls, device: str, allowed_devices: str) -> GPUDeviceSpecificationError:
        return cls(
            f"Illegal format of individual GPU device: {device!r}. "
            f"Expected <index>:<minorNumber>, allowed devices value was: {allowed_devices!r}"
        )

    @classmethod
    def duplicate_value(cls, device: str, allowed_devices: str) -> GPUDeviceSpecificationError:
        return cls(
            f"GPU device {device!r} is specified more than once. "
            f"Allowed devices value was: {allowed_devices!r}"
        )
