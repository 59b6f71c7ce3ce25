"""Domain services for GPU discovery.

Services implement core workflows:
- GPUDiscoverer: nvidia-smi discovery with timeout and failure ceiling
- resolve_binary_path: nvidia-smi lookup with fallback directories
- parse_allowed_devices / devices_from_discovered_info: usable-device reconciliation
"""

from gpu_discovery.domain.services.allowlist import (
    devices_from_discovered_info,
    parse_allowed_devices,
)
from gpu_discovery.domain.services.binary_locator import (
    DEFAULT_BINARY_NAME,
    DEFAULT_BINARY_SEARCH_DIRS,
    resolve_binary_path,
)
from gpu_discovery.domain.services.gpu_discovery import (
    MAX_EXEC_TIMEOUT_SECONDS,
    MAX_REPEATED_ERROR_ALLOWED,
    GPUDiscoverer,
)

__all__ = [
    "GPUDiscoverer",
    "MAX_EXEC_TIMEOUT_SECONDS",
    "MAX_REPEATED_ERROR_ALLOWED",
    "DEFAULT_BINARY_NAME",
    "DEFAULT_BINARY_SEARCH_DIRS",
    "resolve_binary_path",
    "devices_from_discovered_info",
    "parse_allowed_devices",
]
