"""Locate the nvidia-smi executable.

The configured path wins when it exists. A configured directory is treated as
the directory holding nvidia-smi. Otherwise a fixed set of directories is
searched, covering distribution packages and nvidia-docker images.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_BINARY_NAME = "nvidia-smi"

# Searched in order when the configured path does not exist
DEFAULT_BINARY_SEARCH_DIRS: tuple[str, ...] = (
    "/usr/bin",
    "/bin",
    "/usr/local/nvidia/bin",
)

PATH_TO_EXECUTABLE_SETTING = "GPU_DISCOVERY_DISCOVERY__PATH_TO_EXECUTABLE"


def resolve_binary_path(
    configured_path: str,
    search_dirs: Sequence[str] = DEFAULT_BINARY_SEARCH_DIRS,
    binary_name: str = DEFAULT_BINARY_NAME,
) -> Optional[str]:
    """Resolve the absolute path of the discovery executable.

    Args:
        configured_path: Operator-configured path; may be empty, a file or a directory.
        search_dirs: Fallback directories, tried in order.
        binary_name: Executable name looked up in directories.

    Returns:
        Absolute path to use, or None when nothing could be found.
    """
    path = configured_path or binary_name

    if not os.path.exists(path):
        for directory in search_dirs:
            candidate = os.path.join(directory, binary_name)
            if os.path.exists(candidate):
                resolved = os.path.abspath(candidate)
                logger.info(f"Using {binary_name} found at {resolved}")
                return resolved

        logger.warning(
            f"Failed to locate binary at {os.path.abspath(path)}, please double check "
            f"[{PATH_TO_EXECUTABLE_SETTING}] setting. Searched {', '.join(search_dirs)} "
            f"for {binary_name} without success"
        )
        return None

    if os.path.isdir(path):
        path = os.path.join(path, binary_name)
        logger.warning(
            f"Specified path is a directory, using {binary_name} under it: "
            f"{os.path.abspath(path)}"
        )

    return os.path.abspath(path)
