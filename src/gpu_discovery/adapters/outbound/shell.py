"""Subprocess-backed command runner.

Runs the discovery executable to completion with a hard timeout. On timeout
the child is killed and reaped before the error is raised.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence

from gpu_discovery.domain.exceptions import DiscoveryExecutionError

logger = logging.getLogger(__name__)


class SubprocessCommandRunner:
    """Run commands with subprocess.run."""

    def run(
        self,
        command: Sequence[str],
        environment: Mapping[str, str],
        timeout_seconds: float,
    ) -> str:
        env = {**os.environ, **environment}
        logger.debug(f"Running command: {' '.join(command)}")

        try:
            result = subprocess.run(
                list(command),
                env=env,
                capture_output=True,
                timeout=timeout_seconds,
                check=True,
            )
        except subprocess.TimeoutExpired as e:
            raise DiscoveryExecutionError(
                f"Command {command[0]} timed out after {timeout_seconds:g} seconds"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise DiscoveryExecutionError(
                f"Command {command[0]} exited with code {e.returncode}: {stderr}"
            ) from e
        except OSError as e:
            raise DiscoveryExecutionError(f"Failed to start {command[0]}: {e}") from e

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DiscoveryExecutionError(
                f"Command {command[0]} produced output that is not valid UTF-8: {e}"
            ) from e
