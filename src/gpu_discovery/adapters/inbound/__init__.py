"""Inbound adapters for GPU discovery.

Provides the REST API adapter exposing discovered and usable GPUs.
"""

from gpu_discovery.adapters.inbound.rest_api import create_app

__all__ = ["create_app"]
