"""Outbound adapters - Implementations of outbound port interfaces.

Provides the subprocess command runner and the nvidia-smi XML parser.
"""

from gpu_discovery.adapters.outbound.nvidia_smi_parser import NvidiaSmiXmlParser
from gpu_discovery.adapters.outbound.shell import SubprocessCommandRunner

__all__ = [
    "NvidiaSmiXmlParser",
    "SubprocessCommandRunner",
]
