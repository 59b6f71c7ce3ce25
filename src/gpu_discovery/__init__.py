"""
GPU Discovery - nvidia-smi based GPU discovery and allowed-devices reconciliation

Locates and runs the vendor query tool under a hard timeout with a
consecutive-failure ceiling, and produces the validated list of GPUs a
resource manager may schedule workloads onto.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
