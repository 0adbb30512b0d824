"""Live pod log access module."""

from buildlens.config import PodsConfig
from buildlens.pods.base import PodClient
from buildlens.pods.local import LocalPodClient
from buildlens.pods.ssh import SSHPodClient


def make_pod_client(config: PodsConfig) -> PodClient:
    """Create the pod client selected by config."""
    if config.type == "ssh":
        return SSHPodClient(config)
    return LocalPodClient(config)


__all__ = [
    "LocalPodClient",
    "PodClient",
    "SSHPodClient",
    "make_pod_client",
]
