"""PodClient protocol for reading live job output."""

from typing import Protocol


class PodClient(Protocol):
    """Protocol for reading logs from pods.

    A pod is a tmux session on the execution host. Its output is tee'd to
    ``<log_dir>/<pod>.log`` when the job was launched with logging enabled.
    """

    def is_running(self, pod_name: str) -> bool:
        """Check if the pod's session is still alive."""
        ...

    def capture_log(self, pod_name: str) -> str:
        """Read the pod's full log. Raises PodLogUnavailable."""
        ...

    def close(self) -> None:
        """Close the client and cleanup resources."""
        ...
