"""Pod client for tmux sessions on a remote host, using paramiko."""

import logging
import os
import shlex

import paramiko

from buildlens.config import PodsConfig
from buildlens.errors import PodLogUnavailable

logger = logging.getLogger(__name__)


class SSHPodClient:
    """Reads pod logs from a remote execution host over SSH."""

    def __init__(self, config: PodsConfig):
        self.config = config
        self._client: paramiko.SSHClient | None = None

    @property
    def client(self) -> paramiko.SSHClient:
        """Get or create SSH client."""
        if self._client is None:
            self._client = self._connect()
        return self._client

    def _connect(self) -> paramiko.SSHClient:
        """Establish SSH connection."""
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs = {
            "hostname": self.config.host,
            "port": self.config.port,
            "username": self.config.user,
        }

        if self.config.key_path:
            connect_kwargs["key_filename"] = os.path.expanduser(self.config.key_path)
        else:
            # Use SSH agent
            connect_kwargs["allow_agent"] = True

        logger.debug(f"Connecting to {self.config.user}@{self.config.host}:{self.config.port}")
        client.connect(**connect_kwargs)
        return client

    def close(self) -> None:
        """Close SSH connection."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _exec(self, command: str, timeout: int | None = None) -> tuple[int, str, str]:
        """Execute command and return (exit_code, stdout, stderr)."""
        stdin, stdout, stderr = self.client.exec_command(command, timeout=timeout)
        exit_code = stdout.channel.recv_exit_status()
        return exit_code, stdout.read().decode(errors="replace"), stderr.read().decode(errors="replace")

    def _expand_path(self, path: str) -> str:
        """Expand ~ in remote path."""
        if path.startswith("~"):
            exit_code, home, _ = self._exec("echo $HOME")
            if exit_code == 0:
                return path.replace("~", home.strip(), 1)
        return path

    def is_running(self, pod_name: str) -> bool:
        """Check if tmux session is still running."""
        exit_code, _, _ = self._exec(f"tmux has-session -t {shlex.quote(pod_name)} 2>/dev/null")
        return exit_code == 0

    def capture_log(self, pod_name: str) -> str:
        log_dir = self._expand_path(self.config.log_dir)
        log_file = shlex.quote(f"{log_dir}/{pod_name}.log")

        exit_code, output, _ = self._exec(f"cat {log_file} 2>/dev/null")
        if exit_code == 0:
            return output

        # Try getting from tmux pane as fallback
        exit_code, output, stderr = self._exec(
            f"tmux capture-pane -t {shlex.quote(pod_name)} -p -S - 2>/dev/null"
        )
        if exit_code != 0:
            raise PodLogUnavailable(
                f"No log for pod {pod_name} on {self.config.host}: "
                f"{stderr.strip() or 'session not found'}"
            )
        return output
