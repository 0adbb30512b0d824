"""Pod client for tmux sessions on this machine."""

import shlex
import subprocess
from pathlib import Path

from buildlens.config import PodsConfig
from buildlens.errors import PodLogUnavailable


class LocalPodClient:
    """Reads pod logs from local log files or tmux panes."""

    def __init__(self, config: PodsConfig):
        self.config = config
        self._log_dir = Path(config.log_dir).expanduser().resolve()

    def _run(self, command: str, timeout: int | None = None) -> tuple[int, str, str]:
        """Run a shell command locally."""
        result = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr

    def is_running(self, pod_name: str) -> bool:
        """Check if tmux session exists."""
        exit_code, _, _ = self._run(f"tmux has-session -t {shlex.quote(pod_name)} 2>/dev/null")
        return exit_code == 0

    def capture_log(self, pod_name: str) -> str:
        log_file = self._log_dir / f"{pod_name}.log"
        if log_file.is_file():
            return log_file.read_text(errors="replace")

        # No log file, fall back to the pane history
        exit_code, output, stderr = self._run(
            f"tmux capture-pane -t {shlex.quote(pod_name)} -p -S - 2>/dev/null"
        )
        if exit_code != 0:
            raise PodLogUnavailable(f"No log for pod {pod_name}: {stderr.strip() or 'session not found'}")
        return output

    def close(self) -> None:
        pass
