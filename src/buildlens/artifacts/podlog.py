"""Build logs read from live pods."""

import logging

from buildlens.errors import ArtifactTooLarge, PodLogUnavailable
from buildlens.jobs.base import JobLookup
from buildlens.pods.base import PodClient
from buildlens.types import CANONICAL_LOG_NAME

logger = logging.getLogger(__name__)


class PodLogArtifact:
    """Handle to the live build log of a running job.

    Every read captures the log afresh; the pod may still be writing to it.
    """

    def __init__(self, pods: PodClient, pod_name: str, job_name: str, build_id: str, size_limit: int):
        self.pods = pods
        self.pod_name = pod_name
        self.job_name = job_name
        self.build_id = build_id
        self.size_limit = size_limit
        self.name = CANONICAL_LOG_NAME

    def __repr__(self) -> str:
        return f"PodLogArtifact({self.job_name!r}, {self.build_id!r}, pod={self.pod_name!r})"

    def _log(self) -> bytes:
        return self.pods.capture_log(self.pod_name).encode()

    def size(self) -> int:
        return len(self._log())

    def read_all(self) -> bytes:
        data = self._log()
        if len(data) > self.size_limit:
            raise ArtifactTooLarge(self.name, len(data), self.size_limit)
        return data

    def read_at(self, offset: int, length: int) -> bytes:
        if offset < 0 or length < 0:
            raise ValueError(f"Invalid read range: offset={offset}, length={length}")
        return self._log()[offset:offset + length]

    def read_at_most(self, n: int) -> bytes:
        return self.read_at(0, n)

    def read_tail(self, n: int) -> bytes:
        if n <= 0:
            return b""
        return self._log()[-n:]

    def canonical_link(self) -> str:
        # Live logs have no durable location
        return ""

    def is_live(self) -> bool:
        """Whether the pod is still running, so the log may still grow."""
        return self.pods.is_running(self.pod_name)


class PodLogArtifactFetcher:
    """Fetches build-log handles from the pods jobs are running in."""

    def __init__(self, jobs: JobLookup, pods: PodClient):
        self.jobs = jobs
        self.pods = pods

    def fetch(self, job_name: str, build_id: str, size_limit: int) -> PodLogArtifact:
        if not job_name:
            raise ValueError("Missing job name for pod log")
        if not build_id:
            raise ValueError("Missing build ID for pod log")

        record = self.jobs.get_job(job_name, build_id)
        if not record.pod_name:
            raise PodLogUnavailable(f"Job {job_name}/{build_id} has no pod")

        logger.debug(f"Using pod {record.pod_name} for {job_name}/{build_id} build log")
        return PodLogArtifact(self.pods, record.pod_name, job_name, build_id, size_limit)
