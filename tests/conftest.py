"""Fakes for the collaborators of ArtifactLocator."""

import pytest

from buildlens.errors import JobNotFound
from buildlens.locator import ArtifactLocator
from buildlens.types import JobRecord

PREFIX = "https://ci.example.com/view/storage/"


class FakeArtifact:
    def __init__(self, name: str, data: bytes = b"", size_error: Exception | None = None):
        self.name = name
        self.size_limit = 0
        self.data = data
        self.size_error = size_error
        self.size_calls = 0

    def size(self) -> int:
        self.size_calls += 1
        if self.size_error is not None:
            raise self.size_error
        return len(self.data)

    def read_all(self) -> bytes:
        return self.data

    def read_at(self, offset: int, length: int) -> bytes:
        return self.data[offset:offset + length]

    def read_at_most(self, n: int) -> bytes:
        return self.data[:n]

    def read_tail(self, n: int) -> bytes:
        return self.data[-n:] if n > 0 else b""

    def canonical_link(self) -> str:
        return f"fake://{self.name}"


class FakeStorage:
    """Storage holding artifacts under a single path."""

    def __init__(self, path: str, names: list[str], missing: tuple[str, ...] = (), list_error: Exception | None = None):
        self.path = path
        self.names = names
        self.missing = set(missing)
        self.list_error = list_error
        self.list_calls: list[str] = []
        self.open_calls: list[tuple[str, str, int]] = []

    def list_artifacts(self, path: str) -> list[str]:
        self.list_calls.append(path)
        if self.list_error is not None:
            raise self.list_error
        if path != self.path:
            raise FileNotFoundError(f"No artifacts under storage path: {path}")
        return list(self.names)

    def open_artifact(self, path: str, name: str, size_limit: int) -> FakeArtifact:
        self.open_calls.append((path, name, size_limit))
        if not path:
            raise ValueError("Empty storage path")
        error = None
        if path != self.path or name in self.missing or name not in self.names:
            error = FileNotFoundError(f"{path}/{name}")
        return FakeArtifact(name, data=name.encode(), size_error=error)


class FakeJobs:
    def __init__(self, records: list[JobRecord] = (), error: Exception | None = None):
        self.records = {(r.job_name, r.build_id): r for r in records}
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def get_job(self, job_name: str, build_id: str) -> JobRecord:
        self.calls.append((job_name, build_id))
        if self.error is not None:
            raise self.error
        try:
            return self.records[(job_name, build_id)]
        except KeyError:
            raise JobNotFound(f"Job not found: {job_name}/{build_id}")


class FakePodLogs:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[str, str, int]] = []

    def fetch(self, job_name: str, build_id: str, size_limit: int) -> FakeArtifact:
        self.calls.append((job_name, build_id, size_limit))
        if self.error is not None:
            raise self.error
        return FakeArtifact("build-log.txt", data=b"live log")


@pytest.fixture
def job_record():
    return JobRecord(
        job_name="unit-tests",
        build_id="123",
        status_url=PREFIX + "logs/unit-tests/123",
        state="running",
        pod_name="pod-abc",
    )


@pytest.fixture
def storage():
    return FakeStorage("logs/unit-tests/123", ["a.txt", "build-log.txt"])


@pytest.fixture
def jobs(job_record):
    return FakeJobs([job_record])


@pytest.fixture
def pod_logs():
    return FakePodLogs()


@pytest.fixture
def make_locator(storage, jobs, pod_logs):
    def _make(**kwargs) -> ArtifactLocator:
        params = {
            "storage": storage,
            "jobs": jobs,
            "pod_logs": pod_logs,
            "url_prefix": lambda: PREFIX,
        }
        params.update(kwargs)
        return ArtifactLocator(**params)

    return _make
