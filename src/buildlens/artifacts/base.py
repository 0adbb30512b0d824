"""Artifact handle and fetcher protocols."""

from typing import Protocol


class Artifact(Protocol):
    """Lazy handle to a single artifact.

    Creating a handle performs no I/O. ``size()`` and the read methods do.
    """

    name: str
    size_limit: int

    def size(self) -> int:
        """Size of the artifact in bytes."""
        ...

    def read_all(self) -> bytes:
        """Read the whole artifact. Raises ArtifactTooLarge over size_limit."""
        ...

    def read_at(self, offset: int, length: int) -> bytes:
        """Read up to length bytes starting at offset."""
        ...

    def read_at_most(self, n: int) -> bytes:
        """Read at most the first n bytes."""
        ...

    def read_tail(self, n: int) -> bytes:
        """Read at most the last n bytes."""
        ...

    def canonical_link(self) -> str:
        """Link to the artifact, empty if it has none."""
        ...


class StorageClient(Protocol):
    """Protocol for durable artifact storage."""

    def list_artifacts(self, path: str) -> list[str]:
        """List artifact names stored under path."""
        ...

    def open_artifact(self, path: str, name: str, size_limit: int) -> Artifact:
        """Get a handle to an artifact. Performs no I/O."""
        ...


class PodLogFetcher(Protocol):
    """Protocol for fetching build logs from live pods."""

    def fetch(self, job_name: str, build_id: str, size_limit: int) -> Artifact:
        """Get a handle to the live build log of a job build."""
        ...
