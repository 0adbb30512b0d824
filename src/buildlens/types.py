"""Core type definitions for buildlens."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Literal, Union, get_args

from pydantic import BaseModel

if TYPE_CHECKING:
    from buildlens.artifacts.base import Artifact

CANONICAL_LOG_NAME = "build-log.txt"

JobState = Literal["pending", "running", "success", "failure", "aborted"]
JOB_STATES: tuple[str, ...] = get_args(JobState)


@dataclass(frozen=True)
class DirectRef:
    """Reference addressing a storage path directly."""

    path: str


@dataclass(frozen=True)
class JobRef:
    """Reference addressing a job/build pair.

    ``key`` is kept verbatim; it is only split into a locator when needed,
    because a malformed key is fatal for fetching but not for listing.
    """

    key: str


SourceReference = Union[DirectRef, JobRef]


@dataclass(frozen=True)
class JobLocator:
    """A job name and build ID."""

    job_name: str
    build_id: str


class JobRecord(BaseModel):
    """Recorded metadata for a single job build."""

    job_name: str
    build_id: str
    status_url: str
    state: JobState = "pending"
    pod_name: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None


@dataclass
class Diagnostic:
    """A degradation observed while resolving artifacts."""

    stage: Literal["resolve", "list", "fetch", "fallback"]
    message: str
    artifact: str | None = None


@dataclass
class ArtifactListing:
    """Result of listing artifacts for a reference."""

    names: list[str]
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)


@dataclass
class ArtifactFetch:
    """Result of fetching artifact handles for a reference."""

    artifacts: list["Artifact"]
    diagnostics: list[Diagnostic] = field(default_factory=list)
    fallback_used: bool = False
    duration_s: float = 0.0

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)

    @property
    def names(self) -> list[str]:
        return [a.name for a in self.artifacts]
