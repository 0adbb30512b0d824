"""JobLookup protocol for job metadata."""

from typing import Protocol

from buildlens.types import JobRecord


class JobLookup(Protocol):
    """Protocol for looking up recorded jobs."""

    def get_job(self, job_name: str, build_id: str) -> JobRecord:
        """Get the record for a job build. Raises JobNotFound if absent."""
        ...
