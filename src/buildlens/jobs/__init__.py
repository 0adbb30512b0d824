"""Job metadata lookup module."""

from buildlens.jobs.base import JobLookup
from buildlens.jobs.sqlite import SQLiteJobStore

__all__ = ["JobLookup", "SQLiteJobStore"]
