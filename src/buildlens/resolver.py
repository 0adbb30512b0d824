"""Translate job references into storage paths."""

import logging
from typing import Callable

from buildlens.errors import JobLookupFailed, PrefixMismatch
from buildlens.jobs.base import JobLookup
from buildlens.reference import split_job_key

logger = logging.getLogger(__name__)


def strip_url_prefix(url: str, prefix: str) -> str:
    """Return url without prefix. Raises PrefixMismatch if it is absent."""
    if not url.startswith(prefix):
        raise PrefixMismatch(url, prefix)
    return url[len(prefix):]


def resolve_job_path(key: str, jobs: JobLookup, url_prefix: Callable[[], str]) -> str:
    """Resolve a <job_name>/<build_id> key into the storage path of its artifacts.

    The job's recorded status URL is expected to be the configured URL prefix
    followed by the storage path.

    Raises:
        MalformedJobKey: key is not exactly two non-empty components
        JobLookupFailed: the job metadata lookup raised
        PrefixMismatch: the status URL does not start with the prefix
    """
    locator = split_job_key(key)
    try:
        record = jobs.get_job(locator.job_name, locator.build_id)
    except Exception as e:
        raise JobLookupFailed(locator.job_name, locator.build_id, e) from e

    path = strip_url_prefix(record.status_url, url_prefix())
    logger.debug(f"Resolved job {key} to storage path {path!r}")
    return path
