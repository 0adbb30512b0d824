"""Parsing of <kind>/<key> reference strings."""

from buildlens.errors import MalformedJobKey, MalformedReference
from buildlens.types import DirectRef, JobLocator, JobRef, SourceReference

DEFAULT_STORAGE_KIND = "storage"
DEFAULT_JOB_KIND = "job"


def split_reference(reference: str) -> tuple[str, str]:
    """Split a reference on its first separator. Returns (kind, key)."""
    kind, sep, key = reference.partition("/")
    if not sep:
        raise MalformedReference(f"Invalid reference {reference!r}: expected <kind>/<key>")
    if not key:
        raise MalformedReference(f"Invalid reference {reference!r}: empty key")
    return kind, key


def parse_reference(
    reference: str,
    storage_kind: str = DEFAULT_STORAGE_KIND,
    job_kind: str = DEFAULT_JOB_KIND,
) -> SourceReference:
    """Parse a reference string into a DirectRef or JobRef."""
    kind, key = split_reference(reference)
    if kind == storage_kind:
        return DirectRef(path=key.rstrip("/"))
    if kind == job_kind:
        return JobRef(key=key)
    raise MalformedReference(
        f"Unrecognized kind {kind!r} in reference {reference!r}: "
        f"expected {storage_kind!r} or {job_kind!r}"
    )


def split_job_key(key: str) -> JobLocator:
    """Split <job_name>/<build_id> into a JobLocator."""
    parts = key.split("/")
    if len(parts) != 2 or not all(parts):
        raise MalformedJobKey(f"Job key {key!r} incorrectly formatted: expected <job>/<build>")
    return JobLocator(job_name=parts[0], build_id=parts[1])


def locator_from_path(path: str) -> JobLocator | None:
    """Derive a job locator from the last two components of a storage path.

    Storage paths conventionally end in .../<job_name>/<build_id>. Empty
    components are kept, so "a//b" gives ("", "b"). Returns None when the
    path has fewer than two components.
    """
    parts = path.rstrip("/").split("/")
    if len(parts) < 2:
        return None
    return JobLocator(job_name=parts[-2], build_id=parts[-1])
