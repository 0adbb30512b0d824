"""Exception types for buildlens."""


class BuildLensError(Exception):
    """Base class for buildlens errors."""


class MalformedReference(BuildLensError, ValueError):
    """Reference string is not of the form <kind>/<key>."""


class MalformedJobKey(BuildLensError, ValueError):
    """Job key is not of the form <job_name>/<build_id>."""


class JobNotFound(BuildLensError, LookupError):
    """No job record exists for the job/build pair."""


class JobLookupFailed(BuildLensError):
    """Job metadata lookup raised an error."""

    def __init__(self, job_name: str, build_id: str, cause: Exception):
        super().__init__(f"Failed to get job {job_name}/{build_id}: {cause}")
        self.job_name = job_name
        self.build_id = build_id
        self.cause = cause


class PrefixMismatch(BuildLensError):
    """Job status URL does not start with the configured prefix."""

    def __init__(self, url: str, prefix: str):
        super().__init__(
            f"Unexpected job URL {url!r}: expected something starting with {prefix!r}"
        )
        self.url = url
        self.prefix = prefix


class ArtifactTooLarge(BuildLensError):
    """Artifact exceeds the size limit of its handle."""

    def __init__(self, name: str, size: int, limit: int):
        super().__init__(f"Artifact {name} is {size} bytes, over the {limit} byte limit")
        self.name = name
        self.size = size
        self.limit = limit


class PodLogUnavailable(BuildLensError):
    """Live log could not be read from the pod."""
