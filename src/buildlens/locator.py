"""Resolve references into artifact listings and handles."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from buildlens.artifacts.base import Artifact, PodLogFetcher, StorageClient
from buildlens.errors import BuildLensError
from buildlens.jobs.base import JobLookup
from buildlens.reference import (
    DEFAULT_JOB_KIND,
    DEFAULT_STORAGE_KIND,
    locator_from_path,
    parse_reference,
    split_job_key,
)
from buildlens.resolver import resolve_job_path
from buildlens.types import (
    CANONICAL_LOG_NAME,
    ArtifactFetch,
    ArtifactListing,
    Diagnostic,
    DirectRef,
    JobLocator,
    JobRef,
    SourceReference,
)

logger = logging.getLogger(__name__)


@dataclass
class _ItemOutcome:
    """Terminal state of one requested artifact."""

    name: str
    artifact: Artifact | None = None
    error: Exception | None = None


class ArtifactLocator:
    """Lists and fetches the artifacts behind a reference.

    Only a structurally malformed reference fails a call. Job lookups,
    listings, missing artifacts and pod logs all degrade to a smaller result,
    reported in the result's diagnostics.
    """

    def __init__(
        self,
        storage: StorageClient,
        jobs: JobLookup,
        pod_logs: PodLogFetcher,
        url_prefix: Callable[[], str],
        storage_kind: str = DEFAULT_STORAGE_KIND,
        job_kind: str = DEFAULT_JOB_KIND,
        max_workers: int = 1,
    ):
        self.storage = storage
        self.jobs = jobs
        self.pod_logs = pod_logs
        self.url_prefix = url_prefix
        self.storage_kind = storage_kind
        self.job_kind = job_kind
        self.max_workers = max_workers

    def parse(self, reference: str) -> SourceReference:
        return parse_reference(reference, self.storage_kind, self.job_kind)

    def resolve_path(self, source: SourceReference, diagnostics: list[Diagnostic]) -> str:
        """Storage path for a parsed reference, or "" if it cannot be resolved."""
        if isinstance(source, DirectRef):
            return source.path

        try:
            return resolve_job_path(source.key, self.jobs, self.url_prefix)
        except BuildLensError as e:
            logger.warning(f"Failed to get storage path for job: {e}")
            diagnostics.append(Diagnostic(stage="resolve", message=str(e)))
            return ""

    def list_artifacts(self, reference: str) -> ArtifactListing:
        """List the names of all artifacts available for a reference.

        The canonical build log is always listed exactly once, whether or not
        storage has it, since it can still be fetched from the pod.

        Raises:
            MalformedReference: reference is not <kind>/<key>
        """
        source = self.parse(reference)
        diagnostics: list[Diagnostic] = []
        path = self.resolve_path(source, diagnostics)

        try:
            stored = self.storage.list_artifacts(path)
        except Exception as e:
            logger.warning(f"Failed to list artifacts for {reference}: {e}")
            diagnostics.append(Diagnostic(stage="list", message=str(e)))
            stored = []

        names = []
        for name in stored:
            if name == CANONICAL_LOG_NAME and name in names:
                continue
            names.append(name)
        if CANONICAL_LOG_NAME not in names:
            names.append(CANONICAL_LOG_NAME)

        return ArtifactListing(names=names, diagnostics=diagnostics)

    def fetch_artifacts(
        self,
        reference: str,
        pod_name: str,
        size_limit: int,
        names: list[str],
    ) -> ArtifactFetch:
        """Get verified handles for the requested artifacts of a reference.

        Each handle is checked once for its size, so only artifacts that
        actually exist are returned. If the build log is not in storage it is
        fetched from the job's pod instead. Handles keep the requested order;
        a pod log handle comes last.

        Raises:
            MalformedReference: reference is not <kind>/<key>
            MalformedJobKey: a job reference is not <kind>/<job>/<build>
        """
        start = time.monotonic()
        try:
            source = self.parse(reference)
            diagnostics: list[Diagnostic] = []
            job = self._job_locator(source)
            path = self.resolve_path(source, diagnostics)

            # Per-item phase: every outcome is terminal before any fallback
            outcomes = self._open_all(path, names, size_limit)

            artifacts = []
            pod_log_needed = False
            for outcome in outcomes:
                if outcome.artifact is not None:
                    artifacts.append(outcome.artifact)
                elif outcome.name == CANONICAL_LOG_NAME:
                    pod_log_needed = True
                else:
                    logger.error(f"Failed to fetch artifact {outcome.name}: {outcome.error}")
                    diagnostics.append(
                        Diagnostic(stage="fetch", message=str(outcome.error), artifact=outcome.name)
                    )

            fallback_used = False
            if pod_log_needed:
                logger.info(f"{CANONICAL_LOG_NAME} unavailable in storage, trying pod {pod_name or '?'}")
                pod_log = self._fetch_pod_log(job, size_limit, diagnostics)
                if pod_log is not None:
                    artifacts.append(pod_log)
                    fallback_used = True
        finally:
            duration = time.monotonic() - start
            logger.info(f"Retrieved artifacts for {reference} in {duration:.3f}s")

        return ArtifactFetch(
            artifacts=artifacts,
            diagnostics=diagnostics,
            fallback_used=fallback_used,
            duration_s=duration,
        )

    def _job_locator(self, source: SourceReference) -> JobLocator | None:
        """Job name and build ID for the pod log fallback."""
        if isinstance(source, JobRef):
            # Malformed job keys are fatal here, unlike when listing
            return split_job_key(source.key)

        job = locator_from_path(source.path)
        if job is None:
            logger.warning(f"Invalid storage path {source.path!r}: expected .../<job>/<build>")
        return job

    def _open_one(self, path: str, name: str, size_limit: int) -> _ItemOutcome:
        try:
            artifact = self.storage.open_artifact(path, name, size_limit)
            # Opening does no I/O, so read the size to confirm the artifact exists
            artifact.size()
        except Exception as e:
            return _ItemOutcome(name=name, error=e)
        return _ItemOutcome(name=name, artifact=artifact)

    def _open_all(self, path: str, names: list[str], size_limit: int) -> list[_ItemOutcome]:
        if self.max_workers <= 1 or len(names) <= 1:
            return [self._open_one(path, name, size_limit) for name in names]

        workers = min(self.max_workers, len(names))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="buildlens-fetch") as pool:
            # map() yields in input order
            return list(pool.map(lambda name: self._open_one(path, name, size_limit), names))

    def _fetch_pod_log(
        self,
        job: JobLocator | None,
        size_limit: int,
        diagnostics: list[Diagnostic],
    ) -> Artifact | None:
        job_name, build_id = (job.job_name, job.build_id) if job else ("", "")
        try:
            return self.pod_logs.fetch(job_name, build_id, size_limit)
        except Exception as e:
            logger.error(f"Failed to fetch pod log: {e}")
            diagnostics.append(
                Diagnostic(stage="fallback", message=str(e), artifact=CANONICAL_LOG_NAME)
            )
            return None
