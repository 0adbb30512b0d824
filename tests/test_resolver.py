"""Tests for job to storage path resolution."""

import pytest

from conftest import PREFIX, FakeJobs
from buildlens.errors import JobLookupFailed, JobNotFound, MalformedJobKey, PrefixMismatch
from buildlens.resolver import resolve_job_path, strip_url_prefix
from buildlens.types import JobRecord


def make_record(status_url: str) -> JobRecord:
    return JobRecord(job_name="unit-tests", build_id="123", status_url=status_url)


class TestResolveJobPath:
    def test_strips_prefix(self):
        jobs = FakeJobs([make_record(PREFIX + "bucket/job/123")])
        assert resolve_job_path("unit-tests/123", jobs, lambda: PREFIX) == "bucket/job/123"
        assert jobs.calls == [("unit-tests", "123")]

    def test_prefix_mismatch(self):
        jobs = FakeJobs([make_record("https://other.example.com/bucket/job/123")])
        with pytest.raises(PrefixMismatch) as exc_info:
            resolve_job_path("unit-tests/123", jobs, lambda: PREFIX)
        assert exc_info.value.prefix == PREFIX

    def test_prefix_read_per_call(self):
        prefixes = iter(["https://a/", "https://b/"])
        jobs = FakeJobs([make_record("https://b/bucket/job/123")])
        with pytest.raises(PrefixMismatch):
            resolve_job_path("unit-tests/123", jobs, lambda: next(prefixes))
        assert resolve_job_path("unit-tests/123", jobs, lambda: next(prefixes)) == "bucket/job/123"

    def test_lookup_failure_wrapped(self):
        cause = ConnectionError("api down")
        jobs = FakeJobs(error=cause)
        with pytest.raises(JobLookupFailed) as exc_info:
            resolve_job_path("unit-tests/123", jobs, lambda: PREFIX)
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause

    def test_unknown_job(self):
        with pytest.raises(JobLookupFailed) as exc_info:
            resolve_job_path("unit-tests/999", FakeJobs(), lambda: PREFIX)
        assert isinstance(exc_info.value.cause, JobNotFound)

    def test_malformed_key(self):
        jobs = FakeJobs()
        with pytest.raises(MalformedJobKey):
            resolve_job_path("unit-tests", jobs, lambda: PREFIX)
        assert jobs.calls == []


class TestStripUrlPrefix:
    def test_empty_prefix(self):
        assert strip_url_prefix("bucket/job/1", "") == "bucket/job/1"

    def test_whole_url(self):
        assert strip_url_prefix(PREFIX, PREFIX) == ""
