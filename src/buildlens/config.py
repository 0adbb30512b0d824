"""Configuration models for buildlens."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, field_validator, model_validator


class SourcesConfig(BaseModel):
    """Kind tokens accepted at the front of a reference."""

    storage_kind: str = "storage"
    job_kind: str = "job"

    @field_validator("storage_kind", "job_kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        if not v or "/" in v:
            raise ValueError(f"Kind token must be non-empty and contain no '/': {v!r}")
        return v

    @model_validator(mode="after")
    def validate_distinct(self):
        if self.storage_kind == self.job_kind:
            raise ValueError("sources.storage_kind and sources.job_kind must differ")
        return self


class StorageConfig(BaseModel):
    """Artifact storage configuration."""

    type: Literal["local"] = "local"
    path: str = ".buildlens/storage"


class JobsConfig(BaseModel):
    """Job metadata configuration."""

    db_path: str = ".buildlens/jobs.db"
    url_prefix: str = ""  # Status URLs are <url_prefix><storage path>


class PodsConfig(BaseModel):
    """Configuration for reading live pod logs."""

    type: Literal["local", "ssh"] = "local"
    host: str | None = None
    user: str | None = None
    port: int = 22
    key_path: str | None = None
    log_dir: str = "logs"

    def model_post_init(self, __context):
        if self.type == "ssh":
            if not self.host:
                raise ValueError("pods.host is required when type is 'ssh'")
            if not self.user:
                raise ValueError("pods.user is required when type is 'ssh'")


class FetchConfig(BaseModel):
    """Artifact fetch configuration."""

    size_limit: str = "100MB"
    max_workers: int = 1

    @field_validator("size_limit")
    @classmethod
    def validate_size(cls, v: str) -> str:
        parse_size(v)
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("fetch.max_workers must be at least 1")
        return v

    @property
    def size_limit_bytes(self) -> int:
        return parse_size(self.size_limit)


class BuildLensConfig(BaseModel):
    """Main buildlens configuration."""

    sources: SourcesConfig = SourcesConfig()
    storage: StorageConfig = StorageConfig()
    jobs: JobsConfig = JobsConfig()
    pods: PodsConfig = PodsConfig()
    fetch: FetchConfig = FetchConfig()


def parse_size(size_str: str) -> int:
    """Parse size string to bytes. Supports: 512, 100B, 64KB, 10MB, 1GB."""
    size_str = size_str.strip().upper()
    if not size_str:
        raise ValueError("Empty size string")

    multipliers = {"KB": 1024, "MB": 1024**2, "GB": 1024**3, "B": 1}
    number, multiplier = size_str, 1
    if not size_str[-1].isdigit():
        for unit, factor in multipliers.items():
            if size_str.endswith(unit):
                number, multiplier = size_str[: -len(unit)], factor
                break
        else:
            raise ValueError(f"Invalid size unit: {size_str}. Use B, KB, MB, or GB.")

    try:
        value = int(number.strip())
    except ValueError:
        raise ValueError(f"Invalid size value: {number}")

    if value < 0:
        raise ValueError(f"Invalid size value: {number}")
    return value * multiplier


def load_config(path: Path) -> BuildLensConfig:
    """Load configuration from YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return BuildLensConfig(**data)


def get_config_template() -> str:
    """Get the default configuration template."""
    return """# buildlens configuration

# References look like <kind>/<key>:
#   storage/<path>           artifacts stored directly under <path>
#   job/<job_name>/<build>   artifacts of a recorded job build
sources:
  storage_kind: storage
  job_kind: job

storage:
  type: local
  path: .buildlens/storage  # Root directory of the artifact bucket

jobs:
  db_path: .buildlens/jobs.db
  # Job status URLs are this prefix followed by the storage path
  url_prefix: "https://ci.example.com/view/storage/"

pods:
  type: local  # 'local' (tmux on this machine) or 'ssh' (tmux on a remote host)
  log_dir: logs  # Pods tee their output to <log_dir>/<pod>.log

  # SSH settings (only needed if type: ssh)
  # host: ci-runner.example.com
  # user: ci
  # port: 22
  # key_path: ~/.ssh/id_rsa

fetch:
  size_limit: 100MB  # Per-artifact read limit
  max_workers: 1  # >1 checks artifacts in parallel
"""
