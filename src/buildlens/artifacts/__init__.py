"""Artifact storage and handle module."""

from buildlens.artifacts.base import Artifact, PodLogFetcher, StorageClient
from buildlens.artifacts.local import LocalArtifact, LocalStorageClient
from buildlens.artifacts.podlog import PodLogArtifact, PodLogArtifactFetcher

__all__ = [
    "Artifact",
    "LocalArtifact",
    "LocalStorageClient",
    "PodLogArtifact",
    "PodLogArtifactFetcher",
    "PodLogFetcher",
    "StorageClient",
]
