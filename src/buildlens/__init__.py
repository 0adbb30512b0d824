"""buildlens - resolve test-run references into build artifacts."""

from buildlens.locator import ArtifactLocator
from buildlens.types import CANONICAL_LOG_NAME

__all__ = ["ArtifactLocator", "CANONICAL_LOG_NAME"]
