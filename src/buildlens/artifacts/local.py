"""Local filesystem artifact storage."""

from pathlib import Path, PurePosixPath

from buildlens.errors import ArtifactTooLarge


class LocalArtifact:
    """Handle to a file in a LocalStorageClient."""

    def __init__(self, file_path: Path, name: str, size_limit: int):
        self.file_path = file_path
        self.name = name
        self.size_limit = size_limit

    def __repr__(self) -> str:
        return f"LocalArtifact({self.name!r}, {str(self.file_path)!r})"

    def size(self) -> int:
        return self.file_path.stat().st_size

    def read_all(self) -> bytes:
        size = self.size()
        if size > self.size_limit:
            raise ArtifactTooLarge(self.name, size, self.size_limit)
        return self.file_path.read_bytes()

    def read_at(self, offset: int, length: int) -> bytes:
        if offset < 0 or length < 0:
            raise ValueError(f"Invalid read range: offset={offset}, length={length}")
        with open(self.file_path, "rb") as f:
            f.seek(offset)
            return f.read(length)

    def read_at_most(self, n: int) -> bytes:
        return self.read_at(0, n)

    def read_tail(self, n: int) -> bytes:
        size = self.size()
        return self.read_at(max(0, size - n), min(n, size))

    def canonical_link(self) -> str:
        return self.file_path.absolute().as_uri()


class LocalStorageClient:
    """Bucket-like artifact storage rooted at a local directory.

    A storage path such as ``logs/unit-tests/123`` maps to the directory
    ``<root>/logs/unit-tests/123``; artifact names are file paths relative to
    it, always ``/``-separated.
    """

    def __init__(self, root: Path):
        self.root = root

    def list_artifacts(self, path: str) -> list[str]:
        base = self._path_dir(path)
        if not base.is_dir():
            raise FileNotFoundError(f"No artifacts under storage path: {path}")

        names = []
        for item in base.rglob("*"):
            if item.is_file():
                names.append(item.relative_to(base).as_posix())
        return sorted(names)

    def open_artifact(self, path: str, name: str, size_limit: int) -> LocalArtifact:
        base = self._path_dir(path)
        rel = PurePosixPath(name)
        if not name or rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"Invalid artifact name: {name!r}")
        return LocalArtifact(base / rel, name, size_limit)

    def _path_dir(self, path: str) -> Path:
        """Convert a storage path to a directory under root."""
        path = path.strip("/")
        if not path:
            raise ValueError("Empty storage path")
        rel = PurePosixPath(path)
        if ".." in rel.parts:
            raise ValueError(f"Invalid storage path: {path!r}")
        return self.root / rel
