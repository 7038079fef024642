# shopdash/models/local_file.py

"""A local image file chosen for upload."""

import mimetypes
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LocalImageFile:
    """A file on disk selected in a product form."""

    path: Path
    name: str
    size: int
    modified: float

    @classmethod
    def from_path(cls, path: str | Path) -> "LocalImageFile":
        """Stat *path* and capture the fields used for deduplication."""
        resolved = Path(path).expanduser()
        stat = resolved.stat()
        return cls(
            path=resolved,
            name=resolved.name,
            size=stat.st_size,
            modified=stat.st_mtime,
        )

    @property
    def dedupe_key(self) -> tuple[str, int, float]:
        """Same name, size and mtime means the same file."""
        return (self.name, self.size, self.modified)

    @property
    def content_type(self) -> str:
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or "application/octet-stream"
