# shopdash/forms/previews.py

"""Local preview thumbnails for images picked in a product form."""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from shopdash.config.settings import Settings
from shopdash.models.local_file import LocalImageFile

logger = logging.getLogger("shopdash.forms")


@dataclass(frozen=True)
class Preview:
    """A preview handle owned by a :class:`PreviewRegistry`."""

    entry_id: str
    url: str
    path: Path | None = None


class PreviewRegistry:
    """Acquires and releases preview thumbnails keyed by selection entry.

    Thumbnails live in a private temp directory created lazily on first
    use and removed by :meth:`release_all`.
    """

    def __init__(self, size: tuple[int, int] | None = None) -> None:
        self.size = size or Settings.PREVIEW_SIZE
        self._dir: Path | None = None
        self._previews: dict[str, Preview] = {}

    def __len__(self) -> int:
        return len(self._previews)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._previews

    def acquire(self, entry_id: str, image: LocalImageFile) -> Preview:
        """Create a thumbnail for *image* and register it under *entry_id*."""
        if entry_id in self._previews:
            return self._previews[entry_id]

        target = self._workdir() / f"{entry_id}.png"
        try:
            with Image.open(image.path) as img:
                img.thumbnail(self.size)
                img.save(target, format="PNG")
        except (UnidentifiedImageError, OSError) as exc:
            logger.warning(
                "No thumbnail for %s (%s); previewing original file",
                image.name,
                exc,
            )
            preview = Preview(entry_id=entry_id, url=image.path.as_uri())
        else:
            preview = Preview(
                entry_id=entry_id, url=target.as_uri(), path=target,
            )
        self._previews[entry_id] = preview
        logger.debug("Acquired preview %s for %s", entry_id, image.name)
        return preview

    def release(self, entry_id: str) -> bool:
        """Release one preview. Returns ``False`` if it was not held."""
        preview = self._previews.pop(entry_id, None)
        if preview is None:
            return False
        if preview.path is not None:
            preview.path.unlink(missing_ok=True)
        logger.debug("Released preview %s", entry_id)
        return True

    def release_all(self) -> int:
        """Release every preview and remove the temp directory."""
        count = 0
        for entry_id in list(self._previews):
            if self.release(entry_id):
                count += 1
        if self._dir is not None:
            shutil.rmtree(self._dir, ignore_errors=True)
            self._dir = None
        if count:
            logger.info("Released %d previews", count)
        return count

    def _workdir(self) -> Path:
        if self._dir is None:
            self._dir = Path(tempfile.mkdtemp(prefix="shopdash-preview-"))
        return self._dir
