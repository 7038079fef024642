# shopdash/forms/image_selection.py

"""The ordered set of images being assembled in a product form."""

import itertools
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from shopdash.forms.previews import Preview, PreviewRegistry
from shopdash.models.local_file import LocalImageFile

logger = logging.getLogger("shopdash.forms")


@dataclass(frozen=True)
class ExistingImage:
    """An image already hosted by the remote API."""

    entry_id: str
    url: str

    @property
    def display_url(self) -> str:
        return self.url


@dataclass(frozen=True)
class NewImage:
    """A local file chosen in this form session, not yet uploaded."""

    entry_id: str
    file: LocalImageFile
    preview: Preview

    @property
    def display_url(self) -> str:
        return self.preview.url


SelectedImage = ExistingImage | NewImage


class ImageSelection:
    """Existing and new images in display order.

    Every :class:`NewImage` holds a preview from the selection's
    :class:`PreviewRegistry`; removing the entry or closing the selection
    releases it. Use as a context manager to guarantee release.
    """

    def __init__(self, previews: PreviewRegistry | None = None) -> None:
        self.previews = previews or PreviewRegistry()
        self._entries: list[SelectedImage] = []
        self._counter = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SelectedImage]:
        return iter(list(self._entries))

    def __enter__(self) -> "ImageSelection":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def entries(self) -> list[SelectedImage]:
        return list(self._entries)

    def add_existing(self, urls: Iterable[str]) -> int:
        """Append already-hosted image URLs. Returns how many were added."""
        added = 0
        for url in urls:
            self._entries.append(ExistingImage(entry_id=url, url=url))
            added += 1
        return added

    def add_files(
        self,
        paths: Iterable[str | Path | LocalImageFile],
        dedupe: bool = False,
        limit: int | None = None,
    ) -> list[NewImage]:
        """Append local files, acquiring a preview for each.

        With *dedupe*, files whose ``(name, size, modified)`` key is
        already selected (or repeated within *paths*) are skipped.
        *limit* caps how many files this call may add.
        """
        seen = {
            e.file.dedupe_key
            for e in self._entries
            if isinstance(e, NewImage)
        }
        added: list[NewImage] = []
        skipped = 0
        for raw in paths:
            if limit is not None and len(added) >= limit:
                skipped += 1
                continue
            image = (
                raw
                if isinstance(raw, LocalImageFile)
                else LocalImageFile.from_path(raw)
            )
            if dedupe and image.dedupe_key in seen:
                logger.debug("Skipping duplicate image %s", image.name)
                skipped += 1
                continue
            seen.add(image.dedupe_key)
            entry_id = f"new-{next(self._counter)}"
            preview = self.previews.acquire(entry_id, image)
            entry = NewImage(entry_id=entry_id, file=image, preview=preview)
            self._entries.append(entry)
            added.append(entry)
        if skipped:
            logger.info(
                "Added %d images, skipped %d", len(added), skipped
            )
        return added

    def remove(self, entry_id: str) -> bool:
        """Drop an entry (releasing its preview). ``False`` if unknown."""
        for index, entry in enumerate(self._entries):
            if entry.entry_id == entry_id:
                del self._entries[index]
                if isinstance(entry, NewImage):
                    self.previews.release(entry_id)
                return True
        return False

    def kept_urls(self) -> list[str]:
        return [e.url for e in self._entries if isinstance(e, ExistingImage)]

    def new_files(self) -> list[LocalImageFile]:
        return [e.file for e in self._entries if isinstance(e, NewImage)]

    def clear(self) -> None:
        for entry in list(self._entries):
            self.remove(entry.entry_id)

    def close(self) -> None:
        """Release every preview still held."""
        self._entries = [
            e for e in self._entries if isinstance(e, ExistingImage)
        ]
        self.previews.release_all()
