"""Access to entries inside the EPUB zip container."""

from __future__ import annotations

import io
import logging
import os
import zipfile
from dataclasses import dataclass
from urllib.parse import unquote

from bs4.dammit import UnicodeDammit

from epubkit.errors import EntryNotFoundError, EpubError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveEntry:
    """Raw content of one archive member."""

    path: str
    data: bytes

    @property
    def text(self) -> str:
        """Decoded content. Honors a BOM or declared encoding, else UTF-8.

        Bytes that fit no encoding become U+FFFD instead of failing.
        """
        decoded = UnicodeDammit(self.data, user_encodings=["utf-8"]).unicode_markup
        if decoded is None:
            log.warning("Could not detect encoding of %s", self.path)
            return self.data.decode("utf-8", errors="replace")
        return decoded


class ArchiveAccessor:
    """Resolve logical EPUB paths to archive members.

    Paths starting with ``/`` are relative to the archive root; every other
    path is prefixed with the content root (the package document's directory).
    """

    def __init__(
        self,
        source: str | os.PathLike | bytes | zipfile.ZipFile,
        root: str = "",
    ):
        if isinstance(source, zipfile.ZipFile):
            self._zip = source
        else:
            self._zip = self._open(source)
        self.root = root

    @staticmethod
    def _open(source: str | os.PathLike | bytes) -> zipfile.ZipFile:
        target = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
        try:
            return zipfile.ZipFile(target)
        except zipfile.BadZipFile as e:
            raise EpubError(f"Not a zip container: {e}") from e

    def with_root(self, root: str) -> ArchiveAccessor:
        """Return an accessor over the same archive with another content root."""
        return ArchiveAccessor(self._zip, root=root)

    def list_entries(self) -> list[str]:
        return self._zip.namelist()

    def resolve_path(self, path: str) -> str:
        """Map a logical path to the archive member name."""
        if path.startswith("/"):
            full_path = path[1:]
        else:
            full_path = self.root + path
        return unquote(full_path)

    def resolve(self, path: str) -> ArchiveEntry:
        """Read an entry, raising EntryNotFoundError if it does not exist."""
        full_path = self.resolve_path(path)
        try:
            data = self._zip.read(full_path)
        except KeyError:
            raise EntryNotFoundError(full_path) from None
        log.debug("Read %s (%d bytes)", full_path, len(data))
        return ArchiveEntry(path=full_path, data=data)

    def close(self) -> None:
        self._zip.close()
