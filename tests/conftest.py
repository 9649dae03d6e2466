"""Pytest fixtures for epubkit tests.

All EPUB fixtures are built in memory with zipfile; see tests/helpers.py.
"""

from pathlib import Path

import pytest

from epubkit.core.archive import ArchiveAccessor
from tests.helpers import sample_nav_epub, sample_ncx_epub


@pytest.fixture
def ncx_epub_bytes() -> bytes:
    return sample_ncx_epub()


@pytest.fixture
def nav_epub_bytes() -> bytes:
    return sample_nav_epub()


@pytest.fixture
def ncx_epub_path(tmp_path: Path, ncx_epub_bytes: bytes) -> Path:
    path = tmp_path / "sample book.epub"
    path.write_bytes(ncx_epub_bytes)
    return path


@pytest.fixture
def archive(ncx_epub_bytes: bytes):
    """Accessor over the NCX sample with its OEBPS/ content root."""
    accessor = ArchiveAccessor(ncx_epub_bytes, root="OEBPS/")
    yield accessor
    accessor.close()
