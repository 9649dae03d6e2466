"""Exceptions raised while reading EPUB containers."""


class EpubError(Exception):
    """Base error for EPUB parsing."""


class EntryNotFoundError(EpubError):
    """Archive entry could not be found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} not found")


class PackageDocumentError(EpubError):
    """Package document is missing or could not be parsed."""
