"""Extract book metadata from the package <metadata> element."""

from bs4 import Tag

from epubkit.core.markup import text_of
from epubkit.models.epub import BookInfo

SCALAR_FIELDS = ("title", "language", "publisher", "rights")


def _authors(metadata: Tag) -> list[str | None]:
    return [text_of(creator) for creator in metadata.find_all("creator")]


def _description(metadata: Tag) -> str | None:
    # Some producers wrap the text in <p>/<div>; take all nested text
    description = metadata.find("description")
    if description is None:
        return None
    return " ".join(description.get_text(" ").split()) or None


def extract_metadata(metadata: Tag | None) -> BookInfo:
    """Build a BookInfo holding only the fields present in ``metadata``."""
    if metadata is None:
        return BookInfo()

    info: dict[str, object] = {
        field: text_of(metadata.find(field)) for field in SCALAR_FIELDS
    }
    info["author"] = _authors(metadata)
    info["description"] = _description(metadata)

    def present(value: object) -> bool:
        if isinstance(value, list):
            return len(value) != 0 and value[0] is not None
        return value is not None

    kept = {key: value for key, value in info.items() if present(value)}
    if "author" in kept:
        kept["author"] = [a for a in kept["author"] if a is not None]
    return BookInfo(**kept)
