"""Convert section HTML into Markdown and plain text."""

import re

from bs4 import BeautifulSoup
from markdownify import markdownify as md

from epubkit.core.markup import parse_html

_XML_DECLARATION = re.compile(r"\s?<\?xml[^>]*\?>\s?")
_DOCTYPE = re.compile(r"\s?<!DOCTYPE[^>]*>\s?", re.IGNORECASE)

# Elements that never carry reading content
_NOISE_TAGS = ["script", "style", "head"]


def clean_html(html_string: str) -> str:
    """Drop XML declarations and doctypes and collapse blank lines."""
    html_string = _XML_DECLARATION.sub("", html_string)
    html_string = _DOCTYPE.sub("", html_string)
    return re.sub(r"\n+\s?", "\n", html_string)


def _body(html_string: str) -> BeautifulSoup:
    soup = parse_html(clean_html(html_string))
    for tag in soup(_NOISE_TAGS):
        tag.decompose()
    return soup.body or soup


def html_to_markdown(html_string: str) -> str:
    """Default Markdown converter for sections."""
    markdown = md(
        str(_body(html_string)),
        heading_style="ATX",
        bullets="-",
    )
    # Clean up excessive whitespace
    lines = [line.rstrip() for line in markdown.split("\n")]
    cleaned = []
    prev_blank = False
    for line in lines:
        is_blank = not line.strip()
        if is_blank and prev_blank:
            continue
        cleaned.append(line)
        prev_blank = is_blank

    return "\n".join(cleaned).strip()


def html_to_text(html_string: str) -> str:
    """Extract plain text with paragraph preservation."""
    body = _body(html_string)
    paragraphs = []
    for p in body.find_all(["p", "h1", "h2", "h3", "h4", "h5", "h6", "li"]):
        text = " ".join(p.get_text().split())
        if text:
            paragraphs.append(text)
    if not paragraphs:
        return body.get_text(separator=" ", strip=True)
    return "\n\n".join(paragraphs)
