"""In-memory EPUB builders shared by the test modules."""

import io
import zipfile

CONTAINER_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container" version="1.0">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

# 1x1 transparent PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06"
    b"\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01"
    b"\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


def build_opf(
    manifest: list[tuple[str, str, str]],
    spine: list[str],
    metadata: str = "<dc:title>Test Book</dc:title>",
    spine_toc: str | None = None,
    nav_id: str | None = None,
) -> str:
    """Build an OPF package document.

    manifest: [(id, href, media_type), ...]
    """
    items = []
    for item_id, href, media_type in manifest:
        props = ' properties="nav"' if item_id == nav_id else ""
        items.append(f'    <item id="{item_id}" href="{href}" media-type="{media_type}"{props}/>')
    itemrefs = "\n".join(f'    <itemref idref="{idref}"/>' for idref in spine)
    toc_attr = f' toc="{spine_toc}"' if spine_toc else ""
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf"
         xmlns:dc="http://purl.org/dc/elements/1.1/"
         version="3.0">
  <metadata>
    {metadata}
  </metadata>
  <manifest>
{chr(10).join(items)}
  </manifest>
  <spine{toc_attr}>
{itemrefs}
  </spine>
</package>"""


def chapter_xhtml(body: str, title: str = "Chapter") -> str:
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>{title}</title></head>
<body>
{body}
</body>
</html>"""


def ncx_document(nav_points: str) -> str:
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head><meta name="dtb:uid" content="test"/></head>
  <docTitle><text>Test Book</text></docTitle>
  <navMap>
{nav_points}
  </navMap>
</ncx>"""


def nav_document(navs: str) -> str:
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">
<head><title>Contents</title></head>
<body>
{navs}
</body>
</html>"""


def make_epub(
    files: dict[str, str | bytes],
    opf_path: str | None = "OEBPS/content.opf",
    container: str | None = None,
) -> bytes:
    """Build an EPUB ZIP in memory.

    ``container`` overrides the generated META-INF/container.xml; pass
    ``opf_path=None`` together with ``container=None`` to omit it.
    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("mimetype", "application/epub+zip")
        if container is not None:
            zf.writestr("META-INF/container.xml", container)
        elif opf_path is not None:
            zf.writestr("META-INF/container.xml", CONTAINER_XML.format(opf_path=opf_path))
        for path, content in files.items():
            zf.writestr(path, content)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Sample books
# ---------------------------------------------------------------------------

SAMPLE_METADATA = """\
<dc:title>Sample Book</dc:title>
    <dc:creator opf:role="aut" xmlns:opf="http://www.idpf.org/2007/opf">Jane Doe</dc:creator>
    <dc:creator>John Roe</dc:creator>
    <dc:language>en</dc:language>
    <dc:publisher>Acme Press</dc:publisher>
    <dc:description><p>A <b>short</b> book.</p></dc:description>"""

SAMPLE_NCX_POINTS = """\
    <navPoint id="np1" playOrder="1">
      <navLabel><text>Chapter 1</text></navLabel>
      <content src="Text/chap1.xhtml"/>
      <navPoint id="np2" playOrder="2">
        <navLabel><text>Section 1.1</text></navLabel>
        <content src="Text/chap1.xhtml#sec1"/>
      </navPoint>
    </navPoint>
    <navPoint id="np3" playOrder="3">
      <navLabel><text>Chapter 2</text></navLabel>
      <content src="chap2.xhtml"/>
    </navPoint>
    <navPoint id="np4" playOrder="4">
      <navLabel><text>Missing</text></navLabel>
      <content src="Text/missing.xhtml"/>
    </navPoint>"""

CHAP1_BODY = """\
<h1>Chapter One</h1>
<p id="sec1">Hello <a href="chap2.xhtml#top">next</a> and <a href="https://example.com/">web</a>.</p>
<img src="../Images/cover.png" alt="cover"/>"""

CHAP2_BODY = """\
<h1 id="top">Chapter Two</h1>
<p>Second chapter, back to <a href="#top">top</a>.</p>"""


def sample_ncx_epub() -> bytes:
    """EPUB2 book: OEBPS content root, NCX navigation, one out-of-spine item."""
    opf = build_opf(
        manifest=[
            ("ncx", "toc.ncx", "application/x-dtbncx+xml"),
            ("chap1", "Text/chap1.xhtml", "application/xhtml+xml"),
            ("chap2", "Text/chap2.xhtml", "application/xhtml+xml"),
            ("notes", "Text/notes.xhtml", "application/xhtml+xml"),
            ("cover-image", "Images/cover.png", "image/png"),
            ("css", "Styles/style.css", "text/css"),
        ],
        spine=["chap1", "chap2"],
        metadata=SAMPLE_METADATA,
        spine_toc="ncx",
    )
    return make_epub(
        {
            "OEBPS/content.opf": opf,
            "OEBPS/toc.ncx": ncx_document(SAMPLE_NCX_POINTS),
            "OEBPS/Text/chap1.xhtml": chapter_xhtml(CHAP1_BODY, "One"),
            "OEBPS/Text/chap2.xhtml": chapter_xhtml(CHAP2_BODY, "Two"),
            "OEBPS/Text/notes.xhtml": chapter_xhtml("<p>Standalone notes.</p>", "Notes"),
            "OEBPS/Images/cover.png": PNG_BYTES,
            "OEBPS/Styles/style.css": "p { margin: 0; }",
        }
    )


SAMPLE_NAVS = """\
<nav epub:type="landmarks">
  <ol><li><a href="text/c1.xhtml">Start</a></li></ol>
</nav>
<nav epub:type="toc" id="toc">
  <h1>Contents</h1>
  <ol>
    <li><a href="text/c1.xhtml"><span>1. </span>Part One</a>
      <ol>
        <li><a href="text/c2.xhtml">Chapter A</a></li>
        <li><a href="text/c3.xhtml#s2">Chapter B</a></li>
      </ol>
    </li>
    <li><span>Appendix</span>
      <ol>
        <li><a href="/text/c3.xhtml">Notes</a></li>
      </ol>
    </li>
  </ol>
</nav>"""


def sample_nav_epub() -> bytes:
    """EPUB3 book: package at archive root, nav document navigation."""
    opf = build_opf(
        manifest=[
            ("nav", "nav.xhtml", "application/xhtml+xml"),
            ("c1", "text/c1.xhtml", "application/xhtml+xml"),
            ("c2", "text/c2.xhtml", "application/xhtml+xml"),
            ("c3", "text/c3.xhtml", "application/xhtml+xml"),
        ],
        spine=["c1", "c2", "c3"],
        metadata="<dc:title>Nav Book</dc:title>",
        nav_id="nav",
    )
    return make_epub(
        {
            "content.opf": opf,
            "nav.xhtml": nav_document(SAMPLE_NAVS),
            "text/c1.xhtml": chapter_xhtml("<p>One</p>"),
            "text/c2.xhtml": chapter_xhtml("<p>Two</p>"),
            "text/c3.xhtml": chapter_xhtml('<p id="s2">Three</p>'),
        },
        opf_path="content.opf",
    )
