"""DOCX text extraction.

Streams the WordprocessingML parts of a .docx container and returns their
text with paragraph, tab and line-break structure preserved.
"""

from __future__ import annotations

import io
import threading
import zipfile
import zlib
from typing import BinaryIO, IO, Protocol

from lxml import etree

from docsearch.errors import ExtractionCancelled, ExtractionError
from docsearch.ingest.normalizers import unify_line_endings

WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Body first, then notes; missing parts are skipped.
TEXT_PARTS = ("word/document.xml", "word/footnotes.xml", "word/endnotes.xml")

_TEXT = f"{{{WORD_NS}}}t"
_TAB = f"{{{WORD_NS}}}tab"
_TAB_STOPS = f"{{{WORD_NS}}}tabs"
_BREAKS = {f"{{{WORD_NS}}}br", f"{{{WORD_NS}}}cr"}
_PARAGRAPH = f"{{{WORD_NS}}}p"

# Everything zipfile and lxml raise for a damaged, encrypted or
# unsupported container.
_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    etree.LxmlError,
    OSError,
    EOFError,
    NotImplementedError,
    RuntimeError,
    ValueError,
)


class TextExtractor(Protocol):
    """Turns a document stream into plain text.

    Long-running extractors should poll *cancel* and raise
    ``ExtractionCancelled`` once it is set.
    """

    def __call__(self, stream: BinaryIO, cancel: threading.Event | None = None) -> str: ...


def extract_docx_text(stream: BinaryIO, cancel: threading.Event | None = None) -> str:
    """Return the plain text of a .docx stream.

    Raises:
        ExtractionError: the container cannot be opened or decompressed, or
            a part is not well-formed XML.
        ExtractionCancelled: *cancel* was set while the parts were read.
    """
    if not stream.seekable():
        stream = io.BytesIO(stream.read())

    out: list[str] = []
    try:
        with zipfile.ZipFile(stream) as archive:
            names = set(archive.namelist())
            for part in TEXT_PARTS:
                if part not in names:
                    continue
                with archive.open(part) as fh:
                    _append_part_text(fh, out, cancel)
                _end_line(out)
    except _READ_ERRORS as exc:
        raise ExtractionError(f"Cannot read document: {exc}") from exc

    return unify_line_endings("".join(out)).strip()


def _append_part_text(fh: IO[bytes], out: list[str], cancel: threading.Event | None) -> None:
    """Walk one XML part and append its text runs, tabs and breaks to *out*."""
    events = etree.iterparse(
        fh,
        events=("end",),
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )
    for _, elem in events:
        if cancel is not None and cancel.is_set():
            raise ExtractionCancelled("Extraction cancelled")
        tag = elem.tag
        if tag == _TEXT:
            if elem.text:
                out.append(elem.text)
        elif tag == _TAB:
            # <w:tabs><w:tab .../></w:tabs> defines tab stops, not content
            parent = elem.getparent()
            if parent is None or parent.tag != _TAB_STOPS:
                out.append("\t")
        elif tag in _BREAKS:
            out.append("\n")
        elif tag == _PARAGRAPH:
            _end_line(out)
            elem.clear()


def _end_line(out: list[str]) -> None:
    if out and not out[-1].endswith("\n"):
        out.append("\n")
