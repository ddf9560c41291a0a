"""Search-text normalisation shared by indexing and querying.

Documents and queries must go through the same functions here, otherwise
tokens stop lining up with the index.
"""

from __future__ import annotations

import re

from docsearch.models import ParagraphEntry

# Anything that is not a letter or digit, underscore included
_NON_ALNUM = re.compile(r"[\W_]+")


def normalize(text: str) -> str:
    """Lowercase, collapse every non-alphanumeric run to one space, trim.

    >>> normalize("  Hello,  World!! ")
    'hello world'
    """
    if not text or text.isspace():
        return ""
    # Lowercase first: some characters expand (e.g. "İ" -> "i" + combining dot)
    return _NON_ALNUM.sub(" ", text.lower()).strip()


def split_tokens(normalized_text: str, min_token_length: int) -> list[str]:
    """Unique tokens of a normalized string, in first-seen order."""
    if not normalized_text:
        return []
    tokens = (t for t in normalized_text.split(" ") if t and len(t) >= min_token_length)
    return list(dict.fromkeys(tokens))


def unify_line_endings(text: str) -> str:
    """Map CRLF and lone CR to LF.

    LF is the only line boundary: form feeds, vertical tabs and other
    Unicode separators stay inside a paragraph.
    """
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_paragraphs(text: str) -> list[ParagraphEntry]:
    """One entry per non-blank line, in document order."""
    paragraphs: list[ParagraphEntry] = []
    for line in unify_line_endings(text).split("\n"):
        line = line.strip()
        if not line:
            continue
        paragraphs.append(ParagraphEntry(text=line, normalized_text=normalize(line)))
    return paragraphs
