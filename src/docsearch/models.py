"""Shared domain models used across the system."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class DocumentFile(BaseModel):
    """One source document as reported by a repository listing."""

    model_config = ConfigDict(frozen=True)

    source_path: str
    relative_path: str
    modified_at: datetime
    size_bytes: int = 0


class ParagraphEntry(BaseModel):
    """A non-blank line of extracted text, trimmed, plus its normalized form."""

    model_config = ConfigDict(frozen=True)

    text: str
    normalized_text: str


class DocumentEntry(BaseModel):
    """An indexed document: normalized full text and its paragraph table."""

    model_config = ConfigDict(frozen=True)

    relative_path: str
    normalized_text: str
    paragraphs: tuple[ParagraphEntry, ...] = ()


class DocumentIndex(BaseModel):
    """Inverted index over one corpus build.

    ``postings`` maps a token to the ordinals of the documents containing it.
    An ordinal is a position in ``documents`` and is only meaningful within
    the index instance that produced it; a rebuild renumbers everything.
    """

    model_config = ConfigDict(frozen=True)

    documents: tuple[DocumentEntry, ...] = ()
    postings: dict[str, frozenset[int]] = {}

    @classmethod
    def empty(cls) -> DocumentIndex:
        return cls()


class IndexStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    root_path: str
    is_ready: bool = False
    document_count: int = 0
    failed_document_count: int = 0
    last_built_at: datetime | None = None
    last_error: str | None = None


class IndexSnapshot(BaseModel):
    """The index and its status, always published together."""

    model_config = ConfigDict(frozen=True)

    index: DocumentIndex
    status: IndexStatus


class IndexState(str, Enum):
    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    READY = "ready"
    FAILED = "failed"


class SearchStatus(str, Enum):
    OK = "ok"
    QUERY_TOO_SHORT = "query_too_short"
    INDEX_EMPTY = "index_empty"
    ERROR = "error"


class SearchHit(BaseModel):
    """A matching file with the paragraphs that explain the match."""

    relative_path: str
    is_phrase_match: bool
    contexts: list[str] = []


class SearchResult(BaseModel):
    query: str
    status: SearchStatus
    hits: list[SearchHit] = []
    total_found: int = 0
    is_truncated: bool = False
    root_path: str = ""
    indexed_document_count: int = 0
    error_message: str | None = None
