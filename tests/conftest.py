"""Shared test fixtures."""

from __future__ import annotations

import io
import threading
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

import pytest

from docsearch.config import SearchConfig
from docsearch.models import DocumentFile

# Ensure tests run from the project root so config.default.yaml is found
PROJECT_ROOT = Path(__file__).parent.parent

WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


@pytest.fixture(autouse=True)
def _set_project_root(monkeypatch, tmp_path):
    """Point DOCSEARCH_ROOT at the project root and use tmp_path for documents."""
    monkeypatch.setenv("DOCSEARCH_ROOT", str(PROJECT_ROOT))
    monkeypatch.setenv("DOCSEARCH_DOCUMENTS__ROOT_PATH", str(tmp_path / "docs"))

    # Reset settings cache between tests
    from docsearch.config import reset_settings
    reset_settings()


class FakeRepository:
    """In-memory corpus: relative path -> UTF-8 text."""

    def __init__(self, files: dict[str, str], root_path: str = "root"):
        self.files = {path: text.encode("utf-8") for path, text in files.items()}
        self._root_path = root_path
        self.opened: list[str] = []

    @property
    def root_path(self) -> str:
        return self._root_path

    def list_documents(self) -> list[DocumentFile]:
        now = datetime.now(timezone.utc)
        return sorted(
            (
                DocumentFile(source_path=path, relative_path=path, modified_at=now, size_bytes=len(data))
                for path, data in self.files.items()
            ),
            key=lambda f: f.relative_path.casefold(),
        )

    def open_document(self, file: DocumentFile) -> BinaryIO:
        self.opened.append(file.relative_path)
        return io.BytesIO(self.files[file.relative_path])

    def set_file(self, relative_path: str, text: str) -> None:
        self.files[relative_path] = text.encode("utf-8")


def plain_text_extractor(stream: BinaryIO, cancel: threading.Event | None = None) -> str:
    """Treat the stream as UTF-8 text."""
    return stream.read().decode("utf-8")


def make_docx_bytes(document_xml: str, **parts: str) -> bytes:
    """Zip a raw word/document.xml (plus optional parts such as footnotes)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("word/document.xml", document_xml)
        for name, xml in parts.items():
            archive.writestr(f"word/{name}.xml", xml)
    return buffer.getvalue()


def word_xml(body: str, root: str = "document") -> str:
    """Wrap WordprocessingML body markup in a minimal part."""
    if root == "document":
        inner = f"<w:body>{body}</w:body>"
    else:
        inner = body
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:{root} xmlns:w="{WORD_NS}">{inner}</w:{root}>'
    )


@pytest.fixture
def search_config():
    return SearchConfig(
        min_query_length=2,
        min_token_length=2,
        max_results=50,
        max_parallelism=1,
    )
