"""Filesystem-backed document repository."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Protocol

from docsearch.config import get_settings, project_root
from docsearch.models import DocumentFile


class DocumentRepository(Protocol):
    """What the index builder needs from a corpus."""

    @property
    def root_path(self) -> str: ...

    def list_documents(self) -> list[DocumentFile]: ...

    def open_document(self, file: DocumentFile) -> BinaryIO: ...


class FileSystemDocumentRepository:
    """Lists documents under a folder tree and opens them for reading."""

    def __init__(
        self,
        root_path: str | Path | None = None,
        *,
        suffixes: list[str] | None = None,
    ):
        cfg = get_settings().documents
        self.root = resolve_root(root_path or cfg.root_path)
        self.suffixes = {s.lower() for s in (suffixes or cfg.suffixes)}

    @property
    def root_path(self) -> str:
        return str(self.root)

    def list_documents(self) -> list[DocumentFile]:
        """All matching files, sorted by case-insensitive relative path.

        A missing root folder is an empty corpus, not an error.
        """
        if not self.root.is_dir():
            return []

        files: list[DocumentFile] = []
        for path in self.root.rglob("*"):
            if not path.is_file() or path.suffix.lower() not in self.suffixes:
                continue
            # Word keeps "~$name.docx" owner files next to open documents
            if path.name.startswith("~$"):
                continue
            stat = path.stat()
            files.append(
                DocumentFile(
                    source_path=str(path),
                    relative_path=path.relative_to(self.root).as_posix(),
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    size_bytes=stat.st_size,
                )
            )

        files.sort(key=lambda f: (f.relative_path.casefold(), f.relative_path))
        return files

    def open_document(self, file: DocumentFile) -> BinaryIO:
        """Open a listed file for binary reading. The caller closes it."""
        return open(file.source_path, "rb")


def resolve_root(configured: str | Path) -> Path:
    """Resolve a configured documents folder.

    Relative paths are tried against the project root first, then the
    working directory; if neither exists the project-root candidate wins.
    """
    path = Path(configured).expanduser()
    if path.is_absolute():
        return path

    candidate = (project_root() / path).resolve()
    if candidate.is_dir():
        return candidate

    cwd_candidate = (Path.cwd() / path).resolve()
    if cwd_candidate.is_dir():
        return cwd_candidate

    return candidate
