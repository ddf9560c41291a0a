"""Index build pipeline: list, extract, normalize, then index."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict

from docsearch.errors import ExtractionCancelled, ListingError
from docsearch.ingest.extractor import TextExtractor
from docsearch.ingest.normalizers import normalize, split_paragraphs, split_tokens
from docsearch.models import DocumentEntry, DocumentFile, DocumentIndex
from docsearch.stores.repository import DocumentRepository

log = logging.getLogger(__name__)


def read_document(
    repository: DocumentRepository,
    extractor: TextExtractor,
    file: DocumentFile,
    cancel: threading.Event | None = None,
) -> DocumentEntry | None:
    """Extract and normalize one document.

    Returns None when the document has no indexable text. Runs in a worker
    thread; exceptions propagate to the caller.
    """
    if cancel is not None and cancel.is_set():
        raise ExtractionCancelled(f"Skipped {file.relative_path}: build cancelled")

    with repository.open_document(file) as stream:
        text = extractor(stream, cancel=cancel)

    normalized = normalize(text)
    if not normalized:
        return None

    return DocumentEntry(
        relative_path=file.relative_path,
        normalized_text=normalized,
        paragraphs=tuple(split_paragraphs(text)),
    )


async def build_index(
    repository: DocumentRepository,
    extractor: TextExtractor,
    *,
    min_token_length: int,
    max_parallelism: int,
) -> tuple[DocumentIndex, int]:
    """Build a fresh index over every document in the repository.

    Documents are processed concurrently, at most *max_parallelism* at a
    time. A document that fails to open or extract is logged and counted;
    it never fails the build.

    Returns:
        (index, failed_document_count)

    Raises:
        ListingError: the repository could not be listed.
    """
    try:
        files = await asyncio.to_thread(repository.list_documents)
    except OSError as exc:
        raise ListingError(f"Cannot list documents in {repository.root_path}: {exc}") from exc

    if not files:
        log.info("No documents found in %s", repository.root_path)
        return DocumentIndex.empty(), 0

    semaphore = asyncio.Semaphore(max(1, max_parallelism))
    # Set on cancellation so worker threads stop instead of reading to the end
    cancel = threading.Event()
    entries: list[DocumentEntry] = []
    failed: list[str] = []

    async def _worker(file: DocumentFile) -> None:
        async with semaphore:
            try:
                entry = await asyncio.to_thread(read_document, repository, extractor, file, cancel)
            except Exception:
                failed.append(file.relative_path)
                log.warning("Failed to index document %s", file.relative_path, exc_info=True)
                return
        if entry is not None:
            entries.append(entry)

    try:
        await asyncio.gather(*(_worker(f) for f in files))
    except asyncio.CancelledError:
        cancel.set()
        raise

    # Completion order is arbitrary; the published order is not
    documents = sorted(entries, key=lambda d: (d.relative_path.casefold(), d.relative_path))

    postings: dict[str, set[int]] = defaultdict(set)
    for doc_id, doc in enumerate(documents):
        for token in split_tokens(doc.normalized_text, min_token_length):
            postings[token].add(doc_id)

    index = DocumentIndex(
        documents=tuple(documents),
        postings={token: frozenset(ids) for token, ids in postings.items()},
    )
    log.info(
        "Indexed %d document(s) from %s: %d token(s), %d failed",
        len(documents),
        repository.root_path,
        len(postings),
        len(failed),
    )
    return index, len(failed)
