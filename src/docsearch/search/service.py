"""Document search service that owns the published index snapshot.

Readers take whatever snapshot is current without locking. Writers (explicit
reloads and the lazy first build) go through one serialized path and publish
a new snapshot with a single attribute assignment, so a search racing a
reload sees either the old index or the new one, never a mix.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from docsearch.config import SearchConfig, get_settings
from docsearch.ingest.extractor import TextExtractor, extract_docx_text
from docsearch.ingest.normalizers import normalize, split_tokens
from docsearch.ingest.pipeline import build_index
from docsearch.models import (
    DocumentIndex,
    IndexSnapshot,
    IndexState,
    IndexStatus,
    SearchResult,
    SearchStatus,
)
from docsearch.search.engine import run_query
from docsearch.stores.repository import DocumentRepository

log = logging.getLogger(__name__)


class DocumentSearchService:
    """Search, reload and status over one document repository."""

    def __init__(
        self,
        repository: DocumentRepository,
        extractor: TextExtractor = extract_docx_text,
        *,
        config: SearchConfig | None = None,
    ):
        self.repository = repository
        self.extractor = extractor
        self.config = config or get_settings().search
        self._reload_lock = asyncio.Lock()
        self._state = IndexState.UNINITIALIZED
        self._snapshot = IndexSnapshot(
            index=DocumentIndex.empty(),
            status=IndexStatus(root_path=repository.root_path),
        )

    @property
    def state(self) -> IndexState:
        return self._state

    def get_status(self) -> IndexStatus:
        return self._snapshot.status

    async def reload(self) -> None:
        """Rebuild the index from scratch, waiting for any build in flight."""
        await self._rebuild(force=True)

    async def search(self, query: str) -> SearchResult:
        """Run a free-text query; builds the index on first use."""
        cfg = self.config
        root_path = self.repository.root_path

        normalized_query = normalize(query)
        if len(normalized_query) < cfg.min_query_length:
            return SearchResult(
                query=query,
                status=SearchStatus.QUERY_TOO_SHORT,
                root_path=root_path,
                indexed_document_count=self._snapshot.status.document_count,
            )

        snapshot = await self._ensure_snapshot()
        index, status = snapshot.index, snapshot.status

        if status.last_error and not index.documents:
            return SearchResult(
                query=query,
                status=SearchStatus.ERROR,
                root_path=root_path,
                error_message=status.last_error,
            )

        if not index.documents:
            return SearchResult(query=query, status=SearchStatus.INDEX_EMPTY, root_path=root_path)

        tokens = split_tokens(normalized_query, cfg.min_token_length)
        if not tokens:
            return SearchResult(
                query=query,
                status=SearchStatus.QUERY_TOO_SHORT,
                root_path=root_path,
                indexed_document_count=len(index.documents),
            )

        hits, total_found, is_truncated = run_query(
            index, normalized_query, tokens, max_results=cfg.max_results
        )
        return SearchResult(
            query=query,
            status=SearchStatus.OK,
            hits=hits,
            total_found=total_found,
            is_truncated=is_truncated,
            root_path=root_path,
            indexed_document_count=len(index.documents),
        )

    # -- Lifecycle -----------------------------------------------------------

    async def _ensure_snapshot(self) -> IndexSnapshot:
        snapshot = self._snapshot
        if snapshot.status.is_ready:
            return snapshot
        await self._rebuild(force=False)
        return self._snapshot

    async def _rebuild(self, *, force: bool) -> None:
        async with self._reload_lock:
            previous = self._snapshot
            if not force and previous.status.is_ready:
                return

            previous_state = self._state
            self._state = IndexState.BUILDING
            built_at = datetime.now(timezone.utc)
            try:
                index, failed = await build_index(
                    self.repository,
                    self.extractor,
                    min_token_length=self.config.min_token_length,
                    max_parallelism=self.config.max_parallelism,
                )
            except asyncio.CancelledError:
                self._state = previous_state
                raise
            except Exception as exc:
                log.exception("Failed to rebuild document index")
                self._snapshot = IndexSnapshot(
                    index=previous.index,
                    status=previous.status.model_copy(
                        update={"is_ready": True, "last_error": str(exc) or type(exc).__name__}
                    ),
                )
                self._state = IndexState.FAILED
                return

            self._snapshot = IndexSnapshot(
                index=index,
                status=IndexStatus(
                    root_path=self.repository.root_path,
                    is_ready=True,
                    document_count=len(index.documents),
                    failed_document_count=failed,
                    last_built_at=built_at,
                ),
            )
            self._state = IndexState.READY


def create_service(*, config: SearchConfig | None = None) -> DocumentSearchService:
    """Service over the configured documents folder with the .docx extractor."""
    from docsearch.stores.repository import FileSystemDocumentRepository

    return DocumentSearchService(FileSystemDocumentRepository(), config=config)
