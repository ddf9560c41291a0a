"""Query resolution over a DocumentIndex: candidates, ranking and contexts."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from docsearch.models import DocumentIndex, ParagraphEntry, SearchHit

PHRASE_SCORE = 1000


class RankedMatch(NamedTuple):
    doc_id: int
    relative_path: str
    is_phrase_match: bool


def resolve_candidates(index: DocumentIndex, tokens: Sequence[str]) -> set[int]:
    """Ordinals of documents that contain every token."""
    sets: list[frozenset[int]] = []
    for token in tokens:
        doc_ids = index.postings.get(token)
        if not doc_ids:
            return set()
        sets.append(doc_ids)

    if not sets:
        return set()

    # Smallest first keeps the running intersection small
    sets.sort(key=len)
    candidates = set(sets[0])
    for doc_ids in sets[1:]:
        candidates &= doc_ids
        if not candidates:
            break
    return candidates


def rank_candidates(
    index: DocumentIndex,
    candidates: set[int],
    normalized_query: str,
) -> list[RankedMatch]:
    """Phrase matches first, then by relative path (case-insensitive)."""
    matches = []
    for doc_id in candidates:
        doc = index.documents[doc_id]
        matches.append(
            RankedMatch(doc_id, doc.relative_path, normalized_query in doc.normalized_text)
        )
    matches.sort(key=lambda m: (not m.is_phrase_match, m.relative_path.casefold(), m.doc_id))
    return matches


def find_paragraph_contexts(
    paragraphs: Sequence[ParagraphEntry],
    normalized_query: str,
    tokens: Sequence[str],
) -> list[str]:
    """Pick the paragraphs that best explain why a document matched.

    Every paragraph holding the whole phrase, or every token, is returned in
    document order (duplicates dropped). Failing that, the single paragraph
    with the best score is returned; the first one wins a tie.
    """
    strong: list[str] = []
    seen: set[str] = set()
    best_score = -1
    best_text: str | None = None

    for paragraph in paragraphs:
        text = paragraph.normalized_text
        if not text:
            continue

        phrase_match = normalized_query in text
        matched = sum(1 for token in tokens if token in text)

        if phrase_match or matched == len(tokens):
            if paragraph.text not in seen:
                seen.add(paragraph.text)
                strong.append(paragraph.text)
            continue

        score = (PHRASE_SCORE if phrase_match else 0) + matched
        if score > best_score:
            best_score = score
            best_text = paragraph.text

    if strong:
        return strong
    return [best_text] if best_text else []


def run_query(
    index: DocumentIndex,
    normalized_query: str,
    tokens: Sequence[str],
    *,
    max_results: int,
) -> tuple[list[SearchHit], int, bool]:
    """Resolve, rank and truncate.

    Returns:
        (hits, total_found, is_truncated)
    """
    candidates = resolve_candidates(index, tokens)
    if not candidates:
        return [], 0, False

    ranked = rank_candidates(index, candidates, normalized_query)
    total_found = len(ranked)
    is_truncated = total_found > max_results
    if is_truncated:
        ranked = ranked[:max_results]

    hits = [
        SearchHit(
            relative_path=m.relative_path,
            is_phrase_match=m.is_phrase_match,
            contexts=find_paragraph_contexts(
                index.documents[m.doc_id].paragraphs, normalized_query, tokens
            ),
        )
        for m in ranked
    ]
    return hits, total_found, is_truncated
