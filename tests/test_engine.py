"""Tests for docsearch.search.engine."""

from __future__ import annotations

from docsearch.ingest.normalizers import normalize, split_paragraphs
from docsearch.models import DocumentEntry, DocumentIndex, ParagraphEntry
from docsearch.search.engine import (
    find_paragraph_contexts,
    rank_candidates,
    resolve_candidates,
    run_query,
)


def _paragraphs(*lines: str) -> list[ParagraphEntry]:
    return [ParagraphEntry(text=line, normalized_text=normalize(line)) for line in lines]


def _index(docs: dict[str, str], postings: dict[str, set[int]] | None = None) -> DocumentIndex:
    documents = tuple(
        DocumentEntry(
            relative_path=path,
            normalized_text=normalize(text),
            paragraphs=tuple(split_paragraphs(text)),
        )
        for path, text in docs.items()
    )
    return DocumentIndex(
        documents=documents,
        postings={k: frozenset(v) for k, v in (postings or {}).items()},
    )


# -- Candidates ---------------------------------------------------------------


def test_intersection_returns_only_common_documents():
    index = _index(
        {f"{i}.docx": "x" for i in range(5)},
        postings={"aa": {1, 2, 3}, "bb": {2, 4}},
    )
    assert resolve_candidates(index, ["aa", "bb"]) == {2}


def test_unknown_token_yields_no_candidates():
    index = _index({"a.docx": "x"}, postings={"aa": {0}})
    assert resolve_candidates(index, ["aa", "zz"]) == set()


def test_single_token_returns_its_postings():
    index = _index({"a.docx": "x", "b.docx": "y"}, postings={"aa": {0, 1}})
    assert resolve_candidates(index, ["aa"]) == {0, 1}


def test_candidates_do_not_alias_postings():
    index = _index({"a.docx": "x"}, postings={"aa": {0}})
    candidates = resolve_candidates(index, ["aa"])
    candidates.add(99)
    assert index.postings["aa"] == frozenset({0})


# -- Ranking ------------------------------------------------------------------


def test_phrase_matches_rank_first_then_path():
    index = _index({
        "b.docx": "world hello",
        "C.docx": "hello world",
        "a.docx": "world and hello",
        "D.docx": "say hello world",
    })
    ranked = rank_candidates(index, {0, 1, 2, 3}, "hello world")
    assert [(m.relative_path, m.is_phrase_match) for m in ranked] == [
        ("C.docx", True),
        ("D.docx", True),
        ("a.docx", False),
        ("b.docx", False),
    ]


# -- Contexts -----------------------------------------------------------------


def test_context_is_the_phrase_paragraph():
    paragraphs = _paragraphs("intro", "alpha beta gamma", "outro")
    assert find_paragraph_contexts(paragraphs, "beta gamma", ["beta", "gamma"]) == ["alpha beta gamma"]


def test_all_strong_matches_in_order():
    paragraphs = _paragraphs("first tz", "second tz", "third")
    assert find_paragraph_contexts(paragraphs, "tz", ["tz"]) == ["first tz", "second tz"]


def test_paragraph_with_all_tokens_is_strong_without_phrase():
    paragraphs = _paragraphs("gamma then beta", "beta only")
    assert find_paragraph_contexts(paragraphs, "beta gamma", ["beta", "gamma"]) == ["gamma then beta"]


def test_strong_matches_are_deduplicated_exactly():
    paragraphs = _paragraphs("Beta Gamma", "beta gamma", "Beta Gamma")
    assert find_paragraph_contexts(paragraphs, "beta gamma", ["beta", "gamma"]) == [
        "Beta Gamma",
        "beta gamma",
    ]


def test_fallback_picks_best_scoring_paragraph():
    # Tokens are spread over paragraphs, so nothing is a strong match
    paragraphs = _paragraphs("alpha", "beta and gamma", "delta gamma")
    contexts = find_paragraph_contexts(
        paragraphs, "alpha beta gamma", ["alpha", "beta", "gamma"]
    )
    assert contexts == ["beta and gamma"]


def test_fallback_tie_keeps_first_paragraph():
    paragraphs = _paragraphs("alpha one", "beta two")
    assert find_paragraph_contexts(paragraphs, "alpha beta", ["alpha", "beta"]) == ["alpha one"]


def test_no_paragraphs_no_contexts():
    assert find_paragraph_contexts([], "alpha", ["alpha"]) == []


def test_punctuation_only_paragraphs_are_skipped():
    paragraphs = _paragraphs("***", "nothing relevant")
    assert find_paragraph_contexts(paragraphs, "alpha", ["alpha"]) == ["nothing relevant"]


# -- run_query ----------------------------------------------------------------


def test_run_query_truncates_and_reports_total():
    docs = {f"{i}.docx": f"common word {i}" for i in range(5)}
    index = _index(docs, postings={"common": set(range(5))})

    hits, total, truncated = run_query(index, "common", ["common"], max_results=2)

    assert total == 5
    assert truncated is True
    assert [h.relative_path for h in hits] == ["0.docx", "1.docx"]
    assert hits[0].contexts == ["common word 0"]


def test_run_query_without_candidates():
    index = _index({"a.docx": "x"}, postings={"aa": {0}})
    assert run_query(index, "zz", ["zz"], max_results=10) == ([], 0, False)
