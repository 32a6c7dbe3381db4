# tests/unit/test_concept_index.py
"""
Tests for concept_rag.index.concept_index.

Tests cover:
1. Build - empty corpus, empty concepts, per-concept failure isolation
2. Rebuild - atomic replacement, failed rebuild keeps the previous index
3. Query - typo tolerance, threshold, ordering, top_k, argument validation
4. Concurrency - queries racing a rebuild
"""

from __future__ import annotations

import math
import threading
import time
from functools import partial

import numpy as np
import pytest

from concept_rag.core.exceptions import (
    ConceptNotFoundError,
    EmptyCorpusError,
    InvalidConfigurationError,
    NotBuiltError,
    NotFittedError,
)
from concept_rag.core.models import Concept, Document
from concept_rag.index.concept_index import ConceptVectorIndex
from concept_rag.retrieval.vectorizer import TfidfVectorizer, cosine_similarity


def concept(concept_id: str, *texts: str) -> Concept:
    return Concept(
        id=concept_id,
        name=concept_id.title(),
        documents=[Document(id=f"{concept_id}{i}", content=t) for i, t in enumerate(texts)],
    )


class ExplodingVectorizer(TfidfVectorizer):
    """Vectorizer whose transform fails on any text mentioning 'explode'."""

    def transform(self, text):
        if text and "explode" in text:
            raise RuntimeError("transform failed")
        return super().transform(text)


class SlowVectorizer(TfidfVectorizer):
    """Vectorizer that stalls on texts mentioning a given word."""

    def __init__(self, slow_word: str):
        super().__init__()
        self.slow_word = slow_word

    def transform(self, text):
        if text and self.slow_word in text:
            time.sleep(0.05)
        return super().transform(text)


class BrokenConcept:
    """Concept whose documents cannot be read."""

    id = "broken"

    @property
    def documents(self):
        raise RuntimeError("repository offline")


# ---------------------------------------------------------------------------
# Construction / lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    """Tests for the unbuilt index."""

    def test_invalid_max_workers(self, fuzzy_service):
        with pytest.raises(InvalidConfigurationError):
            ConceptVectorIndex(fuzzy_service, max_workers=0)

    def test_query_before_build(self, fuzzy_service):
        index = ConceptVectorIndex(fuzzy_service)
        assert not index.is_built
        assert len(index) == 0

        with pytest.raises(NotBuiltError):
            index.query("machine learning")
        with pytest.raises(NotBuiltError):
            index.expand_query("machine")
        with pytest.raises(NotBuiltError):
            _ = index.vocabulary

    def test_not_built_is_not_fitted(self, fuzzy_service):
        with pytest.raises(NotFittedError):
            ConceptVectorIndex(fuzzy_service).get_vector("ml")


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


class TestBuild:
    """Tests for build_index()."""

    def test_build_report(self, fuzzy_service, sample_concepts):
        index = ConceptVectorIndex(fuzzy_service, max_workers=2)
        report = index.build_index(sample_concepts)

        assert report.indexed == 2
        assert report.skipped_empty == []
        assert report.failed == {}
        assert report.vocabulary_size == len(index.vocabulary)
        assert report.duration_seconds >= 0.0
        assert index.is_built
        assert index.concept_ids == ["ml", "prog"]

    def test_empty_corpus_raises(self, fuzzy_service):
        index = ConceptVectorIndex(fuzzy_service)
        with pytest.raises(EmptyCorpusError):
            index.build_index([])
        with pytest.raises(EmptyCorpusError):
            index.build_index([concept("empty")])
        assert not index.is_built

    def test_empty_concept_is_never_indexed(self, fuzzy_service, sample_concepts):
        index = ConceptVectorIndex(fuzzy_service)
        report = index.build_index(sample_concepts + [concept("empty")])

        assert report.skipped_empty == ["empty"]
        assert "empty" not in index
        assert len(index) == 2

        matches = index.query("machine learning", minimum_score=-1.0, top_k=10)
        assert "empty" not in {m.concept_id for m in matches}

    def test_failing_concept_is_isolated(self, fuzzy_service, sample_concepts):
        index = ConceptVectorIndex(fuzzy_service, vectorizer_factory=ExplodingVectorizer)
        report = index.build_index(sample_concepts + [concept("bad", "explode the database")])

        assert "bad" in report.failed
        assert report.indexed == 2
        assert "bad" not in index
        assert index.query("machne learnin")[0].concept_id == "ml"

    @pytest.mark.parametrize("slow_word", ["alpha", "beta"])
    def test_duplicate_ids_keep_first_occurrence(self, fuzzy_service, slow_word):
        index = ConceptVectorIndex(
            fuzzy_service,
            vectorizer_factory=partial(SlowVectorizer, slow_word=slow_word),
            max_workers=2,
        )
        report = index.build_index(
            [concept("x", "alpha"), concept("x", "beta"), concept("z", "gamma")]
        )

        assert report.duplicates == ["x"]
        assert report.indexed == 2
        assert "beta" not in index.vocabulary
        matches = index.query("alpha", minimum_score=0.0)
        assert [(m.concept_id, round(m.score, 6)) for m in matches] == [("x", 1.0), ("z", 0.0)]

    def test_unreadable_concept_is_isolated(self, fuzzy_service, sample_concepts):
        index = ConceptVectorIndex(fuzzy_service)
        report = index.build_index([BrokenConcept(), *sample_concepts])

        assert list(report.failed) == ["broken"]
        assert index.concept_ids == ["ml", "prog"]

    def test_concept_vector_is_document_mean(self, fuzzy_service, sample_concepts):
        index = ConceptVectorIndex(fuzzy_service)
        index.build_index(sample_concepts)

        reference = TfidfVectorizer().fit(
            [d.content for c in sample_concepts for d in c.documents]
        )
        ml_docs = [d.content for d in sample_concepts[0].documents]
        expected = np.mean([reference.transform(t) for t in ml_docs], axis=0)

        assert np.allclose(index.get_vector("ml"), expected)

    def test_identical_documents_self_similarity(self, fuzzy_service):
        text = "neural networks learn representations"
        index = ConceptVectorIndex(fuzzy_service)
        index.build_index([concept("dup", text, text), concept("db", "database systems")])

        matches = index.query(text, minimum_score=0.0, top_k=1)
        assert matches[0].concept_id == "dup"
        assert matches[0].score == pytest.approx(1.0, abs=1e-6)

    def test_vectors_are_read_only(self, built_index):
        vector = built_index.get_vector("ml")
        assert vector.shape == (len(built_index.vocabulary),)
        with pytest.raises(ValueError):
            vector[0] = 1.0

    def test_get_vector_unknown(self, built_index):
        with pytest.raises(ConceptNotFoundError):
            built_index.get_vector("chemistry")
        with pytest.raises(KeyError):
            built_index.get_vector("chemistry")


# ---------------------------------------------------------------------------
# Rebuild
# ---------------------------------------------------------------------------


class TestRebuild:
    """Tests for rebuilding a live index."""

    def test_rebuild_replaces_everything(self, built_index):
        built_index.build_index([concept("chem", "atoms and molecules"), concept("bio", "cells")])

        assert built_index.concept_ids == ["bio", "chem"]
        assert "ml" not in built_index
        assert "machine" not in built_index.vocabulary

    def test_failed_rebuild_keeps_previous_index(self, built_index):
        vocabulary = built_index.vocabulary

        with pytest.raises(EmptyCorpusError):
            built_index.build_index([])

        assert built_index.vocabulary is vocabulary
        assert built_index.concept_ids == ["ml", "prog"]
        assert built_index.query("machne learnin")[0].concept_id == "ml"

    def test_rebuild_clears_expansion_cache(self, built_index, fuzzy_service):
        built_index.query("machne learnin")
        assert fuzzy_service.cache_size > 0

        built_index.build_index([concept("chem", "atoms and molecules")])
        assert fuzzy_service.cache_size == 0


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------


class TestQuery:
    """Tests for query() and friends."""

    def test_typo_query_finds_machine_learning(self, built_index):
        matches = built_index.query("machne learnin", minimum_score=0.1, top_k=5)

        assert [m.concept_id for m in matches] == ["ml"]
        assert 0.1 <= matches[0].score <= 1.0

    def test_programming_query(self, built_index):
        matches = built_index.query("sofware developement")
        assert matches[0].concept_id == "prog"

    def test_high_threshold_returns_nothing(self, built_index):
        assert built_index.query("machne learnin", minimum_score=0.99, top_k=5) == []

    def test_unrelated_query_returns_nothing(self, built_index):
        assert built_index.query("quantum chromodynamics") == []

    def test_blank_query_returns_nothing(self, built_index):
        assert built_index.query("   ") == []

    def test_scores_sorted_and_bounded(self, built_index):
        matches = built_index.query("data systems learning", minimum_score=-1.0, top_k=10)

        scores = [m.score for m in matches]
        assert scores == sorted(scores, reverse=True)
        assert all(-1.0 <= s <= 1.0 for s in scores)

    def test_top_k_limits_results(self, built_index):
        matches = built_index.query("data", minimum_score=-1.0, top_k=1)
        assert len(matches) == 1

    def test_ties_ordered_by_concept_id(self, fuzzy_service):
        index = ConceptVectorIndex(fuzzy_service)
        index.build_index(
            [
                concept("b", "alpha beta"),
                concept("a", "alpha beta"),
                concept("c", "gamma delta"),
            ]
        )

        matches = index.query("alpha beta", minimum_score=0.5)
        assert [m.concept_id for m in matches] == ["a", "b"]
        assert matches[0].score == matches[1].score

    @pytest.mark.parametrize("top_k", [0, -1])
    def test_invalid_top_k(self, built_index, top_k):
        with pytest.raises(InvalidConfigurationError):
            built_index.query("machine", top_k=top_k)

    @pytest.mark.parametrize("minimum_score", [math.nan, math.inf])
    def test_non_finite_minimum_score(self, built_index, minimum_score):
        with pytest.raises(InvalidConfigurationError):
            built_index.query("machine", minimum_score=minimum_score)

    def test_expand_query(self, built_index):
        assert built_index.expand_query("machne learnin") == "machne machine learnin learning"

    def test_expand_query_deduplicates(self, built_index):
        assert built_index.expand_query("machne MACHNE") == "machne machine"

    def test_query_with_expansion(self, built_index):
        expanded, matches = built_index.query_with_expansion("machne learnin")
        assert expanded == "machne machine learnin learning"
        assert matches == built_index.query("machne learnin")

    def test_search_vector_zero_query(self, built_index):
        zero = np.zeros(len(built_index.vocabulary))

        assert built_index.search_vector(zero) == []
        # zero vectors score 0.0 against everything, ties fall back to id order
        matches = built_index.search_vector(zero, minimum_score=0.0)
        assert [(m.concept_id, m.score) for m in matches] == [("ml", 0.0), ("prog", 0.0)]

    def test_search_vector_matches_cosine(self, built_index):
        vector = built_index.get_vector("prog")
        matches = built_index.search_vector(vector, minimum_score=-1.0)

        assert matches[0].concept_id == "prog"
        assert matches[0].score == pytest.approx(1.0)
        assert matches[1].score == pytest.approx(
            cosine_similarity(vector, built_index.get_vector("ml"))
        )


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrency:
    """Queries running while the index is rebuilt."""

    def test_queries_during_rebuild(self, built_index, sample_concepts):
        errors = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                try:
                    matches = built_index.query("machne learnin")
                    assert matches and matches[0].concept_id == "ml"
                except Exception as e:  # pragma: no cover - reported below
                    errors.append(e)
                    return

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        try:
            for _ in range(10):
                built_index.build_index(sample_concepts)
        finally:
            stop.set()
            for t in threads:
                t.join()

        assert errors == []
