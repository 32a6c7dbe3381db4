# concept_rag/index/concept_index.py
"""
Concept Vector Index.

Builds one aggregate TF-IDF vector per concept and answers ranked,
typo-tolerant queries against it.

Build phase:
    1. Collect every document's text across every concept
    2. Fit a fresh vectorizer once over the combined corpus
    3. Fan out one task per concept: transform its documents, average them
    4. Publish vectorizer + vectors together, replacing the previous index

Query phase:
    tokenize -> fuzzy-expand each token -> rejoin -> vectorize ->
    cosine against every concept -> filter -> rank -> top_k

Lifecycle: constructed empty -> built -> queried repeatedly -> rebuilt
wholesale. A failed build leaves the previously published index untouched.
"""

from __future__ import annotations

import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from concept_rag.core.exceptions import (
    ConceptNotFoundError,
    InvalidConfigurationError,
    NotBuiltError,
)
from concept_rag.core.models import ConceptLike, ConceptMatch
from concept_rag.logging.logger import get_logger
from concept_rag.logging.tags import INDEX
from concept_rag.retrieval.fuzzy.service import FuzzyMatchService
from concept_rag.retrieval.vectorizer import TfidfVectorizer, Vocabulary, cosine_similarity

logger = get_logger(__name__)


@dataclass
class IndexBuildReport:
    """Summary of a completed build."""

    indexed: int = 0
    skipped_empty: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    duplicates: List[str] = field(default_factory=list)
    vocabulary_size: int = 0
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class _IndexState:
    """Everything a query needs, published by a single reference swap."""

    vectorizer: TfidfVectorizer
    vectors: Dict[str, np.ndarray]


class ConceptVectorIndex:
    """
    Per-concept TF-IDF index with fuzzy query expansion.

    Usage:
        index = ConceptVectorIndex(FuzzyMatchService(LevenshteinMatcher()))
        index.build_index(store.all_concepts())
        matches = index.query("machne learnin", minimum_score=0.1, top_k=5)

    Args:
        fuzzy_service: Expands query tokens against the fitted vocabulary
        vectorizer_factory: Creates the vectorizer fitted on each build
        max_workers: Thread pool size for the per-concept fan-out
            (None lets ThreadPoolExecutor decide)
    """

    def __init__(
        self,
        fuzzy_service: FuzzyMatchService,
        vectorizer_factory: Optional[Callable[[], TfidfVectorizer]] = None,
        max_workers: Optional[int] = None,
    ):
        if max_workers is not None and max_workers < 1:
            raise InvalidConfigurationError(f"max_workers must be positive, got {max_workers}")

        self.fuzzy_service = fuzzy_service
        self._vectorizer_factory = vectorizer_factory or TfidfVectorizer
        self.max_workers = max_workers

        self._state: Optional[_IndexState] = None
        self._state_lock = threading.Lock()
        self._build_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build_index(self, concepts: Iterable[ConceptLike]) -> IndexBuildReport:
        """
        Build concept vectors from scratch.

        Per-concept failures are logged and the concept is omitted; they never
        abort the build. Concepts with zero documents are skipped. When an id
        repeats, only its first occurrence (documents included) is indexed.

        Args:
            concepts: Concepts exposing `id` and `documents`

        Returns:
            IndexBuildReport describing the published index

        Raises:
            EmptyCorpusError: If there are no documents anywhere
        """
        started = time.perf_counter()

        with self._build_lock:
            report = IndexBuildReport()
            documents_by_concept: List[Tuple[str, List[str]]] = []
            seen_ids: set = set()
            for concept in concepts:
                concept_id = getattr(concept, "id", repr(concept))
                # First occurrence in input order wins
                if concept_id in seen_ids:
                    logger.warning(f"{INDEX} Duplicate concept id {concept_id!r}; later copy ignored")
                    if concept_id not in report.duplicates:
                        report.duplicates.append(concept_id)
                    continue
                seen_ids.add(concept_id)

                try:
                    texts = [doc.content for doc in concept.documents]
                except Exception as e:
                    logger.error(
                        f"{INDEX} Could not read documents of concept {concept_id!r}: {e}",
                        exc_info=True,
                    )
                    report.failed[concept_id] = str(e)
                    continue
                documents_by_concept.append((concept_id, texts))

            corpus = [text for _, texts in documents_by_concept for text in texts]

            vectorizer = self._vectorizer_factory()
            try:
                vectorizer.fit(corpus)
            except Exception:
                logger.warning(
                    f"{INDEX} Vector index build aborted ({len(documents_by_concept)} concepts, "
                    f"{len(corpus)} documents); previous index kept"
                )
                raise

            report.vocabulary_size = len(vectorizer.vocabulary)
            vectors: Dict[str, np.ndarray] = {}

            with ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="concept_index",
            ) as executor:
                future_to_id = {
                    executor.submit(self._concept_vector, vectorizer, texts): concept_id
                    for concept_id, texts in documents_by_concept
                }

                for future in as_completed(future_to_id):
                    concept_id = future_to_id[future]
                    try:
                        vector = future.result()
                    except Exception as e:
                        logger.error(
                            f"{INDEX} Error processing concept {concept_id!r}: {e}",
                            exc_info=True,
                        )
                        report.failed[concept_id] = str(e)
                        continue

                    if vector is None:
                        logger.debug(f"{INDEX} Concept {concept_id!r} has no documents; skipped")
                        report.skipped_empty.append(concept_id)
                        continue

                    vectors[concept_id] = vector

            report.indexed = len(vectors)
            report.skipped_empty.sort()

            with self._state_lock:
                self._state = _IndexState(vectorizer=vectorizer, vectors=vectors)

            # Expansions against the previous vocabulary are dead weight now
            self.fuzzy_service.clear_cache()

        report.duration_seconds = time.perf_counter() - started

        if report.failed:
            logger.warning(
                f"{INDEX} {len(report.failed)} concept(s) failed to index: "
                f"{sorted(report.failed)}"
            )
        logger.info(
            f"{INDEX} Built vector index: {report.indexed} concepts, "
            f"{report.vocabulary_size} terms in {report.duration_seconds:.3f}s"
        )
        return report

    @staticmethod
    def _concept_vector(vectorizer: TfidfVectorizer, texts: List[str]) -> Optional[np.ndarray]:
        """Element-wise mean of the document vectors, or None without documents."""
        if not texts:
            return None

        matrix = np.vstack([vectorizer.transform(text) for text in texts])
        vector = matrix.mean(axis=0)
        vector.flags.writeable = False
        return vector

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def expand_query(self, text: str) -> str:
        """
        Fuzzy-expand every query token against the fitted vocabulary.

        Each distinct token appears once, in first-seen order: a query token
        is followed by its variants in ascending order.

        Raises:
            NotBuiltError: If build_index() has not completed
        """
        state = self._require_state()
        return self._expand(state, text)

    def _expand(self, state: _IndexState, text: str) -> str:
        vectorizer = state.vectorizer
        vocabulary = vectorizer.vocabulary

        expanded: Dict[str, None] = {}
        for term in vectorizer.tokenizer.tokenize(text):
            variants = self.fuzzy_service.expand_terms(term, vocabulary)
            expanded.setdefault(term, None)
            for variant in sorted(variants):
                expanded.setdefault(variant, None)

        expanded_text = " ".join(expanded)
        logger.debug(f"{INDEX} Expanded query from {text!r} to {expanded_text!r}")
        return expanded_text

    def query(self, text: str, minimum_score: float = 0.1, top_k: int = 5) -> List[ConceptMatch]:
        """
        Rank concepts against a free-text query.

        Args:
            text: Raw query (typos welcome)
            minimum_score: Inclusive lower bound on cosine similarity
            top_k: Maximum number of results

        Returns:
            Matches sorted by score descending, ties broken by concept id

        Raises:
            NotBuiltError: If build_index() has not completed
            InvalidConfigurationError: If top_k < 1 or minimum_score is not finite
        """
        _, matches = self.query_with_expansion(text, minimum_score, top_k)
        return matches

    def query_with_expansion(
        self,
        text: str,
        minimum_score: float = 0.1,
        top_k: int = 5,
    ) -> Tuple[str, List[ConceptMatch]]:
        """Like query(), but also returns the expanded query string that was scored."""
        self._validate_query_args(minimum_score, top_k)
        state = self._require_state()

        expanded_text = self._expand(state, text)
        query_vector = state.vectorizer.transform(expanded_text)
        return expanded_text, self._rank(state, query_vector, minimum_score, top_k)

    def search_vector(
        self,
        vector: np.ndarray,
        minimum_score: float = 0.1,
        top_k: int = 5,
    ) -> List[ConceptMatch]:
        """Rank concepts against an already vectorized query (no expansion)."""
        self._validate_query_args(minimum_score, top_k)
        return self._rank(self._require_state(), vector, minimum_score, top_k)

    @staticmethod
    def _rank(
        state: _IndexState,
        query_vector: np.ndarray,
        minimum_score: float,
        top_k: int,
    ) -> List[ConceptMatch]:
        scored = []
        for concept_id, concept_vector in state.vectors.items():
            score = cosine_similarity(query_vector, concept_vector)
            if score >= minimum_score:
                scored.append(ConceptMatch(concept_id=concept_id, score=score))

        scored.sort(key=lambda m: (-m.score, m.concept_id))
        return scored[:top_k]

    @staticmethod
    def _validate_query_args(minimum_score: float, top_k: int) -> None:
        if top_k < 1:
            raise InvalidConfigurationError(f"top_k must be positive, got {top_k}")
        if not math.isfinite(minimum_score):
            raise InvalidConfigurationError(f"minimum_score must be finite, got {minimum_score}")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def is_built(self) -> bool:
        return self._state is not None

    @property
    def vocabulary(self) -> Vocabulary:
        return self._require_state().vectorizer.vocabulary

    @property
    def concept_ids(self) -> List[str]:
        return sorted(self._require_state().vectors)

    def get_vector(self, concept_id: str) -> np.ndarray:
        """Concept vector by id."""
        vectors = self._require_state().vectors
        if concept_id not in vectors:
            raise ConceptNotFoundError(concept_id)
        return vectors[concept_id]

    def _require_state(self) -> _IndexState:
        with self._state_lock:
            state = self._state
        if state is None:
            raise NotBuiltError("Vector index must be built before querying")
        return state

    def __contains__(self, concept_id: object) -> bool:
        state = self._state
        return state is not None and concept_id in state.vectors

    def __len__(self) -> int:
        state = self._state
        return 0 if state is None else len(state.vectors)


__all__ = ["ConceptVectorIndex", "IndexBuildReport"]
