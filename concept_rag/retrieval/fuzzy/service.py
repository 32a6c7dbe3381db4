# concept_rag/retrieval/fuzzy/service.py
"""
Fuzzy query-term expansion.

Expands a query token into itself plus the closest vocabulary tokens, so a
misspelled query ("machin") still hits documents containing "machine".

Cache:
    Expansions are memoized by (term, vocabulary version). A rebuilt index
    has a different vocabulary version, so an expansion computed against an
    old vocabulary is never served for a new one.

Thread-safety:
    The cache dict is only touched under a lock; the expansion itself is
    computed outside it, so a slow expansion never blocks other lookups.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List, Tuple

from concept_rag.core.exceptions import InvalidConfigurationError
from concept_rag.logging.logger import get_logger
from concept_rag.logging.tags import FUZZY
from concept_rag.retrieval.vectorizer import vocabulary_fingerprint

from .base import SimilarityMatcher
from .registry import create_matcher

if TYPE_CHECKING:
    from concept_rag.config.schema import FuzzyMatchConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExpansionStats:
    """Snapshot of cache and failure counters."""

    hits: int = 0
    misses: int = 0
    failures: int = 0


class FuzzyMatchService:
    """
    Expands terms against a vocabulary using a SimilarityMatcher.

    Usage:
        service = FuzzyMatchService(LevenshteinMatcher(), similarity_threshold=0.8)
        service.expand_terms("machin", vectorizer.vocabulary)
        # frozenset({'machin', 'machine'})
    """

    def __init__(
        self,
        matcher: SimilarityMatcher,
        similarity_threshold: float = 0.8,
        max_expansion_terms: int = 3,
        enable_cache: bool = True,
    ):
        if not 0.0 <= similarity_threshold <= 1.0:
            raise InvalidConfigurationError(
                f"similarity_threshold must be within [0, 1], got {similarity_threshold}"
            )
        if max_expansion_terms < 1:
            raise InvalidConfigurationError(
                f"max_expansion_terms must be positive, got {max_expansion_terms}"
            )

        self.matcher = matcher
        self.similarity_threshold = similarity_threshold
        self.max_expansion_terms = max_expansion_terms
        self.enable_cache = enable_cache

        self._cache: Dict[Tuple[str, str], FrozenSet[str]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._failures = 0

    @classmethod
    def from_config(cls, config: "FuzzyMatchConfig") -> "FuzzyMatchService":
        """Build a service, resolving the matcher by name through the registry."""
        return cls(
            matcher=create_matcher(config.matcher),
            similarity_threshold=config.similarity_threshold,
            max_expansion_terms=config.max_expansion_terms,
            enable_cache=config.enable_cache,
        )

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def expand_terms(self, term: str, vocabulary: Iterable[str]) -> FrozenSet[str]:
        """
        Expand a term into itself plus near vocabulary variants.

        Args:
            term: Raw query token
            vocabulary: Fitted Vocabulary (or any iterable of tokens)

        Returns:
            Expansion set; always contains `term` unless `term` is blank
        """
        if term is None or not term.strip():
            return frozenset()

        try:
            version = getattr(vocabulary, "version", None)
            if version is None:
                vocabulary = list(vocabulary)
                version = vocabulary_fingerprint(vocabulary)
        except Exception as e:
            return self._fallback(term, e)
        key = (term, version)

        if self.enable_cache:
            with self._lock:
                cached = self._cache.get(key)
                if cached is not None:
                    self._hits += 1
                    return cached
                self._misses += 1

        try:
            matches = self._rank_candidates(term, vocabulary)
        except Exception as e:
            return self._fallback(term, e)

        expansions = frozenset([term, *matches])

        if self.enable_cache:
            with self._lock:
                # First writer wins; a concurrent duplicate computed the same set
                expansions = self._cache.setdefault(key, expansions)

        logger.debug(f"{FUZZY} Expanded term {term!r} to {len(expansions)} variations")
        return expansions

    def _fallback(self, term: str, error: Exception) -> FrozenSet[str]:
        """Log a failed expansion and degrade to the term itself."""
        logger.error(f"{FUZZY} Error expanding term {term!r}: {error}", exc_info=True)
        with self._lock:
            self._failures += 1
        return frozenset({term})

    def _rank_candidates(self, term: str, vocabulary: Iterable[str]) -> List[str]:
        """Vocabulary tokens at or above threshold, best first, truncated."""
        scored = []
        for token in vocabulary:
            score = self.matcher.calculate_similarity(term, token)
            if score >= self.similarity_threshold:
                scored.append((score, token))

        scored.sort(key=lambda pair: (-pair[0], pair[1]))
        return [token for _, token in scored[: self.max_expansion_terms]]

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Drop every cached expansion."""
        with self._lock:
            self._cache.clear()

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    @property
    def stats(self) -> ExpansionStats:
        with self._lock:
            return ExpansionStats(hits=self._hits, misses=self._misses, failures=self._failures)


__all__ = ["ExpansionStats", "FuzzyMatchService"]
