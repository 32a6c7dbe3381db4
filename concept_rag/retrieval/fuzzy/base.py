# concept_rag/retrieval/fuzzy/base.py
"""
Similarity capability for fuzzy term matching.

Callers depend only on SimilarityMatcher, never on a concrete algorithm,
so alternate matchers can be registered without touching the service or
the index.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SimilarityMatcher(Protocol):
    """Protocol for string similarity algorithms."""

    plugin_name: str

    def calculate_similarity(self, source: str, target: str) -> float:
        """Similarity in [0, 1]; 1 means identical."""
        ...

    def is_match(self, source: str, target: str, threshold: float) -> bool:
        """True when calculate_similarity(source, target) >= threshold."""
        ...
