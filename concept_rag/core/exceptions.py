# concept_rag/core/exceptions.py
"""
All exceptions raised by concept_rag.

Hierarchy:
    ConceptRagError
    ├── NotFittedError - transform/query before fit/build
    │   └── NotBuiltError - query before the concept index was built
    ├── DimensionMismatchError - vectors of different lengths
    ├── EmptyCorpusError - fit/build with no documents
    ├── ConceptNotFoundError - unknown concept id (also a KeyError)
    └── InvalidConfigurationError - bad thresholds, limits, names (also a ValueError)
        └── MatcherNotFoundError - unknown similarity matcher name
"""

from __future__ import annotations


class ConceptRagError(Exception):
    """Base class for every concept_rag failure."""

    pass


# =============================================================================
# Lifecycle Errors
# =============================================================================


class NotFittedError(ConceptRagError):
    """The vectorizer was used before fit() completed."""

    pass


class NotBuiltError(NotFittedError):
    """The concept index was queried before build_index() completed."""

    pass


class EmptyCorpusError(ConceptRagError):
    """Fitting or building was attempted with zero documents."""

    pass


# =============================================================================
# Data Errors
# =============================================================================


class DimensionMismatchError(ConceptRagError):
    """Two vectors compared with each other have different lengths."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(f"Vectors must have the same length (got {left} and {right})")


class ConceptNotFoundError(ConceptRagError, KeyError):
    """A concept id is not known to the store or the index."""

    def __init__(self, concept_id: str):
        self.concept_id = concept_id
        super().__init__(f"Concept {concept_id!r} not found")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


# =============================================================================
# Configuration Errors
# =============================================================================


class InvalidConfigurationError(ConceptRagError, ValueError):
    """A threshold, limit or plugin name is outside its allowed range."""

    pass


class MatcherNotFoundError(InvalidConfigurationError):
    """Requested similarity matcher is not registered."""

    pass


__all__ = [
    "ConceptRagError",
    "NotFittedError",
    "NotBuiltError",
    "EmptyCorpusError",
    "DimensionMismatchError",
    "ConceptNotFoundError",
    "InvalidConfigurationError",
    "MatcherNotFoundError",
]
