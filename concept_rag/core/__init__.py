# concept_rag/core/__init__.py
"""
Core contracts shared by every concept_rag component.

Public API:
    - Concept, Document: canonical models
    - ConceptLike, DocumentLike: protocols the index depends on
    - ConceptMatch, PredictionResult: query results
    - Exceptions: standard error hierarchy
"""

from .exceptions import (
    ConceptNotFoundError,
    ConceptRagError,
    DimensionMismatchError,
    EmptyCorpusError,
    InvalidConfigurationError,
    MatcherNotFoundError,
    NotBuiltError,
    NotFittedError,
)
from .models import (
    Concept,
    ConceptLike,
    ConceptMatch,
    Document,
    DocumentLike,
    PredictionResult,
)

__all__ = [
    "Concept",
    "ConceptLike",
    "ConceptMatch",
    "Document",
    "DocumentLike",
    "PredictionResult",
    "ConceptRagError",
    "NotFittedError",
    "NotBuiltError",
    "EmptyCorpusError",
    "DimensionMismatchError",
    "ConceptNotFoundError",
    "InvalidConfigurationError",
    "MatcherNotFoundError",
]
