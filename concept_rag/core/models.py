# concept_rag/core/models.py
"""
Core data models for concept_rag.

A Concept is a named topical grouping of Documents. The index only needs
duck-typed access (`id` + `documents`, and `content` per document), so any
repository can feed it as long as its objects satisfy ConceptLike.

This module provides:
- Document / Concept: canonical Pydantic models
- DocumentLike / ConceptLike: protocols the index depends on
- ConceptMatch: one ranked query hit
- PredictionResult: the outcome of a search, including the expanded query
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class DocumentLike(Protocol):
    """Anything exposing raw text content."""

    @property
    def content(self) -> str: ...


@runtime_checkable
class ConceptLike(Protocol):
    """Anything with a stable string id and an iterable of documents."""

    @property
    def id(self) -> str: ...

    @property
    def documents(self) -> Iterable[DocumentLike]: ...


# =============================================================================
# Pydantic Models
# =============================================================================


class Document(BaseModel):
    """A unit of raw text belonging to exactly one concept."""

    id: str = Field(..., description="Document ID")
    content: str = Field(default="", description="Raw text content")
    concept_id: Optional[str] = Field(default=None, description="Owning concept ID")
    created_at: datetime = Field(default_factory=_utcnow, description="Creation time (UTC)")
    metadata: Dict[str, str] = Field(default_factory=dict, description="Document metadata")


class Concept(BaseModel):
    """
    Named topical grouping of documents sharing semantic context.

    Examples:
        >>> concept = Concept(
        ...     id="ml",
        ...     name="Machine Learning",
        ...     documents=[Document(id="ml1", content="Neural networks learn from data.")],
        ... )
    """

    id: str = Field(..., description="Stable concept ID")
    name: str = Field(default="", description="Human readable name")
    description: str = Field(default="", description="Short description")
    documents: List[Document] = Field(default_factory=list, description="Member documents")
    metadata: Dict[str, str] = Field(default_factory=dict, description="Concept metadata")

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Concept must have an ID")
        return v


# =============================================================================
# Query Results
# =============================================================================


@dataclass(frozen=True)
class ConceptMatch:
    """A single ranked query hit."""

    concept_id: str
    score: float
    concept: Optional[Any] = None


@dataclass
class PredictionResult:
    """
    Outcome of a search.

    Attributes:
        query: The raw query text as given by the caller
        expanded_query: Query after fuzzy expansion (what was vectorized)
        predictions: Ranked matches, best first
        processed_at: When the search completed (UTC)
    """

    query: str
    expanded_query: str
    predictions: List[ConceptMatch] = field(default_factory=list)
    processed_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "query": self.query,
            "expanded_query": self.expanded_query,
            "predictions": [
                {"concept_id": p.concept_id, "score": p.score} for p in self.predictions
            ],
            "processed_at": self.processed_at.isoformat(),
        }


__all__ = [
    "DocumentLike",
    "ConceptLike",
    "Document",
    "Concept",
    "ConceptMatch",
    "PredictionResult",
]
