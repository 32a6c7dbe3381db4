# concept_rag/config/schema.py
"""
Configuration schema for concept_rag.

This is the SINGLE source of truth for configuration.

Schema hierarchy:
- ConceptRagConfig: The main config consumed by create_search_service()
- VectorizerConfig: Tokenization options for TF-IDF fitting
- FuzzyMatchConfig: Query-term expansion settings
- SearchConfig: Default ranking parameters
- IndexConfig: Build fan-out settings
- LoggingConfig: Logging settings
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VectorizerConfig(BaseModel):
    """Tokenization options applied at fit and transform time."""

    remove_stop_words: bool = Field(
        default=False, description="Drop common English stop words before weighting"
    )

    model_config = ConfigDict(extra="forbid")


class FuzzyMatchConfig(BaseModel):
    """
    Fuzzy expansion settings.

    Example YAML:
        fuzzy:
          matcher: levenshtein
          similarity_threshold: 0.8
          max_expansion_terms: 3
          enable_cache: true
    """

    matcher: str = Field(default="levenshtein", description="Similarity matcher plugin name")
    similarity_threshold: float = Field(
        default=0.8, ge=0.0, le=1.0, description="Minimum similarity for a variant"
    )
    max_expansion_terms: int = Field(
        default=3, ge=1, description="Maximum variants added per query term"
    )
    enable_cache: bool = Field(default=True, description="Memoize expansions per term")

    model_config = ConfigDict(extra="forbid")


class SearchConfig(BaseModel):
    """Default ranking parameters for SearchService."""

    minimum_score: float = Field(default=0.1, description="Inclusive cosine score cutoff")
    max_results: int = Field(default=5, ge=1, description="Maximum results returned")
    include_metadata: bool = Field(
        default=True, description="Resolve full Concept objects for each match"
    )

    model_config = ConfigDict(extra="forbid")


class IndexConfig(BaseModel):
    """Build fan-out settings."""

    max_workers: Optional[int] = Field(
        default=None, ge=1, description="Thread pool size (None = executor default)"
    )

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(default="INFO", description="Root log level")
    configure: bool = Field(
        default=False, description="Install a root stream handler on service creation"
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


class ConceptRagConfig(BaseModel):
    """
    Complete concept_rag configuration.

    Examples:
        >>> config = ConceptRagConfig(fuzzy={"similarity_threshold": 0.75})
        >>> config.search.max_results
        5
    """

    vectorizer: VectorizerConfig = Field(default_factory=VectorizerConfig)
    fuzzy: FuzzyMatchConfig = Field(default_factory=FuzzyMatchConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "ConceptRagConfig",
    "VectorizerConfig",
    "FuzzyMatchConfig",
    "SearchConfig",
    "IndexConfig",
    "LoggingConfig",
]
