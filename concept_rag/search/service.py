# concept_rag/search/service.py
"""
Search service: the caller-facing wrapper around ConceptVectorIndex.

Turns a raw query into a PredictionResult carrying the expanded query,
the ranked matches (optionally resolved to full Concept objects) and a
timestamp.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from concept_rag.config.schema import SearchConfig
from concept_rag.core.exceptions import ConceptNotFoundError
from concept_rag.core.models import PredictionResult
from concept_rag.index.concept_index import ConceptVectorIndex
from concept_rag.logging.logger import get_logger
from concept_rag.logging.tags import SEARCH
from concept_rag.store.concept_store import InMemoryConceptStore

logger = get_logger(__name__)


class SearchService:
    """
    Runs fuzzy concept searches.

    Usage:
        service = SearchService(index, store=store)
        result = service.search("artifcial inteligence")
        for match in result.predictions:
            print(match.concept.name, match.score)
    """

    def __init__(
        self,
        index: ConceptVectorIndex,
        store: Optional[InMemoryConceptStore] = None,
        options: Optional[SearchConfig] = None,
    ):
        self.index = index
        self.store = store
        self.options = options or SearchConfig()

    def build(self) -> None:
        """(Re)build the index from every concept in the store."""
        if self.store is None:
            raise ValueError("SearchService.build() requires a concept store")
        self.index.build_index(self.store.all_concepts())

    def search(
        self,
        query: str,
        minimum_score: Optional[float] = None,
        top_k: Optional[int] = None,
    ) -> PredictionResult:
        """
        Search concepts for a free-text query.

        Args:
            query: Raw query text
            minimum_score: Overrides options.minimum_score
            top_k: Overrides options.max_results

        Returns:
            PredictionResult with the expanded query and ranked predictions

        Raises:
            NotBuiltError: If the index has not been built
            InvalidConfigurationError: If top_k < 1
        """
        minimum_score = self.options.minimum_score if minimum_score is None else minimum_score
        top_k = self.options.max_results if top_k is None else top_k

        try:
            expanded_query, matches = self.index.query_with_expansion(
                query, minimum_score=minimum_score, top_k=top_k
            )
        except Exception as e:
            logger.error(
                f"{SEARCH} Error performing search for query {query!r}: {e}", exc_info=True
            )
            raise

        if self.store is not None and self.options.include_metadata:
            resolved = []
            for match in matches:
                try:
                    resolved.append(replace(match, concept=self.store.get_concept(match.concept_id)))
                except ConceptNotFoundError:
                    # Store changed since the last build
                    logger.warning(
                        f"{SEARCH} Concept {match.concept_id!r} indexed but missing from store"
                    )
                    resolved.append(match)
            matches = resolved

        logger.info(
            f"{SEARCH} Search completed for query {query!r}. "
            f"Found {len(matches)} matches above threshold"
        )
        return PredictionResult(query=query, expanded_query=expanded_query, predictions=matches)


__all__ = ["SearchService"]
