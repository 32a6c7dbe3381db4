# concept_rag/runtime.py
"""
Wiring: configuration in, ready-to-use SearchService out.

    config = load_config("concept_rag.yaml")
    service = create_search_service(config, store=InMemoryConceptStore.from_yaml("concepts.yaml"))
    service.build()
    result = service.search("machne learnin")
"""

from __future__ import annotations

from functools import partial
from typing import Optional

from concept_rag.config.loader import load_config
from concept_rag.config.schema import ConceptRagConfig
from concept_rag.index.concept_index import ConceptVectorIndex
from concept_rag.logging.logger import configure_logging, get_logger
from concept_rag.retrieval.fuzzy.service import FuzzyMatchService
from concept_rag.retrieval.tokenizer import ENGLISH_STOP_WORDS, Tokenizer
from concept_rag.retrieval.vectorizer import TfidfVectorizer
from concept_rag.search.service import SearchService
from concept_rag.store.concept_store import InMemoryConceptStore

logger = get_logger(__name__)


def create_index(config: ConceptRagConfig) -> ConceptVectorIndex:
    """Build an empty ConceptVectorIndex from configuration."""
    stop_words = ENGLISH_STOP_WORDS if config.vectorizer.remove_stop_words else None
    tokenizer = Tokenizer(stop_words=stop_words)

    return ConceptVectorIndex(
        fuzzy_service=FuzzyMatchService.from_config(config.fuzzy),
        vectorizer_factory=partial(TfidfVectorizer, tokenizer=tokenizer),
        max_workers=config.index.max_workers,
    )


def create_search_service(
    config: Optional[ConceptRagConfig] = None,
    store: Optional[InMemoryConceptStore] = None,
) -> SearchService:
    """
    Create a SearchService with every collaborator wired from config.

    Args:
        config: Validated config (defaults to load_config())
        store: Concept store used by build() and to resolve matches

    Returns:
        SearchService whose index is not yet built
    """
    if config is None:
        config = load_config()

    if config.logging.configure:
        configure_logging(level=config.logging.level)

    service = SearchService(index=create_index(config), store=store, options=config.search)
    logger.debug(
        f"Created search service (matcher={config.fuzzy.matcher}, "
        f"threshold={config.fuzzy.similarity_threshold})"
    )
    return service


__all__ = ["create_index", "create_search_service"]
