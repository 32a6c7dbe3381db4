# concept_rag/__init__.py
"""
concept_rag - Typo-tolerant concept retrieval.

Maps a free-text query to the most relevant topical concepts using TF-IDF
concept vectors and Levenshtein-based query expansion, so "machne learnin"
still finds "Machine Learning".

Quick Start:
    >>> from concept_rag import Concept, Document, InMemoryConceptStore, create_search_service
    >>> store = InMemoryConceptStore()
    >>> store.add_concept(Concept(id="ml", name="Machine Learning", documents=[
    ...     Document(id="ml1", content="Machine learning and neural networks"),
    ... ]))
    >>> service = create_search_service(store=store)
    >>> service.build()
    >>> result = service.search("machne learnin")

Architecture:
    concept_rag/
    ├── core/        # Models, protocols, exceptions
    ├── retrieval/   # Tokenizer, TF-IDF vectorizer, fuzzy expansion
    ├── index/       # Per-concept vector index (build + query)
    ├── store/       # In-memory concept repository
    ├── search/      # Caller-facing search service
    ├── config/      # Pydantic schema + layered YAML loading
    └── logging/     # get_logger + subsystem tags
"""

from concept_rag.config import ConceptRagConfig, load_config
from concept_rag.core import (
    Concept,
    ConceptMatch,
    ConceptNotFoundError,
    ConceptRagError,
    DimensionMismatchError,
    Document,
    EmptyCorpusError,
    InvalidConfigurationError,
    NotBuiltError,
    NotFittedError,
    PredictionResult,
)
from concept_rag.index import ConceptVectorIndex, IndexBuildReport
from concept_rag.retrieval import TfidfVectorizer, Tokenizer, Vocabulary, cosine_similarity, tokenize
from concept_rag.retrieval.fuzzy import FuzzyMatchService, LevenshteinMatcher, SimilarityMatcher
from concept_rag.runtime import create_search_service
from concept_rag.search import SearchService
from concept_rag.store import InMemoryConceptStore

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Models
    "Concept",
    "Document",
    "ConceptMatch",
    "PredictionResult",
    # Retrieval
    "Tokenizer",
    "tokenize",
    "TfidfVectorizer",
    "Vocabulary",
    "cosine_similarity",
    "SimilarityMatcher",
    "LevenshteinMatcher",
    "FuzzyMatchService",
    # Index / search
    "ConceptVectorIndex",
    "IndexBuildReport",
    "InMemoryConceptStore",
    "SearchService",
    "create_search_service",
    # Config
    "ConceptRagConfig",
    "load_config",
    # Errors
    "ConceptRagError",
    "NotFittedError",
    "NotBuiltError",
    "EmptyCorpusError",
    "DimensionMismatchError",
    "ConceptNotFoundError",
    "InvalidConfigurationError",
]
