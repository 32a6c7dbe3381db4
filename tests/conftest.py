# tests/conftest.py
"""
Root conftest - shared fixtures for concept_rag tests.

Test Tiers:
- tier1: Pure logic, no I/O, no thread pools (<5s)
         Run: pytest -m tier1
- tier2: Everything else (filesystem, concurrency)
         Run: pytest
"""

from __future__ import annotations

from typing import List

import pytest

from concept_rag.core.models import Concept, Document
from concept_rag.index.concept_index import ConceptVectorIndex
from concept_rag.retrieval.fuzzy.plugins.levenshtein import LevenshteinMatcher
from concept_rag.retrieval.fuzzy.service import FuzzyMatchService
from concept_rag.store.concept_store import InMemoryConceptStore

TIER1_PATTERNS = [
    "test_tokenizer",
    "test_vectorizer",
    "test_levenshtein",
    "test_exceptions",
    "test_models",
]


def pytest_collection_modifyitems(items):
    """Mark pure-logic modules tier1, everything else tier2."""
    for item in items:
        path = str(item.fspath)
        if any(pattern in path for pattern in TIER1_PATTERNS):
            item.add_marker(pytest.mark.tier1)
        else:
            item.add_marker(pytest.mark.tier2)


# =============================================================================
# Sample Data
# =============================================================================


def make_sample_concepts() -> List[Concept]:
    """Two topical concepts: machine learning and programming."""
    ml = Concept(
        id="ml",
        name="Machine Learning",
        description="Artificial Intelligence and Machine Learning concepts",
        documents=[
            Document(
                id="ml1",
                content=(
                    "Machine learning and artificial intelligence are transforming technology.\n"
                    "Neural networks and deep learning enable computers to learn from data.\n"
                    "AI systems can recognize patterns and make decisions."
                ),
            ),
            Document(
                id="ml2",
                content=(
                    "Deep learning is a subset of machine learning using artificial neural networks.\n"
                    "These networks process data through multiple layers for pattern recognition.\n"
                    "Machine learning algorithms improve through experience."
                ),
            ),
        ],
    )
    prog = Concept(
        id="prog",
        name="Programming",
        description="Programming and Software Development",
        documents=[
            Document(
                id="prog1",
                content=(
                    "Programming languages enable software development.\n"
                    "Different languages serve different purposes.\n"
                    "Software engineering involves systematic coding practices."
                ),
            ),
            Document(
                id="prog2",
                content=(
                    "Database management systems store and retrieve data.\n"
                    "Programming interfaces connect different systems.\n"
                    "Software development requires careful planning."
                ),
            ),
        ],
    )
    return [ml, prog]


@pytest.fixture
def sample_concepts() -> List[Concept]:
    return make_sample_concepts()


@pytest.fixture
def sample_store(sample_concepts) -> InMemoryConceptStore:
    store = InMemoryConceptStore()
    for concept in sample_concepts:
        store.add_concept(concept)
    return store


@pytest.fixture
def fuzzy_service() -> FuzzyMatchService:
    return FuzzyMatchService(LevenshteinMatcher(), similarity_threshold=0.8, max_expansion_terms=3)


@pytest.fixture
def built_index(fuzzy_service, sample_concepts) -> ConceptVectorIndex:
    index = ConceptVectorIndex(fuzzy_service, max_workers=2)
    index.build_index(sample_concepts)
    return index
