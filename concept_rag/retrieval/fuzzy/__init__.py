# concept_rag/retrieval/fuzzy/__init__.py
"""
Fuzzy query-term expansion.

This module provides:
- SimilarityMatcher: capability protocol for string similarity
- LevenshteinMatcher: normalized edit-distance similarity
- FuzzyMatchService: cached expansion of query terms against a vocabulary
- Matcher registry: resolve matchers by name from configuration
"""

from .base import SimilarityMatcher
from .plugins.levenshtein import LevenshteinMatcher, levenshtein_distance
from .registry import create_matcher, get_matcher_class, list_matchers, register_matcher
from .service import ExpansionStats, FuzzyMatchService

__all__ = [
    "SimilarityMatcher",
    "LevenshteinMatcher",
    "levenshtein_distance",
    "FuzzyMatchService",
    "ExpansionStats",
    "create_matcher",
    "get_matcher_class",
    "list_matchers",
    "register_matcher",
]
