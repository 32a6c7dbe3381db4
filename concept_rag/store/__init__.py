# concept_rag/store/__init__.py
"""Concept repository implementations."""

from .concept_store import InMemoryConceptStore

__all__ = ["InMemoryConceptStore"]
