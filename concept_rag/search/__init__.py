# concept_rag/search/__init__.py
"""Caller-facing search over a built concept index."""

from .service import SearchService

__all__ = ["SearchService"]
