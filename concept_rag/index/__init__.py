# concept_rag/index/__init__.py
"""Per-concept vector index built from TF-IDF document vectors."""

from .concept_index import ConceptVectorIndex, IndexBuildReport

__all__ = ["ConceptVectorIndex", "IndexBuildReport"]
