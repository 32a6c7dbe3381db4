# concept_rag/store/concept_store.py
"""
In-memory concept repository.

The index only reads concepts; the store is where a host application
assembles them. Concepts can be added programmatically or loaded from a
YAML file:

    concepts:
      - id: ml
        name: Machine Learning
        description: Artificial Intelligence and Machine Learning concepts
        documents:
          - id: ml1
            content: Machine learning and artificial intelligence ...
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from concept_rag.core.exceptions import ConceptNotFoundError
from concept_rag.core.models import Concept, Document
from concept_rag.logging.logger import get_logger
from concept_rag.logging.tags import STORE

logger = get_logger(__name__)


class InMemoryConceptStore:
    """
    Keyed store of concepts and their documents.

    Usage:
        store = InMemoryConceptStore()
        store.add_concept(Concept(id="ml", name="Machine Learning"))
        store.add_document("ml", Document(id="ml1", content="..."))
        index.build_index(store.all_concepts())
    """

    def __init__(self) -> None:
        self._concepts: Dict[str, Concept] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "InMemoryConceptStore":
        """
        Load concepts from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not a mapping with a `concepts` list,
                or a concept fails validation
        """
        p = Path(path)
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict) or not isinstance(data.get("concepts", []), list):
            raise ValueError(f"Concept file must contain a 'concepts' list (file: {p})")

        store = cls()
        for raw in data.get("concepts", []):
            try:
                store.add_concept(Concept.model_validate(raw))
            except ValidationError as e:
                raise ValueError(f"Invalid concept in {p}: {e}") from e

        logger.info(f"{STORE} Loaded {len(store)} concepts from {p}")
        return store

    def add_concept(self, concept: Concept) -> None:
        """Add or replace a concept. Documents are tagged with its id."""
        if not concept.id:
            raise ValueError("Concept must have an ID")

        for document in concept.documents:
            document.concept_id = concept.id

        with self._lock:
            replaced = concept.id in self._concepts
            self._concepts[concept.id] = concept

        if replaced:
            logger.debug(f"{STORE} Replaced concept {concept.id!r}")

    def add_document(self, concept_id: str, document: Document) -> None:
        """
        Append a document to an existing concept.

        Raises:
            ConceptNotFoundError: If the concept is unknown
        """
        with self._lock:
            concept = self._concepts.get(concept_id)
            if concept is None:
                raise ConceptNotFoundError(concept_id)
            document.concept_id = concept_id
            concept.documents.append(document)

    def get_concept(self, concept_id: str) -> Concept:
        """
        Raises:
            ConceptNotFoundError: If the concept is unknown
        """
        with self._lock:
            concept = self._concepts.get(concept_id)
        if concept is None:
            raise ConceptNotFoundError(concept_id)
        return concept

    def all_concepts(self) -> List[Concept]:
        """Snapshot of every concept, in insertion order."""
        with self._lock:
            return list(self._concepts.values())

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form matching the YAML layout."""
        return {"concepts": [c.model_dump(mode="json") for c in self.all_concepts()]}

    def __contains__(self, concept_id: object) -> bool:
        with self._lock:
            return concept_id in self._concepts

    def __len__(self) -> int:
        with self._lock:
            return len(self._concepts)


__all__ = ["InMemoryConceptStore"]
