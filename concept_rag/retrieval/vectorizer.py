# concept_rag/retrieval/vectorizer.py
"""
Self-contained TF-IDF vectorization.

Learns a vocabulary and an inverse-document-frequency table from a training
corpus, then converts any text into a dense weight vector of vocabulary
length.

    TF(t, d)  = count(t, d) / total_tokens(d)
    IDF(t)    = ln(N / df(t))
    weight    = TF(t, d) * IDF(t)

The vocabulary and IDF table are immutable once published. A new corpus
means a full refit; there is no incremental update.
"""

from __future__ import annotations

import hashlib
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from concept_rag.core.exceptions import DimensionMismatchError, EmptyCorpusError, NotFittedError
from concept_rag.logging.logger import get_logger
from concept_rag.logging.tags import VECTORIZER
from concept_rag.retrieval.tokenizer import Tokenizer

logger = get_logger(__name__)


def vocabulary_fingerprint(tokens: Iterable[str]) -> str:
    """Deterministic content fingerprint for a set of tokens."""
    joined = "\n".join(sorted(set(tokens)))
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:16]


@dataclass(frozen=True)
class Vocabulary:
    """
    Immutable set of distinct tokens with stable indices.

    Tokens are stored sorted, so the same corpus always yields the same
    index for a token regardless of document order.
    """

    tokens: Tuple[str, ...]
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)
    version: str = field(init=False, compare=False)

    def __post_init__(self) -> None:
        ordered = tuple(sorted(set(self.tokens)))
        object.__setattr__(self, "tokens", ordered)
        object.__setattr__(self, "_index", {t: i for i, t in enumerate(ordered)})
        object.__setattr__(self, "version", vocabulary_fingerprint(ordered))

    def index_of(self, token: str) -> Optional[int]:
        """Position of a token, or None if out of vocabulary."""
        return self._index.get(token)

    def __contains__(self, token: object) -> bool:
        return token in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class _FittedState:
    """Vocabulary + IDF published together by a single reference swap."""

    vocabulary: Vocabulary
    idf: np.ndarray
    document_count: int


def cosine_similarity(v1: Sequence[float], v2: Sequence[float]) -> float:
    """
    Normalized dot product of two vectors.

    Returns 0.0 if either vector is all-zero.

    Raises:
        DimensionMismatchError: If the vectors have different lengths
    """
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)

    if a.shape != b.shape:
        raise DimensionMismatchError(a.size, b.size)

    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    score = float(np.dot(a, b)) / (norm_a * norm_b)
    # Float rounding can push identical vectors to 1.0000000000000002
    return max(-1.0, min(1.0, score))


class TfidfVectorizer:
    """
    TF-IDF vectorizer backed by a fixed vocabulary.

    Usage:
        vectorizer = TfidfVectorizer()
        vectorizer.fit(["machine learning", "neural network"])
        vector = vectorizer.transform("machine network")

    A fitted instance is read-only and can be shared by any number of
    threads calling transform().
    """

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        self.tokenizer = tokenizer or Tokenizer()
        self._state: Optional[_FittedState] = None

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    def fit(self, corpus: Iterable[str]) -> "TfidfVectorizer":
        """
        Learn vocabulary and IDF weights from a corpus.

        Args:
            corpus: Document texts

        Returns:
            self

        Raises:
            EmptyCorpusError: If the corpus contains no documents
        """
        documents = list(corpus)
        if not documents:
            raise EmptyCorpusError("Cannot fit vectorizer on an empty corpus")

        document_frequency: Counter[str] = Counter()
        for text in documents:
            document_frequency.update(set(self.tokenizer.tokenize(text)))

        vocabulary = Vocabulary(tuple(document_frequency))
        total = len(documents)

        idf = np.zeros(len(vocabulary), dtype=np.float64)
        for i, token in enumerate(vocabulary.tokens):
            idf[i] = math.log(total / document_frequency[token])
        idf.flags.writeable = False

        self._state = _FittedState(vocabulary=vocabulary, idf=idf, document_count=total)

        logger.debug(
            f"{VECTORIZER} Fitted on {total} documents, "
            f"{len(vocabulary)} terms (version={vocabulary.version})"
        )
        return self

    # ------------------------------------------------------------------
    # Transforming
    # ------------------------------------------------------------------

    def transform(self, text: Optional[str]) -> np.ndarray:
        """
        Convert text into a dense TF-IDF vector of vocabulary length.

        Out-of-vocabulary tokens are ignored. Empty text yields a zero vector.

        Raises:
            NotFittedError: If fit() has not been called
        """
        state = self._require_state()
        vector = np.zeros(len(state.vocabulary), dtype=np.float64)

        tokens = self.tokenizer.tokenize(text)
        if not tokens:
            return vector

        total_tokens = len(tokens)
        for token, count in Counter(tokens).items():
            i = state.vocabulary.index_of(token)
            if i is None:
                continue
            vector[i] = (count / total_tokens) * state.idf[i]

        return vector

    def fit_transform(self, corpus: Iterable[str]) -> np.ndarray:
        """Fit on the corpus and return one row per document."""
        documents = list(corpus)
        self.fit(documents)
        return np.vstack([self.transform(doc) for doc in documents])

    def cosine_similarity(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        return cosine_similarity(v1, v2)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def is_fitted(self) -> bool:
        return self._state is not None

    @property
    def vocabulary(self) -> Vocabulary:
        return self._require_state().vocabulary

    @property
    def idf(self) -> np.ndarray:
        return self._require_state().idf

    @property
    def dimension(self) -> int:
        return len(self._require_state().vocabulary)

    def _require_state(self) -> _FittedState:
        state = self._state
        if state is None:
            raise NotFittedError("Vectorizer must be fitted before use")
        return state


__all__ = ["TfidfVectorizer", "Vocabulary", "cosine_similarity", "vocabulary_fingerprint"]
