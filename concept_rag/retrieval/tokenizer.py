# concept_rag/retrieval/tokenizer.py
"""
Text normalization and tokenization.

The same tokenizer must be used for fitting, transforming and query
expansion, otherwise query tokens will never line up with the vocabulary.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

# Fixed separator set: space, tab, \n, \r and . , ! ?
# Other Unicode whitespace (NBSP, form feed, ...) stays inside tokens.
_SPLIT_RE = re.compile(r"[ \t\n\r.,!?]+")

ENGLISH_STOP_WORDS: frozenset[str] = frozenset(
    """
    a about above after again against all am an and any are as at be because
    been before being below between both but by can could did do does doing
    down during each few for from further had has have having he her here hers
    herself him himself his how i if in into is it its itself just me more most
    my myself no nor not now of off on once only or other our ours ourselves
    out over own same she should so some such than that the their theirs them
    themselves then there these they this those through to too under until up
    very was we were what when where which while who whom why will with would
    you your yours yourself yourselves
    """.split()
)


def normalize(text: Optional[str]) -> str:
    """Lower-case, collapse newline/carriage-return to spaces, trim."""
    if not text:
        return ""
    return text.lower().replace("\n", " ").replace("\r", " ").strip()


def tokenize(text: Optional[str]) -> List[str]:
    """
    Split normalized text into tokens.

    Splits on space, tab, newline, carriage return and . , ! ?, and drops
    empty or whitespace-only tokens.
    None or empty input yields an empty list.

    Examples:
        >>> tokenize("Machine learning, neural networks!")
        ['machine', 'learning', 'neural', 'networks']
    """
    normalized = normalize(text)
    if not normalized:
        return []
    return [token for token in _SPLIT_RE.split(normalized) if token.strip()]


class Tokenizer:
    """
    Tokenizer with optional stop-word filtering.

    Usage:
        tokenizer = Tokenizer(stop_words=ENGLISH_STOP_WORDS)
        tokens = tokenizer.tokenize("The network is learning")
        # ['network', 'learning']
    """

    def __init__(self, stop_words: Optional[Iterable[str]] = None):
        self.stop_words: frozenset[str] = frozenset(w.lower() for w in stop_words or ())

    def normalize(self, text: Optional[str]) -> str:
        return normalize(text)

    def tokenize(self, text: Optional[str]) -> List[str]:
        tokens = tokenize(text)
        if self.stop_words:
            tokens = [t for t in tokens if t not in self.stop_words]
        return tokens

    def __repr__(self) -> str:
        return f"Tokenizer(stop_words={len(self.stop_words)})"


__all__ = ["ENGLISH_STOP_WORDS", "Tokenizer", "normalize", "tokenize"]
