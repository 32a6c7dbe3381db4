# concept_rag/retrieval/__init__.py
"""
Lexical retrieval building blocks: tokenizer, TF-IDF vectorizer, fuzzy expansion.
"""

from .tokenizer import ENGLISH_STOP_WORDS, Tokenizer, normalize, tokenize
from .vectorizer import TfidfVectorizer, Vocabulary, cosine_similarity

__all__ = [
    "ENGLISH_STOP_WORDS",
    "Tokenizer",
    "normalize",
    "tokenize",
    "TfidfVectorizer",
    "Vocabulary",
    "cosine_similarity",
]
