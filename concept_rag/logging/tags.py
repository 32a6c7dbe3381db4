# concept_rag/logging/tags.py
"""
Subsystem tags prefixed to log messages.

Changing a tag here updates it project-wide.
"""

VECTORIZER = "[VECTORIZER]"
FUZZY = "[FUZZY]"
INDEX = "[INDEX]"
SEARCH = "[SEARCH]"
STORE = "[STORE]"
CONFIG = "[CONFIG]"
