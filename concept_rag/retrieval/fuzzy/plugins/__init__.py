# concept_rag/retrieval/fuzzy/plugins/__init__.py
"""
Similarity matcher plugins.

Every module here is scanned by MATCHER_REGISTRY; a class is registered
when it defines `plugin_name` and `calculate_similarity`.
"""
