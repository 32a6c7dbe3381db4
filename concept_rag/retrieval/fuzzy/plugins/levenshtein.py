# concept_rag/retrieval/fuzzy/plugins/levenshtein.py
"""Levenshtein edit-distance matcher."""

from __future__ import annotations


def levenshtein_distance(source: str, target: str) -> int:
    """
    Minimum number of single-character inserts, deletes and substitutions
    turning `source` into `target` (unit cost).

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
    """
    if source == target:
        return 0
    if not source:
        return len(target)
    if not target:
        return len(source)

    # Keep the shorter string on the inner loop.
    if len(source) > len(target):
        source, target = target, source

    prev = list(range(len(source) + 1))
    for i, ch_t in enumerate(target, start=1):
        cur = [i]
        for j, ch_s in enumerate(source, start=1):
            cost = 0 if ch_s == ch_t else 1
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost))
        prev = cur
    return prev[-1]


class LevenshteinMatcher:
    """
    Normalized Levenshtein similarity.

        similarity = 1 - distance / max(len(source), len(target))

    Returns 0.0 when either string is empty.
    """

    plugin_name = "levenshtein"

    def calculate_similarity(self, source: str, target: str) -> float:
        if not source or not target:
            return 0.0

        distance = levenshtein_distance(source, target)
        return 1.0 - distance / max(len(source), len(target))

    def is_match(self, source: str, target: str, threshold: float) -> bool:
        return self.calculate_similarity(source, target) >= threshold

    def __repr__(self) -> str:
        return "LevenshteinMatcher()"
