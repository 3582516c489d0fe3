"""Fuzzy player and team name matching."""

from typing import Any, Iterable, Optional, Tuple

from rapidfuzz.distance import Levenshtein

from .models import NameMatch


def normalize_for_matching(name: str) -> str:
    """Normalize a name for fuzzy matching (case-insensitive)."""
    return name.lower()


def similarity(a: str, b: str) -> float:
    """
    Edit-distance similarity between two names.

    Computed as 1 - levenshtein(a, b) / max(len(a), len(b)) on the
    normalized names, so 1.0 means identical and 0.0 means nothing in common.

    Args:
        a: First name
        b: Second name

    Returns:
        Similarity in [0.0, 1.0]
    """
    a = normalize_for_matching(a)
    b = normalize_for_matching(b)
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - Levenshtein.distance(a, b) / longest


def resolve(
    query: str,
    candidates: Iterable[Tuple[str, Any]],
    threshold: float,
) -> Optional[NameMatch]:
    """
    Find the candidate whose name best matches a free-text query.

    Only candidates scoring strictly above the threshold are considered.
    When several candidates share the best score, the first one wins.

    Args:
        query: Name typed by the user (e.g., "mahomes patrick")
        candidates: (display_name, payload) pairs, payload is returned untouched
        threshold: Minimum similarity, exclusive (0.7 players, 0.6 teams)

    Returns:
        NameMatch for the best candidate, or None if nothing is close enough

    Example:
        match = resolve('Coach Dadd', [('Coach Dad', 2), ('UGF Pandas', 4)], 0.6)
        match.payload  # 2
    """
    if not query:
        return None

    best: Optional[NameMatch] = None
    for name, payload in candidates:
        score = similarity(query, name)
        if score > threshold and (best is None or score > best.similarity):
            best = NameMatch(name=name, payload=payload, similarity=score)
    return best
