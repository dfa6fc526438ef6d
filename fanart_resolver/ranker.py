"""Ordering of image results for a preferred language."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .models import ImageResult

ENGLISH = "en"


def _same_language(left: Optional[str], right: Optional[str]) -> bool:
    if left is None or right is None:
        return left is right
    return left.lower() == right.lower()


def language_score(language: Optional[str], preferred_language: Optional[str]) -> int:
    """Score how well ``language`` serves a caller asking for ``preferred_language``.

    An exact match scores 3. English substitutes for any other preferred
    language at 2. Untagged images score 3 for English callers and 2 for
    everyone else; any other language scores 0.
    """
    if _same_language(language, preferred_language):
        return 3
    preferred_is_english = _same_language(preferred_language, ENGLISH)
    if not preferred_is_english and _same_language(language, ENGLISH):
        return 2
    if not language:
        return 3 if preferred_is_english else 2
    return 0


def rank_key(
    result: ImageResult, preferred_language: Optional[str]
) -> Tuple[int, int, int, int]:
    return (
        result.width or 0,
        language_score(result.language, preferred_language),
        result.popularity or 0,
        result.vote_count or 0,
    )


def rank(
    results: Iterable[ImageResult], preferred_language: Optional[str]
) -> List[ImageResult]:
    """Sort descending by resolution, language affinity, then popularity.

    The sort is stable: results with equal keys keep their input order.
    """
    return sorted(
        results,
        key=lambda result: rank_key(result, preferred_language),
        reverse=True,
    )
