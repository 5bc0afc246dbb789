# matcher/matcher.py
from typing import Iterable

from .similarity import cosine_similarity
from .types import CatalogEntry, Match, MatchResult, NoMatch


def match(query, candidates: Iterable[CatalogEntry], threshold: float) -> MatchResult:
    """
    Pick the candidate most similar to ``query``.

    Entries without features are skipped. On equal scores the first
    candidate in input order wins. A Match is returned only when the
    best score is strictly above ``threshold``; otherwise NoMatch carries
    the best score observed (0.0 if there were no eligible candidates).
    """
    best_entry = None
    best_score = 0.0

    for entry in candidates:
        if entry.features is None:
            continue
        score = cosine_similarity(query, entry.features)
        if best_entry is None or score > best_score:
            best_entry = entry
            best_score = score

    if best_entry is not None and best_score > threshold:
        return Match(entry=best_entry, score=best_score)
    return NoMatch(score=best_score)
