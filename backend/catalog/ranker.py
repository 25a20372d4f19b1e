"""
Candidate ranking for catalog search results.

Selection runs through ordered stages. Each stage filters the candidates
with a predicate and, when anything survives, returns the minimum of the
survivors under the stage's sort key. ``min`` keeps the first of equal
elements, so ties fall back to the catalog's own result order.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .models import SearchCandidate

SortKey = Callable[[SearchCandidate], tuple]


@dataclass(frozen=True, slots=True)
class RankingStage:
    """A named filter plus the ordering applied to whatever it keeps."""

    name: str
    predicate: Callable[[SearchCandidate], bool]
    sort_key: SortKey

    def pick(self, candidates: Sequence[SearchCandidate]) -> Optional[SearchCandidate]:
        matches = [candidate for candidate in candidates if self.predicate(candidate)]
        if not matches:
            return None
        return min(matches, key=self.sort_key)


def tie_break_key(target_year: Optional[int]) -> SortKey:
    """Year distance first (when a year is known), then votes, then popularity."""

    def key(candidate: SearchCandidate) -> tuple:
        distance = 0
        if target_year is not None:
            if candidate.release_year is None:
                distance = sys.maxsize
            else:
                distance = abs(candidate.release_year - target_year)
        return (distance, -candidate.vote_count, -candidate.popularity)

    return key


def _popularity_key(candidate: SearchCandidate) -> tuple:
    return (-candidate.popularity,)


def build_stages(normalized_title: str, target_year: Optional[int]) -> list[RankingStage]:
    """Return the ranking stages in evaluation order."""

    chain = tie_break_key(target_year)
    stages = [
        RankingStage(
            name="exact_title",
            predicate=lambda c: bool(normalized_title)
            and normalized_title in (c.normalized_title, c.normalized_original_title),
            sort_key=chain,
        )
    ]
    if target_year is not None:
        stages.append(
            RankingStage(
                name="release_year",
                predicate=lambda c: c.release_year == target_year,
                sort_key=chain,
            )
        )
    stages.append(RankingStage(name="popularity", predicate=lambda c: True, sort_key=_popularity_key))
    return stages


def select_best(
    candidates: Sequence[SearchCandidate],
    target_year: Optional[int] = None,
    *,
    normalized_title: str = "",
) -> Optional[SearchCandidate]:
    """Pick the single best candidate, or None when there are none."""

    if not candidates:
        return None
    if isinstance(target_year, bool) or not isinstance(target_year, int):
        target_year = None

    for stage in build_stages(normalized_title, target_year):
        chosen = stage.pick(candidates)
        if chosen is not None:
            return chosen
    return None
