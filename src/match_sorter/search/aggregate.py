"""Reduce every candidate of an item to the single best ranking."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from match_sorter.domain.model import KeySpec, MatchSorterOptions, RankingInfo
from match_sorter.domain.rankings import Rank
from match_sorter.search.extract import get_all_values_to_rank
from match_sorter.search.matcher import get_match_ranking


def get_highest_ranking(
    item: Any,
    keys: Sequence[KeySpec] | None,
    value: str,
    options: MatchSorterOptions,
) -> RankingInfo:
    """Return the best rank any of ``item``'s candidates achieves.

    Without keys the item itself is ranked and ``key_index`` is ``-1``.
    With keys, each candidate's rank is clamped by its key's
    ``min_ranking``/``max_ranking`` and only a strictly greater rank
    replaces the current best, so on exact ties the earliest candidate
    (first key, then first value within the key) is kept.

    ``key_threshold`` is the winning key's own threshold, or
    ``options.threshold`` when the key has none or nothing matched.
    """
    if not keys:
        return RankingInfo(
            ranked_value=item,
            rank=get_match_ranking(item, value, options),
            key_index=-1,
            key_threshold=options.threshold,
        )

    best = RankingInfo(
        ranked_value=item,
        rank=Rank.NO_MATCH,
        key_index=-1,
        key_threshold=options.threshold,
    )
    for candidate in get_all_values_to_rank(item, keys):
        attributes = candidate.attributes
        rank = attributes.clamp(get_match_ranking(candidate.value, value, options))
        if rank > best.rank:
            best = RankingInfo(
                ranked_value=candidate.value,
                rank=rank,
                key_index=candidate.key_index,
                key_threshold=attributes.threshold,
            )
    return best
