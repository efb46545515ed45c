"""Domain layer: rank scale, key specifications and ranking value objects.

Nothing here performs matching; these are the immutable shapes the search
and service layers pass between each other.
"""

from match_sorter.domain.model import (
    Candidate,
    InvalidKeySpecError,
    KeyAttributes,
    KeySpec,
    MatchSorterError,
    MatchSorterOptions,
    RankedItem,
    RankingInfo,
    coerce_key_spec,
)
from match_sorter.domain.rankings import Rank, is_match, rank_name


__all__ = [
    "Candidate",
    "InvalidKeySpecError",
    "KeyAttributes",
    "KeySpec",
    "MatchSorterError",
    "MatchSorterOptions",
    "Rank",
    "RankedItem",
    "RankingInfo",
    "coerce_key_spec",
    "is_match",
    "rank_name",
]
