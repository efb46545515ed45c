"""Deterministic, human-intuitive ranking and sorting of items against a query.

Usage:
    >>> from match_sorter import Rank, match_sorter
    >>> match_sorter(["Chakotay", "Brunt", "Charzard"], "Ch")
    ['Chakotay', 'Charzard']
    >>> match_sorter([{"name": "bat"}, {"name": "foo"}], "ba", keys=["name"])
    [{'name': 'bat'}]
"""

from match_sorter.domain.model import (
    InvalidKeySpecError,
    KeyAttributes,
    KeySpec,
    MatchSorterError,
    MatchSorterOptions,
    RankedItem,
    RankingInfo,
)
from match_sorter.domain.rankings import Rank, rank_name
from match_sorter.search.matcher import get_match_ranking
from match_sorter.search.normalize import normalize
from match_sorter.service_layer.sorter import (
    alphabetical_base_sort,
    index_base_sort,
    match_sorter,
    rank_items,
)


rankings = Rank

__all__ = [
    "InvalidKeySpecError",
    "KeyAttributes",
    "KeySpec",
    "MatchSorterError",
    "MatchSorterOptions",
    "Rank",
    "RankedItem",
    "RankingInfo",
    "alphabetical_base_sort",
    "get_match_ranking",
    "index_base_sort",
    "match_sorter",
    "normalize",
    "rank_items",
    "rank_name",
    "rankings",
]
