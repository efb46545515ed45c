"""Service layer: the public ranking and sorting entry points."""

from match_sorter.service_layer.sorter import (
    alphabetical_base_sort,
    index_base_sort,
    match_sorter,
    rank_items,
    sort_ranked_values,
)


__all__ = [
    "alphabetical_base_sort",
    "index_base_sort",
    "match_sorter",
    "rank_items",
    "sort_ranked_values",
]
