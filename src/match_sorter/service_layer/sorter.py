"""Filter and order a collection of items against one query.

Entry point for callers. Ranks every item, keeps those at or above their
effective threshold and sorts them by:

1. rank, descending
2. key index, ascending (earlier keys win)
3. ``base_sort`` tie-break (default: input order)

An empty query skips ranking: every item is returned, ordered by
``base_sort`` alone (default: alphabetical on the first extracted value).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import cmp_to_key, partial
import logging
from typing import Any

from match_sorter.domain.model import BaseSort, MatchSorterOptions, RankedItem
from match_sorter.domain.rankings import Rank
from match_sorter.observability.metrics import ITEMS_MATCHED, ITEMS_RANKED, SORT_CALLS, SORT_LATENCY, track_latency
from match_sorter.observability.tracing import create_span
from match_sorter.search.aggregate import get_highest_ranking
from match_sorter.search.extract import get_item_values
from match_sorter.search.normalize import stringify, strip_diacritics


logger = logging.getLogger(__name__)


def _collation_key(value: Any) -> tuple[str, str, str]:
    # accent- and case-insensitive first, then lower before upper, then code points
    text = stringify(value)
    return strip_diacritics(text).casefold(), text.swapcase(), text


def alphabetical_base_sort(a: RankedItem, b: RankedItem) -> int:
    """Compare the winning ranked values alphabetically.

    Ordering for an empty query when no ``base_sort`` is given. Identical
    values compare equal and keep input order.
    """
    left = _collation_key(a.ranked_value)
    right = _collation_key(b.ranked_value)
    return (left > right) - (left < right)


def index_base_sort(a: RankedItem, b: RankedItem) -> int:
    """Tie-break on original position, preserving input order.

    Used for ranked results when no ``base_sort`` is given.
    """
    return (a.index > b.index) - (a.index < b.index)


def sort_ranked_values(a: RankedItem, b: RankedItem, base_sort: BaseSort = index_base_sort) -> int:
    """Return -1 if ``a`` sorts first, 1 if ``b`` does, else defer to ``base_sort``."""
    a_first = -1
    b_first = 1
    if a.rank == b.rank:
        if a.key_index == b.key_index:
            return base_sort(a, b)
        return a_first if a.key_index < b.key_index else b_first
    return a_first if a.rank > b.rank else b_first


def resolve_options(
    options: MatchSorterOptions | Mapping[str, Any] | None,
    overrides: Mapping[str, Any],
) -> MatchSorterOptions:
    """Build the effective options from an options object, a mapping or keywords."""
    if options is None:
        return MatchSorterOptions(**overrides)
    if isinstance(options, Mapping):
        return MatchSorterOptions.model_validate({**options, **overrides})
    return options.merged(**overrides)


def _unranked_entry(item: Any, index: int, options: MatchSorterOptions) -> RankedItem:
    ranked_value = item
    key_index = -1
    for position, key in enumerate(options.keys or ()):
        values = get_item_values(item, key)
        if values:
            ranked_value = values[0]
            key_index = position
            break
    return RankedItem(
        item=item,
        index=index,
        ranked_value=ranked_value,
        rank=Rank.NO_MATCH,
        key_index=key_index,
        key_threshold=options.threshold,
    )


def rank_items(
    items: Iterable[Any],
    value: str,
    options: MatchSorterOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> list[RankedItem]:
    """Return the filtered, sorted ranking records for ``items``.

    Same semantics as ``match_sorter`` but keeps the metadata (rank, key
    index, winning value, original index) instead of stripping it.
    """
    options = resolve_options(options, overrides)

    if value == "":
        entries = [_unranked_entry(item, index, options) for index, item in enumerate(items)]
        entries.sort(key=cmp_to_key(options.base_sort or alphabetical_base_sort))
        return entries

    base_sort = options.base_sort or index_base_sort

    entries = []
    for index, item in enumerate(items):
        info = get_highest_ranking(item, options.keys, value, options)
        threshold = options.threshold if info.key_threshold is None else info.key_threshold
        if info.rank >= threshold:
            entries.append(RankedItem.from_ranking(item, index, info))

    entries.sort(key=cmp_to_key(partial(sort_ranked_values, base_sort=base_sort)))
    return entries


def match_sorter(
    items: Iterable[Any],
    value: str,
    options: MatchSorterOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> list[Any]:
    """Return the items matching ``value``, best match first.

    Args:
        items: Items to rank. Never mutated; the result holds the same objects.
        value: The query. ``""`` returns every item sorted by ``base_sort``.
        options: A ``MatchSorterOptions`` or an equivalent mapping.
        **overrides: Option fields (``keys``, ``threshold``,
            ``keep_diacritics``, ``base_sort``, ``normalizer``) applied on top
            of ``options``.

    Returns:
        A new list of the matching items.

    Raises:
        pydantic.ValidationError: If the options are malformed, including
            unsupported key specifications.

    Examples:
        >>> match_sorter(["hi", "hey", "hello", "sup", "yo"], "h")
        ['hi', 'hey', 'hello']
    """
    options = resolve_options(options, overrides)
    items = list(items)
    mode = "unranked" if value == "" else "ranked"
    attributes = {
        "match_sorter.mode": mode,
        "match_sorter.item_count": len(items),
        "match_sorter.key_count": len(options.keys or ()),
    }

    with create_span("match_sorter", attributes=attributes) as span, track_latency(SORT_LATENCY, mode=mode):
        ranked = rank_items(items, value, options)
        span.set_attribute("match_sorter.match_count", len(ranked))

    SORT_CALLS.labels(mode=mode).inc()
    ITEMS_RANKED.labels(mode=mode).inc(len(items))
    ITEMS_MATCHED.labels(mode=mode).inc(len(ranked))
    logger.debug("match_sorter: %d of %d items matched %r (%s)", len(ranked), len(items), value, mode)

    return [entry.item for entry in ranked]


match_sorter.rankings = Rank  # type: ignore[attr-defined]
