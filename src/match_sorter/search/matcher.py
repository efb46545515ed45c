"""Rank a single candidate string against a query.

Tiers are tested in a fixed order and the first that applies wins:

1. query longer than candidate -> NO_MATCH
2. identical -> CASE_SENSITIVE_EQUAL
3. identical ignoring case -> EQUAL
4. candidate starts with query -> STARTS_WITH
5. a later word starts with query -> WORD_STARTS_WITH
6. candidate contains query -> CONTAINS
7. candidate's acronym contains query -> ACRONYM
8. query characters appear in order -> closeness score in (MATCHES, ACRONYM)

A single-character query that is not contained anywhere is NO_MATCH; one
character would otherwise match almost everything through steps 7 and 8.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from match_sorter.domain.rankings import Rank
from match_sorter.search.normalize import normalize


if TYPE_CHECKING:
    from match_sorter.domain.model import MatchSorterOptions


def prepare_value_for_comparison(value: Any, options: MatchSorterOptions | None = None) -> str:
    keep_diacritics = options.keep_diacritics if options else False
    normalizer = (options.normalizer if options else None) or normalize
    return normalizer(value, keep_diacritics)


def get_acronym(text: str) -> str:
    """Return the first character of every space- and hyphen-separated word.

    Examples:
        >>> get_acronym("The Tail of Two Cities")
        'TToTC'
        >>> get_acronym("super-duper file")
        'sdf'
    """
    acronym: list[str] = []
    for word in text.split(" "):
        for fragment in word.split("-"):
            acronym.append(fragment[:1])
    return "".join(acronym)


def get_closeness_ranking(candidate: str, query: str) -> float:
    """Score how tightly the query's characters cluster inside ``candidate``.

    Each query character is searched for at or after the position following
    the previous match. The score is ``MATCHES + in_order_ratio / spread``
    where ``spread`` is the distance between the first match and the final
    cursor. Tighter matches approach ``MATCHES + 1``.

    Both strings are expected to be lower-cased already.
    """
    first_index = candidate.find(query[0])
    if first_index < 0:
        return Rank.NO_MATCH

    matched = 1
    cursor = first_index + 1
    for char in query[1:]:
        position = candidate.find(char, cursor)
        if position < 0:
            return Rank.NO_MATCH
        matched += 1
        cursor = position + 1

    spread = cursor - (first_index + 1)
    in_order_ratio = matched / len(query)
    return Rank.MATCHES + in_order_ratio * (1 / spread)


def get_match_ranking(candidate: Any, query: Any, options: MatchSorterOptions | None = None) -> float:
    """Return how well ``query`` matches ``candidate`` on the ``Rank`` scale.

    Args:
        candidate: The value being tested (stringified before comparison).
        query: The search value.
        options: Supplies ``keep_diacritics`` and an optional ``normalizer``.

    Returns:
        A ``Rank`` tier, or a float strictly between ``MATCHES`` and
        ``ACRONYM`` for loose in-order matches.
    """
    candidate = prepare_value_for_comparison(candidate, options)
    query = prepare_value_for_comparison(query, options)

    if len(query) > len(candidate):
        return Rank.NO_MATCH

    if candidate == query:
        return Rank.CASE_SENSITIVE_EQUAL

    candidate = candidate.lower()
    query = query.lower()

    if candidate == query:
        return Rank.EQUAL

    if candidate.startswith(query):
        return Rank.STARTS_WITH

    if f" {query}" in candidate:
        return Rank.WORD_STARTS_WITH

    if query in candidate:
        return Rank.CONTAINS
    if len(query) == 1:
        return Rank.NO_MATCH

    if query in get_acronym(candidate):
        return Rank.ACRONYM

    return get_closeness_ranking(candidate, query)
