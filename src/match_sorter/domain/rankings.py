"""Ordered rank scale used to grade how well a candidate matches a query.

Ranks are plain numbers so they compare with ordinary numeric ordering.
The named tiers are integers; loose in-order matches produce a float in
the open interval between ``MATCHES`` and ``ACRONYM``.
"""

from __future__ import annotations

from enum import IntEnum


class Rank(IntEnum):
    """Named match tiers, highest first."""

    CASE_SENSITIVE_EQUAL = 7
    EQUAL = 6
    STARTS_WITH = 5
    WORD_STARTS_WITH = 4
    CONTAINS = 3
    ACRONYM = 2
    MATCHES = 1
    NO_MATCH = 0


def rank_name(value: float) -> str:
    """Return the tier name a rank value falls into.

    Closeness scores (e.g. ``1.25``) report as ``MATCHES``.
    """
    for tier in Rank:
        if value >= tier:
            return tier.name
    return Rank.NO_MATCH.name


def is_match(value: float) -> bool:
    return value >= Rank.MATCHES


def check_rank_bounds(value: float | None, *, unbounded: float | None = None) -> float | None:
    """Reject rank values outside ``NO_MATCH``..``CASE_SENSITIVE_EQUAL``.

    ``None`` and the ``unbounded`` sentinel (an infinite default such as
    ``-inf`` for ``min_ranking``) pass through. NaN is rejected.
    """
    if value is None or value == unbounded:
        return value
    if not Rank.NO_MATCH <= value <= Rank.CASE_SENSITIVE_EQUAL:
        raise ValueError(
            f"rank {value!r} is outside {Rank.NO_MATCH.value}..{Rank.CASE_SENSITIVE_EQUAL.value}"
        )
    return value


def coerce_rank_value(value: object) -> object:
    """Accept rank names (``"STARTS_WITH"``) and ints where a rank float is expected.

    Anything else is returned unchanged for normal validation.
    """
    if isinstance(value, str) and value.strip().upper() in Rank.__members__:
        return float(Rank[value.strip().upper()])
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value
