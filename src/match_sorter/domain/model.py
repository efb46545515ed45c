"""Value objects for key specifications, options and ranking results.

Following the same split the rest of the package uses:
- Caller-facing configuration (``KeySpec``, ``MatchSorterOptions``) is
  validated by Pydantic and frozen, so an options object can be shared
  between calls and threads without anyone mutating defaults.
- Per-call intermediate records (``Candidate``, ``RankingInfo``,
  ``RankedItem``) are frozen dataclasses; they are created once per item
  and thrown away when the call returns.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from match_sorter.domain.rankings import Rank, check_rank_bounds, coerce_rank_value


class MatchSorterError(Exception):
    """Base error for match sorter configuration problems."""


class InvalidKeySpecError(MatchSorterError, ValueError):
    """Raised when a key specification has an unsupported shape."""


@dataclass(frozen=True)
class KeyAttributes:
    """Per-key overrides carried alongside every candidate a key produces."""

    threshold: float | None = None
    min_ranking: float = -math.inf
    max_ranking: float = math.inf

    def clamp(self, rank: float) -> float:
        """Apply ``min_ranking``/``max_ranking`` to a raw rank.

        Only actual matches (``rank >= MATCHES``) are lifted to
        ``min_ranking``; a non-match stays a non-match.
        """
        if rank < self.min_ranking and rank >= Rank.MATCHES:
            return self.min_ranking
        if rank > self.max_ranking:
            return self.max_ranking
        return rank


DEFAULT_KEY_ATTRIBUTES = KeyAttributes()


class KeySpec(BaseModel):
    """Instruction for pulling candidate strings out of an item.

    ``key`` is either a dotted path (``"name.first"``, ``"aliases.*.name"``)
    or a callable returning one value or a list of values. Mapping
    descriptors accept both ``min_ranking`` and ``minRanking`` spellings.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    key: str | Callable[[Any], Any]
    threshold: float | None = None
    min_ranking: float = -math.inf
    max_ranking: float = math.inf

    @field_validator("threshold", "min_ranking", "max_ranking", mode="before")
    @classmethod
    def _coerce_rank(cls, value: Any) -> Any:
        return coerce_rank_value(value)

    @field_validator("threshold")
    @classmethod
    def _check_threshold(cls, value: float | None) -> float | None:
        return check_rank_bounds(value)

    @field_validator("min_ranking")
    @classmethod
    def _check_min_ranking(cls, value: float) -> float:
        return check_rank_bounds(value, unbounded=-math.inf)

    @field_validator("max_ranking")
    @classmethod
    def _check_max_ranking(cls, value: float) -> float:
        return check_rank_bounds(value, unbounded=math.inf)

    @property
    def kind(self) -> Literal["path", "callback"]:
        return "path" if isinstance(self.key, str) else "callback"

    @property
    def attributes(self) -> KeyAttributes:
        return KeyAttributes(
            threshold=self.threshold,
            min_ranking=self.min_ranking,
            max_ranking=self.max_ranking,
        )


def coerce_key_spec(value: Any) -> KeySpec:
    """Turn a path string, callable, mapping or ``KeySpec`` into a ``KeySpec``.

    Raises:
        InvalidKeySpecError: For any other shape (numbers, ``None``,
            mappings without ``key``). These are configuration bugs, so they
            fail immediately instead of silently matching nothing.
    """
    if isinstance(value, KeySpec):
        return value
    if isinstance(value, str) or callable(value):
        return KeySpec(key=value)
    if isinstance(value, Mapping):
        if "key" not in value:
            raise InvalidKeySpecError(f"Key descriptor is missing 'key': {dict(value)!r}")
        return KeySpec.model_validate(dict(value))
    raise InvalidKeySpecError(f"Unsupported key specification: {value!r}")


@dataclass(frozen=True)
class Candidate:
    """One extracted value and the key that produced it."""

    value: Any
    key_index: int
    attributes: KeyAttributes = DEFAULT_KEY_ATTRIBUTES


@dataclass(frozen=True)
class RankingInfo:
    """Best ranking found for a single item."""

    ranked_value: Any
    rank: float
    key_index: int
    key_threshold: float | None


@dataclass(frozen=True)
class RankedItem:
    """An item that survived filtering, with the data used to sort it."""

    item: Any
    index: int
    ranked_value: Any
    rank: float
    key_index: int
    key_threshold: float | None

    @classmethod
    def from_ranking(cls, item: Any, index: int, info: RankingInfo) -> RankedItem:
        return cls(
            item=item,
            index=index,
            ranked_value=info.ranked_value,
            rank=info.rank,
            key_index=info.key_index,
            key_threshold=info.key_threshold,
        )


BaseSort = Callable[[RankedItem, RankedItem], int]
Normalizer = Callable[[Any, bool], str]


class MatchSorterOptions(BaseModel):
    """Immutable configuration for one ``match_sorter`` call.

    ``base_sort`` and ``normalizer`` default to ``None``, meaning the
    library defaults (input order for ranked ties, alphabetical order for an
    empty query, and diacritic stripping).
    Both must be pure: they may be called many times per item.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    keys: tuple[KeySpec, ...] | None = None
    threshold: float = Field(default=float(Rank.MATCHES))
    keep_diacritics: bool = False
    base_sort: BaseSort | None = None
    normalizer: Normalizer | None = None

    @field_validator("threshold", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: Any) -> Any:
        return coerce_rank_value(value)

    @field_validator("threshold")
    @classmethod
    def _check_threshold(cls, value: float) -> float:
        return check_rank_bounds(value)

    @field_validator("keys", mode="before")
    @classmethod
    def _coerce_keys(cls, value: Any) -> tuple[KeySpec, ...] | None:
        if value is None:
            return None
        if isinstance(value, (str, bytes, Mapping, KeySpec)) or callable(value) or not isinstance(value, Iterable):
            raise InvalidKeySpecError(f"'keys' must be a list of key specifications, got {value!r}")
        return tuple(coerce_key_spec(key) for key in value)

    def merged(self, **overrides: Any) -> MatchSorterOptions:
        """Return a new, re-validated options object with ``overrides`` applied."""
        if not overrides:
            return self
        fields = type(self).model_fields
        aliases = {info.alias: name for name, info in fields.items() if info.alias}
        values = {name: getattr(self, name) for name in fields}
        values.update({aliases.get(name, name): value for name, value in overrides.items()})
        return type(self)(**values)

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> MatchSorterOptions:
        """Seed options from environment-driven ``Settings`` defaults."""
        base = cls(
            threshold=settings.default_threshold,
            keep_diacritics=settings.keep_diacritics,
        )
        return base.merged(**overrides)
