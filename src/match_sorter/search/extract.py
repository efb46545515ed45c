"""Resolve key specifications against items to produce candidate values.

A path such as ``"aliases.*.name.first"`` is walked one segment at a time
over a list of "current" values:

- mappings are indexed by key,
- sequences are indexed by integer segments (``"0"``),
- any other object is read by attribute (callables such as methods are
  skipped),
- ``*`` expands every element of a sequence (or every value of a mapping).

Missing or ``None`` values end their branch quietly; extraction never
raises for data-shape surprises. Only callbacks supplied by the caller can
raise, and their exceptions propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence, Set
from typing import Any

from match_sorter.domain.model import Candidate, KeySpec


WILDCARD = "*"

_MISSING = object()


def _is_collection(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Sequence, Set))


def _get_child(value: Any, segment: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(segment, _MISSING)
    if isinstance(value, (str, bytes, bytearray)):
        return _MISSING
    if isinstance(value, Sequence):
        if not (segment.isascii() and segment.isdigit()):
            return _MISSING
        position = int(segment)
        return value[position] if position < len(value) else _MISSING
    if segment.startswith("__"):
        return _MISSING
    child = getattr(value, segment, _MISSING)
    # methods and other callables are not data
    if callable(child):
        return _MISSING
    return child


def _expand(value: Any) -> Iterable[Any]:
    if isinstance(value, Mapping):
        return value.values()
    if _is_collection(value):
        return value
    return (value,)


def _flatten(values: Iterable[Any]) -> list[Any]:
    """Flatten list values one level and drop ``None``."""
    flat: list[Any] = []
    for value in values:
        if value is None:
            continue
        if _is_collection(value):
            flat.extend(element for element in value if element is not None)
        else:
            flat.append(value)
    return flat


def get_nested_values(path: str, item: Any) -> list[Any]:
    """Return every value found at dotted ``path`` inside ``item``.

    Examples:
        >>> get_nested_values("name.first", {"name": {"first": "baz"}})
        ['baz']
        >>> get_nested_values("tags.*.label", {"tags": [{"label": "a"}, None, {"label": "b"}]})
        ['a', 'b']
        >>> get_nested_values("name.first", {"name": None})
        []
    """
    values: list[Any] = [item]
    for segment in path.split("."):
        next_values: list[Any] = []
        for value in values:
            if value is None:
                continue
            child = _get_child(value, segment)
            if child is not _MISSING:
                if child is not None:
                    next_values.append(child)
            elif segment == WILDCARD:
                next_values.extend(_expand(value))
        values = next_values
        if not values:
            return []
    return _flatten(values)


def get_item_values(item: Any, key: KeySpec) -> list[Any]:
    """Extract the candidate values ``key`` yields for ``item``."""
    if key.kind == "callback":
        return _flatten([key.key(item)])
    return get_nested_values(key.key, item)


def get_all_values_to_rank(item: Any, keys: Sequence[KeySpec]) -> list[Candidate]:
    """Collect candidates across all keys, tagged with their key index."""
    candidates: list[Candidate] = []
    for key_index, key in enumerate(keys):
        attributes = key.attributes
        for value in get_item_values(item, key):
            candidates.append(Candidate(value=value, key_index=key_index, attributes=attributes))
    return candidates
