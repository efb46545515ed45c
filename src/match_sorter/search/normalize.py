"""Default string normalization used before any comparison.

Candidates and queries may arrive as any Python object; the ranker only
ever sees the strings produced here. Diacritics are removed by decomposing
to NFD, dropping combining marks and recomposing, so ``"café"`` and
``"cafe"`` compare equal unless the caller asks to keep them.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any
import unicodedata


def stringify(value: Any) -> str:
    """Return ``value`` as a string without altering strings."""
    if isinstance(value, str):
        return value
    return str(value)


@lru_cache(maxsize=4096)
def strip_diacritics(text: str) -> str:
    """Remove combining diacritical marks from ``text``.

    Examples:
        >>> strip_diacritics("papier-mâché")
        'papier-mache'
        >>> strip_diacritics("jalapeño")
        'jalapeno'
    """
    if text.isascii():
        return text
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def normalize(value: Any, keep_diacritics: bool = False) -> str:
    """Stringify ``value`` and strip diacritics unless ``keep_diacritics``."""
    text = stringify(value)
    if keep_diacritics:
        return text
    return strip_diacritics(text)
