"""Shared helpers for answer, letter and nickname normalization."""

from __future__ import annotations

from typing import Optional

from ..core.constants import ALPHABET

SHARP_S = "ß"
CAPITAL_SHARP_S = "ẞ"

ANONYMOUS_NICKNAME_KEY = "(anonymous)"


def _upper_char(char: str) -> str:
    # str.upper() expands ß to SS, which would not fit in a single cell.
    if char in (SHARP_S, CAPITAL_SHARP_S):
        return SHARP_S
    return char.upper()


def normalize_answer(text: Optional[str]) -> str:
    """Return ``text`` uppercased with everything outside the alphabet removed."""

    if not text:
        return ""
    transformed = []
    for char in text.strip():
        upper = _upper_char(char)
        if upper in ALPHABET:
            transformed.append(upper)
    return "".join(transformed)


def normalize_letter(text: Optional[str]) -> Optional[str]:
    """Return the single alphabet letter typed as ``text``, or None."""

    if not text or len(text) != 1:
        return None
    upper = _upper_char(text)
    return upper if upper in ALPHABET else None


def nickname_key(nickname: Optional[str], placeholder: str = ANONYMOUS_NICKNAME_KEY) -> str:
    """Grouping key for a nickname: trimmed and case-folded."""

    key = (nickname or "").strip().casefold()
    return key or placeholder


__all__ = [
    "ANONYMOUS_NICKNAME_KEY",
    "nickname_key",
    "normalize_answer",
    "normalize_letter",
]
