"""
Title normalization used to compare free-text titles with catalog titles.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Optional

_PUNCTUATION = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(value: Optional[str]) -> str:
    """Return the comparison key for ``value``.

    Lower-cases, strips diacritics, drops everything that is not a letter,
    digit or whitespace and collapses whitespace. An empty result carries no
    signal and must never be used as a match key.
    """
    if not value:
        return ""
    text = unicodedata.normalize("NFD", str(value).lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _PUNCTUATION.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()
