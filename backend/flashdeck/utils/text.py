"""Text normalization helpers for deck titles and search queries."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_SEARCH_QUERY_RE = re.compile(r"[a-zA-Z0-9\s]+")


def clean_title(raw: str) -> str:
    """Normalize a title to its display form.

    Lowercases, collapses runs of whitespace, trims and capitalizes the first
    letter of every word: ``"  data   structures  "`` becomes ``"Data Structures"``.
    """
    collapsed = _WHITESPACE_RE.sub(" ", raw.lower()).strip()
    return " ".join(word[:1].upper() + word[1:] for word in collapsed.split(" ") if word)


def is_valid_search_query(query: str) -> bool:
    """Return True for non-blank queries made of ASCII letters, digits and whitespace."""
    if not query or not query.strip():
        return False
    return _SEARCH_QUERY_RE.fullmatch(query) is not None


__all__ = ["clean_title", "is_valid_search_query"]
