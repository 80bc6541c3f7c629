"""Player name canonicalization for cross-feed identity matching."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_player_name(value: str | None) -> str:
    """Normalize a player display name for comparison.

    Lower-cases, strips periods, collapses whitespace and drops every
    character that is not a letter or whitespace. Idempotent.
    """
    if not value:
        return ""
    normalized = value.lower().replace(".", "")
    normalized = _WHITESPACE_RE.sub(" ", normalized).strip()
    normalized = "".join(ch for ch in normalized if ch.isalpha() or ch.isspace())
    # Dropping characters can leave double spaces ("a - b" -> "a  b").
    return _WHITESPACE_RE.sub(" ", normalized).strip()
