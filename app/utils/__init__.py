"""Utility functions."""

from app.utils.match_status import MatchPhase, classify_match_status
from app.utils.name_normalizer import normalize_player_name
from app.utils.timestamps import utcnow

__all__ = [
    "MatchPhase",
    "classify_match_status",
    "normalize_player_name",
    "utcnow",
]
