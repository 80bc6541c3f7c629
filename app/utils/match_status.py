"""Shared match status classification."""

import enum


class MatchPhase(str, enum.Enum):
    """Lifecycle phase of a match, derived from the provider status code."""
    not_started = "not_started"
    in_progress = "in_progress"
    finished = "finished"
    called_off = "called_off"
    unknown = "unknown"


# Provider short codes (API-Football) plus the long-form codes
# used by older fixture feeds.
NOT_STARTED_CODES = frozenset({"TBD", "NS", "SCHEDULED", "TIMED"})
IN_PROGRESS_CODES = frozenset({
    "1H", "HT", "2H", "ET", "BT", "P", "SUSP", "INT",
    "LIVE", "IN_PLAY", "PAUSED",
})
FINISHED_CODES = frozenset({"FT", "AET", "PEN", "FINISHED"})
# Postponed, cancelled, abandoned, awarded or walkover: no result was played out.
CALLED_OFF_CODES = frozenset({"PST", "CANC", "ABD", "AWD", "WO", "POSTPONED", "CANCELLED"})


def normalize_status_code(status: str | None) -> str:
    if not isinstance(status, str):
        return ""
    return status.strip().upper()


def classify_match_status(status: str | None) -> MatchPhase:
    """Map a provider status code onto a lifecycle phase.

    Returns:
        MatchPhase.in_progress - match is being played (incl. breaks, suspensions)
        MatchPhase.finished - result was decided on the pitch
        MatchPhase.not_started - scheduled
        MatchPhase.called_off - postponed, cancelled, abandoned or awarded
        MatchPhase.unknown - anything the provider sent that we do not recognize
    """
    code = normalize_status_code(status)
    if code in IN_PROGRESS_CODES:
        return MatchPhase.in_progress
    if code in FINISHED_CODES:
        return MatchPhase.finished
    if code in NOT_STARTED_CODES:
        return MatchPhase.not_started
    if code in CALLED_OFF_CODES:
        return MatchPhase.called_off
    return MatchPhase.unknown
