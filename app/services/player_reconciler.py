"""
Player identity reconciliation between the lineup feed and the squad feed.

The lineup feed knows who played where; the squad feed knows what the
players look like. They are keyed independently and the lineup feed
occasionally omits provider ids (typically for new signings), so the
roster record is located by id first and by name/number evidence second.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from app.schemas.lineup import (
    LineupPlayer,
    PlayerRecord,
    RosterPlayer,
    TeamLineup,
    TeamLineupFeed,
)
from app.utils.name_normalizer import normalize_player_name

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.7


def _name_similarity(roster_name: str, target_name: str) -> float:
    """Length ratio of two normalized names when one contains the other, else 0."""
    if not roster_name or not target_name:
        return 0.0
    if roster_name in target_name or target_name in roster_name:
        return len(roster_name) / len(target_name)
    return 0.0


def find_roster_match(
    target: LineupPlayer,
    roster: Sequence[RosterPlayer],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> RosterPlayer | None:
    """Find the roster record describing the same person as ``target``.

    Priority: provider id, exact normalized name, jersey number, then the
    best substring overlap above ``threshold``. Returns None when nothing
    is convincing enough.
    """
    if target.id:
        for item in roster:
            if item.id == target.id:
                return item

    target_name = normalize_player_name(target.name)
    best_match: RosterPlayer | None = None
    best_similarity = 0.0

    for item in roster:
        item_name = normalize_player_name(item.name)

        if target_name and item_name == target_name:
            return item

        similarity = _name_similarity(item_name, target_name)
        if similarity > best_similarity:
            best_similarity = similarity
            best_match = item

        # Numbers are unique within a squad.
        if target.number and item.number == target.number:
            return item

    if best_match is not None and best_similarity > threshold:
        return best_match

    return None


def reconcile_player(
    target: LineupPlayer,
    roster: Sequence[RosterPlayer],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    *,
    keep_grid: bool = True,
) -> PlayerRecord:
    """Merge roster metadata into a lineup entry.

    Lineup fields are copied verbatim; only the photo is taken from the
    roster match, and it stays empty when there is none.
    """
    match = find_roster_match(target, roster, threshold)
    return PlayerRecord(
        id=target.id,
        name=target.name,
        number=target.number,
        pos=target.pos,
        grid=target.grid if keep_grid else None,
        photo=match.photo if match else "",
    )


def reconcile_lineup(
    feed: TeamLineupFeed,
    roster: Sequence[RosterPlayer],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> TeamLineup:
    """Reconcile a team's starters and substitutes against its squad."""
    starters = [reconcile_player(p, roster, threshold) for p in feed.starters]
    substitutes = [
        reconcile_player(p, roster, threshold, keep_grid=False) for p in feed.substitutes
    ]

    unmatched = sum(1 for p in starters + substitutes if not p.photo)
    if unmatched:
        logger.debug(
            "Team %s: %d of %d lineup players without roster match",
            feed.team_id, unmatched, len(starters) + len(substitutes),
        )

    return TeamLineup(
        team_id=feed.team_id,
        team_name=feed.team_name,
        formation=feed.formation,
        starters=starters,
        substitutes=substitutes,
    )
