"""
Debate lifecycle: which debate may exist for a match, and when.

A pre-match debate makes sense until the final whistle; a post-match debate
only once the result is final. Generation is idempotent per (match, type):
an active debate is returned as-is unless regeneration is requested, in
which case the old one is soft-deleted in the same transaction that inserts
its replacement.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from app.models.debate import Debate, DebateType
from app.schemas.debate import GeneratedDebate
from app.services.debate_data import DebateDataAggregator
from app.services.debate_generator import DebateGenerator
from app.services.debate_store import DebateStore
from app.services.match_data import MatchDataService
from app.utils.errors import ConflictError, NotFoundError
from app.utils.match_status import MatchPhase, classify_match_status

logger = logging.getLogger(__name__)


_ALLOWED_TYPES: dict[MatchPhase, frozenset[DebateType]] = {
    MatchPhase.not_started: frozenset({DebateType.pre_match}),
    MatchPhase.in_progress: frozenset({DebateType.pre_match}),
    MatchPhase.finished: frozenset({DebateType.post_match}),
    MatchPhase.called_off: frozenset(),
    MatchPhase.unknown: frozenset(),
}


@dataclass(slots=True)
class LifecycleDecision:
    allowed: bool
    phase: MatchPhase
    reason: str | None = None


def check_generation_allowed(status: str | None, debate_type: DebateType) -> LifecycleDecision:
    phase = classify_match_status(status)
    if debate_type in _ALLOWED_TYPES[phase]:
        return LifecycleDecision(allowed=True, phase=phase)

    if phase == MatchPhase.unknown:
        reason = f"Match status {status!r} is not recognized; debates are not generated for it"
    elif phase == MatchPhase.called_off:
        reason = (
            f"Match status {status!r} means the match was not played out; "
            "debates are not generated for it"
        )
    elif debate_type == DebateType.post_match:
        reason = "Post-match debates are only generated once the match has finished"
    else:
        reason = "Pre-match debates are not generated after the match has finished"
    return LifecycleDecision(allowed=False, phase=phase, reason=reason)


class GenerationStatus(str, enum.Enum):
    created = "created"
    regenerated = "regenerated"
    existing = "existing"
    skipped = "skipped"


@dataclass(slots=True)
class GenerationOutcome:
    status: GenerationStatus
    debate: Debate | None = None
    message: str | None = None


class DebateLifecycleController:
    def __init__(
        self,
        store: DebateStore,
        match_data: MatchDataService,
        aggregator: DebateDataAggregator,
        generator: DebateGenerator,
    ):
        self.store = store
        self.match_data = match_data
        self.aggregator = aggregator
        self.generator = generator

    async def generate(
        self,
        match_id: str,
        debate_type: DebateType,
        *,
        regenerate: bool = False,
    ) -> GenerationOutcome:
        """
        Return the active debate for (match, type), creating it if needed.

        Nothing is written unless a debate with at least one valid card has
        been generated: a lifecycle rejection comes back as a ``skipped``
        outcome, and UpstreamError / ContentGenerationError propagate with
        any previous debate left active.
        """
        existing = await self.store.list_active(match_id, debate_type)
        if existing and not regenerate:
            return GenerationOutcome(GenerationStatus.existing, existing[0])

        info = await self.match_data.get_fixture(match_id, fresh=True)
        if info is None:
            raise NotFoundError(f"Match {match_id} not found")

        decision = check_generation_allowed(info.status, debate_type)
        if not decision.allowed:
            logger.info(
                "Skipped %s debate for match %s (status %s): %s",
                debate_type.value, match_id, info.status, decision.reason,
            )
            return GenerationOutcome(GenerationStatus.skipped, message=decision.reason)

        match = await self.aggregator.aggregate(info)
        content = await self.generator.generate(match, debate_type, use_cache=not regenerate)

        try:
            debate = await self.store.replace_active_debate(match_id, debate_type, content)
        except ConflictError:
            winners = await self.store.list_active(match_id, debate_type)
            if not winners:
                raise
            logger.info(
                "Concurrent %s debate creation for match %s, returning debate %s",
                debate_type.value, match_id, winners[0].id,
            )
            return GenerationOutcome(GenerationStatus.existing, winners[0])

        if existing:
            logger.info(
                "Regenerated %s debate for match %s: %s -> %s",
                debate_type.value, match_id, existing[0].id, debate.id,
            )
            return GenerationOutcome(GenerationStatus.regenerated, debate)

        logger.info("Created %s debate %s for match %s", debate_type.value, debate.id, match_id)
        return GenerationOutcome(GenerationStatus.created, debate)

    async def preview(
        self,
        match_id: str,
        debate_type: DebateType,
    ) -> tuple[LifecycleDecision, GeneratedDebate | None]:
        """Generate content without persisting it."""
        info = await self.match_data.get_fixture(match_id, fresh=True)
        if info is None:
            raise NotFoundError(f"Match {match_id} not found")

        decision = check_generation_allowed(info.status, debate_type)
        if not decision.allowed:
            return decision, None

        match = await self.aggregator.aggregate(info)
        return decision, await self.generator.generate(match, debate_type)
