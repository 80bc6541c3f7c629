import logging

from app.models.debate import DebateAnalytics
from app.services.debate_store import DebateStore

logger = logging.getLogger(__name__)

COMMENT_WEIGHT = 2


def engagement_score(total_votes: int, total_comments: int) -> float:
    """Votes count once, comments twice."""
    return float(total_votes + COMMENT_WEIGHT * total_comments)


async def recalculate_engagement(store: DebateStore, debate_id: int) -> DebateAnalytics:
    """Recount votes (across all cards) and comments and store the snapshot.

    Always recomputed from the source rows, never incremented, so repeated
    calls converge on the same value.
    """
    total_votes = await store.count_votes(debate_id)
    total_comments = await store.count_comments(debate_id)
    score = engagement_score(total_votes, total_comments)
    logger.debug(
        "Debate %s engagement: votes=%d comments=%d score=%.1f",
        debate_id, total_votes, total_comments, score,
    )
    return await store.upsert_analytics(debate_id, total_votes, total_comments, score)
