from app.models.user import User
from app.models.debate import (
    CardStance,
    Comment,
    Debate,
    DebateAnalytics,
    DebateCard,
    DebateType,
    Vote,
    VoteType,
)

__all__ = [
    "User",
    "Debate",
    "DebateCard",
    "DebateType",
    "CardStance",
    "Vote",
    "VoteType",
    "Comment",
    "DebateAnalytics",
]
