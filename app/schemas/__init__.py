from app.schemas.common import MessageResponse, OkResponse
from app.schemas.lineup import MatchLineup, PlayerRecord, TeamLineup
from app.schemas.match import LeagueSummary, MatchData, MatchInfo, MatchStats
from app.schemas.debate import (
    CommentResponse,
    DebateCardResponse,
    DebateResponse,
    GeneratedDebate,
    GenerationResponse,
    VoteResponse,
)
from app.schemas.user import UserCreatedResponse, UserResponse

__all__ = [
    "MessageResponse",
    "OkResponse",
    "MatchLineup",
    "PlayerRecord",
    "TeamLineup",
    "LeagueSummary",
    "MatchData",
    "MatchInfo",
    "MatchStats",
    "CommentResponse",
    "DebateCardResponse",
    "DebateResponse",
    "GeneratedDebate",
    "GenerationResponse",
    "VoteResponse",
    "UserCreatedResponse",
    "UserResponse",
]
