"""Pydantic schemas for debates, cards, votes, comments and generation."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.debate import CardStance, DebateType, VoteType


# ==================== Generated content ====================

class GeneratedCard(BaseModel):
    stance: CardStance
    title: str
    description: str = ""


class GeneratedDebate(BaseModel):
    """Validated debate content produced by the LLM."""
    headline: str
    description: str = ""
    cards: list[GeneratedCard] = []


# ==================== Requests ====================

class DebateCreate(BaseModel):
    match_id: str = Field(min_length=1)
    debate_type: DebateType
    headline: str = Field(min_length=1)
    description: str | None = None
    ai_generated: bool = False


class DebateCardCreate(BaseModel):
    debate_id: int
    stance: CardStance
    title: str = Field(min_length=1)
    description: str | None = None
    ai_generated: bool = False


class VoteCreate(BaseModel):
    debate_card_id: int
    vote_type: VoteType
    emoji: str | None = None

    @model_validator(mode="after")
    def check_emoji(self):
        if self.vote_type == VoteType.emoji:
            if not self.emoji:
                raise ValueError("emoji is required for emoji votes")
        else:
            self.emoji = None
        return self


class CommentCreate(BaseModel):
    debate_id: int
    parent_comment_id: int | None = None
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be empty")
        return value


class GenerateDebateRequest(BaseModel):
    match_id: str = Field(min_length=1)
    debate_type: DebateType
    force_regenerate: bool = False


# ==================== Responses ====================

class VoteCounts(BaseModel):
    upvotes: int = 0
    downvotes: int = 0
    emojis: dict[str, int] = {}


class DebateCardResponse(BaseModel):
    id: int
    debate_id: int
    stance: CardStance
    title: str
    description: str | None = None
    ai_generated: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    vote_counts: VoteCounts = VoteCounts()

    class Config:
        from_attributes = True


class DebateAnalyticsResponse(BaseModel):
    debate_id: int
    total_votes: int = 0
    total_comments: int = 0
    engagement_score: float = 0.0
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class DebateResponse(BaseModel):
    id: int
    match_id: str
    debate_type: DebateType
    headline: str
    description: str | None = None
    ai_generated: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    cards: list[DebateCardResponse] = []
    analytics: DebateAnalyticsResponse | None = None

    class Config:
        from_attributes = True


class VoteResponse(BaseModel):
    id: int
    debate_card_id: int
    user_id: int
    vote_type: VoteType
    emoji: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class CommentResponse(BaseModel):
    id: int
    debate_id: int
    parent_comment_id: int | None = None
    user_id: int
    user_first_name: str = ""
    user_last_name: str = ""
    content: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class GenerationResponse(BaseModel):
    """Outcome of a generate request.

    ``skipped`` is informational: the match is in a phase that does not
    admit this debate type, nothing was written.
    """
    status: Literal["created", "regenerated", "existing", "skipped"]
    message: str | None = None
    debate: DebateResponse | None = None


class GenerationHealthResponse(BaseModel):
    status: str
    openai_configured: bool
    football_api_configured: bool
    cache_available: bool


class GenerationPreviewResponse(BaseModel):
    """Generated content that has not been persisted."""
    status: Literal["preview", "skipped"]
    message: str | None = None
    content: GeneratedDebate | None = None
