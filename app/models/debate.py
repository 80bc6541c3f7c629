import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.sql_types import ID_SQL_TYPE
from app.utils.timestamps import utcnow


class DebateType(str, enum.Enum):
    pre_match = "pre_match"
    post_match = "post_match"


class CardStance(str, enum.Enum):
    agree = "agree"
    disagree = "disagree"
    wildcard = "wildcard"


class VoteType(str, enum.Enum):
    upvote = "upvote"
    downvote = "downvote"
    emoji = "emoji"


class Debate(Base):
    __tablename__ = "debates"
    __table_args__ = (
        # At most one live debate per match and type; soft-deleted rows are exempt.
        Index(
            "uq_debates_active_match_type",
            "match_id",
            "debate_type",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(ID_SQL_TYPE, primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    debate_type: Mapped[DebateType] = mapped_column(
        Enum(DebateType, name="debate_type"), nullable=False
    )
    headline: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    ai_generated: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    cards: Mapped[list["DebateCard"]] = relationship(
        "DebateCard",
        back_populates="debate",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="DebateCard.id",
    )
    analytics: Mapped["DebateAnalytics | None"] = relationship(
        "DebateAnalytics",
        back_populates="debate",
        cascade="all, delete-orphan",
        lazy="selectin",
        uselist=False,
    )


class DebateCard(Base):
    __tablename__ = "debate_cards"

    id: Mapped[int] = mapped_column(ID_SQL_TYPE, primary_key=True, autoincrement=True)
    debate_id: Mapped[int] = mapped_column(
        ID_SQL_TYPE, ForeignKey("debates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stance: Mapped[CardStance] = mapped_column(Enum(CardStance, name="card_stance"), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    ai_generated: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    debate: Mapped["Debate"] = relationship("Debate", back_populates="cards")


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint(
            "debate_card_id", "user_id", "vote_type", "emoji",
            name="uq_votes_card_user_type_emoji",
        ),
    )

    id: Mapped[int] = mapped_column(ID_SQL_TYPE, primary_key=True, autoincrement=True)
    debate_card_id: Mapped[int] = mapped_column(
        ID_SQL_TYPE, ForeignKey("debate_cards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ID_SQL_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vote_type: Mapped[VoteType] = mapped_column(Enum(VoteType, name="vote_type"), nullable=False)
    # Empty for upvote/downvote so the unique constraint never sees NULL.
    emoji: Mapped[str] = mapped_column(String(16), nullable=False, default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(ID_SQL_TYPE, primary_key=True, autoincrement=True)
    debate_id: Mapped[int] = mapped_column(
        ID_SQL_TYPE, ForeignKey("debates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_comment_id: Mapped[int | None] = mapped_column(
        ID_SQL_TYPE, ForeignKey("comments.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[int] = mapped_column(
        ID_SQL_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class DebateAnalytics(Base):
    """Derived engagement counters, recomputed from votes and comments."""
    __tablename__ = "debate_analytics"

    id: Mapped[int] = mapped_column(ID_SQL_TYPE, primary_key=True, autoincrement=True)
    debate_id: Mapped[int] = mapped_column(
        ID_SQL_TYPE,
        ForeignKey("debates.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    total_votes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    total_comments: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    engagement_score: Mapped[float] = mapped_column(Float, default=0.0, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    debate: Mapped["Debate"] = relationship("Debate", back_populates="analytics")
