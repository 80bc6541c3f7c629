"""Persistence of debates, cards, votes, comments and engagement analytics."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

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
from app.models.user import User
from app.schemas.debate import GeneratedDebate, VoteCounts
from app.utils.errors import ConflictError
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


class DebateStore(Protocol):
    async def get_debate(self, debate_id: int, *, include_deleted: bool = False) -> Debate | None: ...

    async def list_active(self, match_id: str, debate_type: DebateType | None = None) -> list[Debate]: ...

    async def list_top(self, limit: int) -> list[Debate]: ...

    async def create_debate(
        self,
        match_id: str,
        debate_type: DebateType,
        headline: str,
        description: str | None = None,
        ai_generated: bool = False,
    ) -> Debate: ...

    async def replace_active_debate(
        self,
        match_id: str,
        debate_type: DebateType,
        content: GeneratedDebate,
    ) -> Debate: ...

    async def soft_delete(self, debate: Debate) -> Debate: ...

    async def restore(self, debate: Debate) -> Debate: ...

    async def hard_delete(self, debate_id: int) -> None: ...

    async def get_card(self, card_id: int) -> DebateCard | None: ...

    async def create_card(
        self,
        debate_id: int,
        stance: CardStance,
        title: str,
        description: str | None = None,
        ai_generated: bool = False,
    ) -> DebateCard: ...

    async def create_vote(self, card_id: int, user_id: int, vote_type: VoteType, emoji: str | None) -> Vote: ...

    async def delete_vote(self, card_id: int, user_id: int, vote_type: VoteType, emoji: str | None) -> bool: ...

    async def vote_counts(self, card_ids: Sequence[int]) -> dict[int, VoteCounts]: ...

    async def count_votes(self, debate_id: int) -> int: ...

    async def get_comment(self, comment_id: int) -> Comment | None: ...

    async def create_comment(
        self,
        debate_id: int,
        user_id: int,
        content: str,
        parent_comment_id: int | None = None,
    ) -> Comment: ...

    async def delete_comment(self, comment: Comment) -> None: ...

    async def list_comments(self, debate_id: int) -> list[tuple[Comment, User]]: ...

    async def count_comments(self, debate_id: int) -> int: ...

    async def upsert_analytics(
        self,
        debate_id: int,
        total_votes: int,
        total_comments: int,
        engagement_score: float,
    ) -> DebateAnalytics: ...


class SqlDebateStore:
    """DebateStore over an async SQLAlchemy session. Each write commits."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== Debates ====================

    async def get_debate(self, debate_id: int, *, include_deleted: bool = False) -> Debate | None:
        query = select(Debate).where(Debate.id == debate_id).execution_options(populate_existing=True)
        if not include_deleted:
            query = query.where(Debate.deleted_at.is_(None))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_active(self, match_id: str, debate_type: DebateType | None = None) -> list[Debate]:
        query = (
            select(Debate)
            .where(Debate.match_id == match_id, Debate.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        if debate_type is not None:
            query = query.where(Debate.debate_type == debate_type)
        result = await self.db.execute(query.order_by(Debate.created_at.desc(), Debate.id.desc()))
        return list(result.scalars().all())

    async def list_top(self, limit: int) -> list[Debate]:
        result = await self.db.execute(
            select(Debate)
            .outerjoin(DebateAnalytics, DebateAnalytics.debate_id == Debate.id)
            .where(Debate.deleted_at.is_(None))
            .order_by(DebateAnalytics.engagement_score.desc().nulls_last(), Debate.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_debate(
        self,
        match_id: str,
        debate_type: DebateType,
        headline: str,
        description: str | None = None,
        ai_generated: bool = False,
    ) -> Debate:
        debate = Debate(
            match_id=match_id,
            debate_type=debate_type,
            headline=headline,
            description=description,
            ai_generated=ai_generated,
            cards=[],
            analytics=DebateAnalytics(total_votes=0, total_comments=0, engagement_score=0.0),
        )
        self.db.add(debate)
        await self._commit(f"An active {debate_type.value} debate already exists for match {match_id}")
        return debate

    async def replace_active_debate(
        self,
        match_id: str,
        debate_type: DebateType,
        content: GeneratedDebate,
    ) -> Debate:
        """
        Soft-delete the active debate (if any) and insert a generated one,
        with its cards and zeroed analytics, in a single transaction.

        Raises ConflictError when a concurrent writer inserted an active
        debate for the same match and type first.
        """
        await self.db.execute(
            update(Debate)
            .where(
                Debate.match_id == match_id,
                Debate.debate_type == debate_type,
                Debate.deleted_at.is_(None),
            )
            .values(deleted_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        debate = Debate(
            match_id=match_id,
            debate_type=debate_type,
            headline=content.headline,
            description=content.description,
            ai_generated=True,
            cards=[
                DebateCard(
                    stance=card.stance,
                    title=card.title,
                    description=card.description,
                    ai_generated=True,
                )
                for card in content.cards
            ],
            analytics=DebateAnalytics(total_votes=0, total_comments=0, engagement_score=0.0),
        )
        self.db.add(debate)
        await self._commit(f"An active {debate_type.value} debate already exists for match {match_id}")
        return debate

    async def soft_delete(self, debate: Debate) -> Debate:
        debate.deleted_at = utcnow()
        await self.db.commit()
        return debate

    async def restore(self, debate: Debate) -> Debate:
        debate.deleted_at = None
        await self._commit(
            f"Another active {debate.debate_type.value} debate exists for match {debate.match_id}"
        )
        return debate

    async def hard_delete(self, debate_id: int) -> None:
        card_ids = select(DebateCard.id).where(DebateCard.debate_id == debate_id)
        await self.db.execute(delete(Vote).where(Vote.debate_card_id.in_(card_ids)))
        await self.db.execute(delete(Comment).where(Comment.debate_id == debate_id))
        await self.db.execute(delete(DebateAnalytics).where(DebateAnalytics.debate_id == debate_id))
        await self.db.execute(delete(DebateCard).where(DebateCard.debate_id == debate_id))
        await self.db.execute(delete(Debate).where(Debate.id == debate_id))
        await self.db.commit()
        self.db.expunge_all()

    # ==================== Cards ====================

    async def get_card(self, card_id: int) -> DebateCard | None:
        result = await self.db.execute(select(DebateCard).where(DebateCard.id == card_id))
        return result.scalar_one_or_none()

    async def create_card(
        self,
        debate_id: int,
        stance: CardStance,
        title: str,
        description: str | None = None,
        ai_generated: bool = False,
    ) -> DebateCard:
        card = DebateCard(
            debate_id=debate_id,
            stance=stance,
            title=title,
            description=description,
            ai_generated=ai_generated,
        )
        self.db.add(card)
        await self.db.commit()
        return card

    # ==================== Votes ====================

    async def create_vote(self, card_id: int, user_id: int, vote_type: VoteType, emoji: str | None) -> Vote:
        vote = Vote(
            debate_card_id=card_id,
            user_id=user_id,
            vote_type=vote_type,
            emoji=emoji or "",
        )
        self.db.add(vote)
        await self._commit("Vote already exists")
        return vote

    async def delete_vote(self, card_id: int, user_id: int, vote_type: VoteType, emoji: str | None) -> bool:
        result = await self.db.execute(
            delete(Vote).where(
                Vote.debate_card_id == card_id,
                Vote.user_id == user_id,
                Vote.vote_type == vote_type,
                Vote.emoji == (emoji or ""),
            )
        )
        await self.db.commit()
        return result.rowcount > 0

    async def vote_counts(self, card_ids: Sequence[int]) -> dict[int, VoteCounts]:
        counts = {card_id: VoteCounts() for card_id in card_ids}
        if not card_ids:
            return counts

        result = await self.db.execute(
            select(Vote.debate_card_id, Vote.vote_type, Vote.emoji, func.count(Vote.id))
            .where(Vote.debate_card_id.in_(card_ids))
            .group_by(Vote.debate_card_id, Vote.vote_type, Vote.emoji)
        )
        for card_id, vote_type, emoji, count in result.all():
            entry = counts[card_id]
            if vote_type == VoteType.upvote:
                entry.upvotes += count
            elif vote_type == VoteType.downvote:
                entry.downvotes += count
            elif emoji:
                entry.emojis[emoji] = count
        return counts

    async def count_votes(self, debate_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Vote.id))
            .join(DebateCard, DebateCard.id == Vote.debate_card_id)
            .where(DebateCard.debate_id == debate_id)
        )
        return result.scalar_one()

    # ==================== Comments ====================

    async def get_comment(self, comment_id: int) -> Comment | None:
        result = await self.db.execute(select(Comment).where(Comment.id == comment_id))
        return result.scalar_one_or_none()

    async def create_comment(
        self,
        debate_id: int,
        user_id: int,
        content: str,
        parent_comment_id: int | None = None,
    ) -> Comment:
        comment = Comment(
            debate_id=debate_id,
            user_id=user_id,
            content=content,
            parent_comment_id=parent_comment_id,
        )
        self.db.add(comment)
        await self.db.commit()
        return comment

    async def delete_comment(self, comment: Comment) -> None:
        # Replies go with their parent.
        await self.db.execute(delete(Comment).where(Comment.parent_comment_id == comment.id))
        await self.db.delete(comment)
        await self.db.commit()

    async def list_comments(self, debate_id: int) -> list[tuple[Comment, User]]:
        result = await self.db.execute(
            select(Comment, User)
            .join(User, User.id == Comment.user_id)
            .where(Comment.debate_id == debate_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return [(comment, user) for comment, user in result.all()]

    async def count_comments(self, debate_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Comment.id)).where(Comment.debate_id == debate_id)
        )
        return result.scalar_one()

    # ==================== Analytics ====================

    async def upsert_analytics(
        self,
        debate_id: int,
        total_votes: int,
        total_comments: int,
        engagement_score: float,
    ) -> DebateAnalytics:
        result = await self.db.execute(
            select(DebateAnalytics).where(DebateAnalytics.debate_id == debate_id)
        )
        analytics = result.scalar_one_or_none()
        if analytics is None:
            analytics = DebateAnalytics(debate_id=debate_id)
            self.db.add(analytics)

        analytics.total_votes = total_votes
        analytics.total_comments = total_comments
        analytics.engagement_score = engagement_score
        analytics.updated_at = utcnow()
        await self.db.commit()
        return analytics

    async def _commit(self, conflict_message: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(conflict_message) from exc
