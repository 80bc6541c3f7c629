"""Debates schema

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

debate_type = sa.Enum('pre_match', 'post_match', name='debate_type')
card_stance = sa.Enum('agree', 'disagree', 'wildcard', name='card_stance')
vote_type = sa.Enum('upvote', 'downvote', 'emoji', name='vote_type')


def upgrade() -> None:
    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('firstname', sa.String(length=100), nullable=False),
        sa.Column('lastname', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Debates
    op.create_table(
        'debates',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('match_id', sa.String(length=50), nullable=False),
        sa.Column('debate_type', debate_type, nullable=False),
        sa.Column('headline', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('ai_generated', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_debates_match_id', 'debates', ['match_id'], unique=False)
    # One active debate per (match, type); soft-deleted rows are outside the index
    op.create_index(
        'uq_debates_active_match_type',
        'debates',
        ['match_id', 'debate_type'],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
    )

    # Debate cards
    op.create_table(
        'debate_cards',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('debate_id', sa.BigInteger(), nullable=False),
        sa.Column('stance', card_stance, nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('ai_generated', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['debate_id'], ['debates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_debate_cards_debate_id', 'debate_cards', ['debate_id'], unique=False)

    # Votes
    op.create_table(
        'votes',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('debate_card_id', sa.BigInteger(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('vote_type', vote_type, nullable=False),
        sa.Column('emoji', sa.String(length=16), server_default='', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['debate_card_id'], ['debate_cards.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'debate_card_id', 'user_id', 'vote_type', 'emoji',
            name='uq_votes_card_user_type_emoji',
        ),
    )
    op.create_index('ix_votes_debate_card_id', 'votes', ['debate_card_id'], unique=False)
    op.create_index('ix_votes_user_id', 'votes', ['user_id'], unique=False)

    # Comments
    op.create_table(
        'comments',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('debate_id', sa.BigInteger(), nullable=False),
        sa.Column('parent_comment_id', sa.BigInteger(), nullable=True),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['debate_id'], ['debates.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_comment_id'], ['comments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_debate_id', 'comments', ['debate_id'], unique=False)
    op.create_index('ix_comments_parent_comment_id', 'comments', ['parent_comment_id'], unique=False)
    op.create_index('ix_comments_user_id', 'comments', ['user_id'], unique=False)

    # Engagement counters
    op.create_table(
        'debate_analytics',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('debate_id', sa.BigInteger(), nullable=False),
        sa.Column('total_votes', sa.Integer(), server_default='0', nullable=True),
        sa.Column('total_comments', sa.Integer(), server_default='0', nullable=True),
        sa.Column('engagement_score', sa.Float(), server_default='0', nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['debate_id'], ['debates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('debate_id'),
    )


def downgrade() -> None:
    op.drop_table('debate_analytics')
    op.drop_index('ix_comments_user_id', table_name='comments')
    op.drop_index('ix_comments_parent_comment_id', table_name='comments')
    op.drop_index('ix_comments_debate_id', table_name='comments')
    op.drop_table('comments')
    op.drop_index('ix_votes_user_id', table_name='votes')
    op.drop_index('ix_votes_debate_card_id', table_name='votes')
    op.drop_table('votes')
    op.drop_index('ix_debate_cards_debate_id', table_name='debate_cards')
    op.drop_table('debate_cards')
    op.drop_index('uq_debates_active_match_type', table_name='debates')
    op.drop_index('ix_debates_match_id', table_name='debates')
    op.drop_table('debates')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    vote_type.drop(bind, checkfirst=True)
    card_stance.drop(bind, checkfirst=True)
    debate_type.drop(bind, checkfirst=True)
