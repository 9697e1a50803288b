"""Create games, game_participants and group_members tables

Revision ID: m001_create_registration
Revises:
Create Date: 2026-10-18

This migration creates the tables for game registration:
- games: scheduling and capacity root, versioned for optimistic locking
- game_participants: one registry entry per (game, user)
- group_members: group roles used for authorization
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'm001_create_registration'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'games',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('group_id', sa.String(), nullable=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('sport', sa.String(50), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('host_id', sa.String(), nullable=False),
        sa.Column('created_by', sa.String(), nullable=False),
        sa.Column('scheduled_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(11), nullable=False),

        # Capacity
        sa.Column('max_participants', sa.Integer(), nullable=True),
        sa.Column('min_participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('participant_ids', sa.JSON(), nullable=False),
        sa.Column('waitlist_ids', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),

        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),

        sa.CheckConstraint('current_participants >= 0', name='check_current_participants_positive'),
        sa.CheckConstraint(
            'max_participants IS NULL OR current_participants <= max_participants',
            name='check_participants_lte_max',
        ),
    )
    op.create_index('ix_games_group_id', 'games', ['group_id'])
    op.create_index('ix_games_scheduled_time', 'games', ['scheduled_time'])
    # Scorer history lookups: a group's games before a point in time, newest first
    op.create_index('idx_games_group_scheduled', 'games', ['group_id', 'scheduled_time'])

    op.create_table(
        'game_participants',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('game_id', sa.String(), sa.ForeignKey('games.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),  # No FK - users live in the identity provider
        sa.Column('status', sa.String(9), nullable=False),
        sa.Column('role', sa.String(9), nullable=False),
        sa.Column('is_guest', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('registered_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('game_id', 'user_id', name='unique_game_participant_user'),
    )
    op.create_index('ix_game_participants_game_id', 'game_participants', ['game_id'])
    op.create_index('ix_game_participants_user_id', 'game_participants', ['user_id'])
    op.create_index('ix_game_participants_registered_at', 'game_participants', ['registered_at'])

    op.create_check_constraint(
        'check_participant_status',
        'game_participants',
        "status IN ('Confirmed', 'Waitlist', 'Invited', 'Declined')"
    )

    op.create_table(
        'group_members',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('group_id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('role', sa.String(6), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.UniqueConstraint('group_id', 'user_id', name='unique_group_member_user'),
    )
    op.create_index('ix_group_members_group_id', 'group_members', ['group_id'])
    op.create_index('ix_group_members_user_id', 'group_members', ['user_id'])


def downgrade() -> None:
    op.drop_table('group_members')
    op.drop_table('game_participants')
    op.drop_table('games')
