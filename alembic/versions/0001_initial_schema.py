"""create users, athletes, sessions, tags and session_tags

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-01-12 09:30:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TAG_CATEGORIES = (
    'TECHNICAL_ERROR',
    'TECHNICAL_STRENGTH',
    'TACTICAL_DECISION',
    'OFFENSIVE',
    'DEFENSIVE',
    'PHYSICAL',
    'MENTAL',
)
TAG_OUTCOMES = ('SUCCESS', 'FAIL')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'athletes',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('user_id', name='uq_athletes_user_id'),
    )
    op.create_index('ix_athletes_id', 'athletes', ['id'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('athlete_id', sa.Integer(), sa.ForeignKey('athletes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('video_url', sa.String(length=1024), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_sessions_id', 'sessions', ['id'])
    op.create_index('ix_sessions_athlete_created', 'sessions', ['athlete_id', 'created_at'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.Enum(*TAG_CATEGORIES, name='tagcategory'), nullable=True),
        sa.Column('outcome', sa.Enum(*TAG_OUTCOMES, name='tagoutcome'), nullable=True),
        sa.Column('athlete_id', sa.Integer(), sa.ForeignKey('athletes.id', ondelete='CASCADE'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('athlete_id', 'name', name='uq_tags_athlete_name'),
    )
    op.create_index('ix_tags_id', 'tags', ['id'])
    op.create_index('ix_tags_athlete_id', 'tags', ['athlete_id'])

    op.create_table(
        'session_tags',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tags.id', ondelete='CASCADE'), nullable=False),
        sa.Column('timestamp_sec', sa.Integer(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_session_tags_id', 'session_tags', ['id'])
    op.create_index('ix_session_tags_session_id', 'session_tags', ['session_id'])
    op.create_index('ix_session_tags_tag_id', 'session_tags', ['tag_id'])


def downgrade() -> None:
    op.drop_index('ix_session_tags_tag_id', table_name='session_tags')
    op.drop_index('ix_session_tags_session_id', table_name='session_tags')
    op.drop_index('ix_session_tags_id', table_name='session_tags')
    op.drop_table('session_tags')

    op.drop_index('ix_tags_athlete_id', table_name='tags')
    op.drop_index('ix_tags_id', table_name='tags')
    op.drop_table('tags')

    op.drop_index('ix_sessions_athlete_created', table_name='sessions')
    op.drop_index('ix_sessions_id', table_name='sessions')
    op.drop_table('sessions')

    op.drop_index('ix_athletes_id', table_name='athletes')
    op.drop_table('athletes')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    sa.Enum(name='tagoutcome').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='tagcategory').drop(op.get_bind(), checkfirst=True)
