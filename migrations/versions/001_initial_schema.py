"""Create SkillFest participant, override and application tables.

Creates skillfest_users and pull_requests for synced GitHub activity,
manual_ranks and leaderboard_settings for administrator overrides, and
fresher_applications for the application form.

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


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'skillfest_users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('login', sa.String(255), nullable=False),
        sa.Column('last_active', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_prs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('merged_prs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('org_prs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('org_merged_prs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('contributions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('level', sa.String(50), nullable=False, server_default='Newcomer'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('login'),
    )
    op.create_index('idx_skillfest_users_points', 'skillfest_users', ['points'])

    op.create_table(
        'pull_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('github_id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('state', sa.String(20), nullable=False),
        sa.Column('opened_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('merged_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_org', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['skillfest_users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_pull_requests_user', 'pull_requests', ['user_id'])
    op.create_index('idx_pull_requests_user_github_id', 'pull_requests', ['user_id', 'github_id'])

    op.create_table(
        'manual_ranks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('manual_rank', sa.Integer(), nullable=True),
        sa.Column('hidden', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('rank_updated_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )

    op.create_table(
        'leaderboard_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('visible', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'fresher_applications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('github_url', sa.Text(), nullable=False),
        sa.Column('past_experience', sa.Text(), nullable=True),
        sa.Column('project_link_1', sa.Text(), nullable=True),
        sa.Column('project_link_2', sa.Text(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    op.drop_table('fresher_applications')
    op.drop_table('leaderboard_settings')
    op.drop_table('manual_ranks')
    op.drop_index('idx_pull_requests_user_github_id', table_name='pull_requests')
    op.drop_index('idx_pull_requests_user', table_name='pull_requests')
    op.drop_table('pull_requests')
    op.drop_index('idx_skillfest_users_points', table_name='skillfest_users')
    op.drop_table('skillfest_users')
