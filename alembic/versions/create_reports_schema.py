"""create users issues xp_transactions

Initial schema: users with XP balances, reported issues with priority rating,
and the XP transaction log used for reconciliation.

Revision ID: create_reports_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'create_reports_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('role', sa.Enum('citizen', 'ngo', name='userrole'), nullable=False),
        sa.Column('xp_points', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_name', 'users', ['name'])
    op.create_index('ix_users_xp_points', 'users', ['xp_points'])

    op.create_table(
        'issues',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.String(length=4000), nullable=False),
        sa.Column('severity', sa.Enum('low', 'medium', 'high', name='severity'), nullable=False),
        sa.Column('location', sa.String(length=300), nullable=False),
        sa.Column('status', sa.Enum('pending', 'solved', 'rejected', name='issuestatus'), nullable=False),
        sa.Column('reporter_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('solver_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('image_url', sa.String(length=2000), nullable=True),
        sa.Column('solution_image_url', sa.String(length=2000), nullable=True),
        sa.Column('priority_rating', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('solved_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_issues_title', 'issues', ['title'])
    op.create_index('ix_issues_severity', 'issues', ['severity'])
    op.create_index('ix_issues_status', 'issues', ['status'])
    op.create_index('ix_issues_reporter_id', 'issues', ['reporter_id'])
    op.create_index('ix_issues_priority_rating', 'issues', ['priority_rating'])
    op.create_index('ix_issues_created_at', 'issues', ['created_at'])
    op.create_index('ix_issues_status_priority', 'issues', ['status', 'priority_rating'])

    op.create_table(
        'xp_transactions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('issue_id', sa.Integer(), sa.ForeignKey('issues.id', ondelete='SET NULL'), nullable=True),
        sa.Column('delta', sa.Integer(), nullable=False),
        sa.Column('reason', sa.String(length=30), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_xp_transactions_user_id', 'xp_transactions', ['user_id'])
    op.create_index('ix_xp_transactions_applied_at', 'xp_transactions', ['applied_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('xp_transactions')
    op.drop_table('issues')
    op.drop_table('users')
    sa.Enum(name='issuestatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='severity').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
