"""
Initial schema for KanbanCord

Revision ID: 000001_initial
Revises: 
Create Date: 2026-10-19 10:00:00
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '000001_initial'
down_revision = None
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # users
    op.create_table(
        'users',
        sa.Column('user_id', sa.String(length=32), primary_key=True),
        *_timestamps(),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('global_name', sa.String(length=100), nullable=True),
        sa.Column('user_avatar', sa.String(length=500), nullable=True),
        sa.Column('guild_ids', JSONType, nullable=False),
    )

    # guilds
    op.create_table(
        'guilds',
        sa.Column('guild_id', sa.String(length=32), primary_key=True),
        *_timestamps(),
        sa.Column('guild_name', sa.String(length=100), nullable=False),
        sa.Column('guild_owner_id', sa.String(length=32), nullable=False),
        sa.Column('settings', JSONType, nullable=False),
        sa.Column('role_ids', JSONType, nullable=False),
        sa.Column('board_ids', JSONType, nullable=False),
    )

    # guild_members
    op.create_table(
        'guild_members',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column('guild_id', sa.String(length=32), sa.ForeignKey('guilds.guild_id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('role_ids', JSONType, nullable=False),
        sa.UniqueConstraint('guild_id', 'user_id', name='uq_guild_member'),
    )
    op.create_index('ix_guild_members_guild_id', 'guild_members', ['guild_id'])
    op.create_index('ix_guild_members_user_id', 'guild_members', ['user_id'])

    # roles
    op.create_table(
        'roles',
        sa.Column('role_id', sa.String(length=32), primary_key=True),
        *_timestamps(),
        sa.Column('role_name', sa.String(length=100), nullable=False),
        sa.Column('permissions', JSONType, nullable=False),
        sa.Column('guild_id', sa.String(length=32), sa.ForeignKey('guilds.guild_id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_roles_guild_id', 'roles', ['guild_id'])

    # boards
    op.create_table(
        'boards',
        sa.Column('board_id', sa.String(length=64), primary_key=True),
        *_timestamps(),
        sa.Column('board_name', sa.String(length=200), nullable=False),
        sa.Column('created_by_user_id', sa.String(length=32), nullable=False),
        sa.Column('guild_id', sa.String(length=32), nullable=False),
        sa.Column('column_ids', JSONType, nullable=False),
        sa.Column('permissions', JSONType, nullable=False),
    )
    op.create_index('ix_boards_guild_id', 'boards', ['guild_id'])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_index('ix_boards_guild_id', table_name='boards')
    op.drop_table('boards')
    op.drop_index('ix_roles_guild_id', table_name='roles')
    op.drop_table('roles')
    op.drop_index('ix_guild_members_user_id', table_name='guild_members')
    op.drop_index('ix_guild_members_guild_id', table_name='guild_members')
    op.drop_table('guild_members')
    op.drop_table('guilds')
    op.drop_table('users')
