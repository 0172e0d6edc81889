"""Create users and challenges tables

Revision ID: 001
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('wallet_address', sa.String(length=64), nullable=False),
        sa.Column('chain', sa.String(length=32), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=True),
        sa.Column('nickname', sa.String(length=128), nullable=True),
        sa.Column('avatar_cid', sa.String(length=128), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('wallet_address', 'chain', name='uq_users_wallet_chain'),
        sa.UniqueConstraint('username'),
    )
    op.create_index('ix_users_wallet_address', 'users', ['wallet_address'])

    # Create challenges table
    op.create_table('challenges',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('wallet_address', sa.String(length=64), nullable=False),
        sa.Column('chain', sa.String(length=32), nullable=False),
        sa.Column('nonce', sa.String(length=64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nonce'),
    )
    op.create_index('ix_challenges_wallet_address', 'challenges', ['wallet_address'])
    op.create_index('ix_challenges_expires_at', 'challenges', ['expires_at'])


def downgrade() -> None:
    op.drop_index('ix_challenges_expires_at', table_name='challenges')
    op.drop_index('ix_challenges_wallet_address', table_name='challenges')
    op.drop_table('challenges')

    op.drop_index('ix_users_wallet_address', table_name='users')
    op.drop_table('users')
