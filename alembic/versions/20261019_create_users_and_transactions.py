"""create users and transactions tables

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and transactions tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('address', sa.String(42), nullable=False),
        sa.Column('sponsor', sa.String(42), nullable=False),
        sa.Column('is_registered', sa.Boolean(), nullable=False),
        sa.Column('registration_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('entry_fee', sa.DECIMAL(18, 6), nullable=False),
        sa.Column('current_level', sa.Integer(), nullable=False),
        sa.Column('referrals', sa.Integer(), nullable=False),
        sa.Column('balance', sa.DECIMAL(18, 6), nullable=False),
        sa.Column('donations_received', sa.Integer(), nullable=False),
        sa.Column('has_donated', sa.Boolean(), nullable=False),
        sa.Column('queue_position', sa.Integer(), nullable=False),
        sa.Column('is_in_queue', sa.Boolean(), nullable=False),
        sa.Column('locked_amount', sa.DECIMAL(36, 18), nullable=False),
        sa.Column('unlock_timestamp', sa.BigInteger(), nullable=False),
        sa.Column('help_balance', sa.DECIMAL(36, 18), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_address', 'users', ['address'], unique=True)
    op.create_index('ix_users_sponsor', 'users', ['sponsor'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('transaction_hash', sa.String(66), nullable=False),
        sa.Column('method', sa.String(32), nullable=False),
        sa.Column('block', sa.BigInteger(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('from_address', sa.String(42), nullable=False),
        sa.Column('to_address', sa.String(42), nullable=False),
        sa.Column('amount', sa.DECIMAL(36, 18), nullable=False),
        sa.Column('token', sa.String(10), nullable=False),
        sa.Column('level', sa.Integer(), nullable=True),
        sa.Column('reserve_pool', sa.DECIMAL(18, 6), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_transactions_transaction_hash', 'transactions', ['transaction_hash'], unique=True)
    op.create_index('ix_transactions_method', 'transactions', ['method'])
    op.create_index('ix_transactions_block', 'transactions', ['block'])
    op.create_index('ix_transactions_date', 'transactions', ['date'])
    op.create_index('ix_transactions_from_address', 'transactions', ['from_address'])
    op.create_index('ix_transactions_to_address', 'transactions', ['to_address'])
    op.create_index('ix_transactions_token', 'transactions', ['token'])


def downgrade() -> None:
    """Drop users and transactions tables."""
    op.drop_index('ix_transactions_token', table_name='transactions')
    op.drop_index('ix_transactions_to_address', table_name='transactions')
    op.drop_index('ix_transactions_from_address', table_name='transactions')
    op.drop_index('ix_transactions_date', table_name='transactions')
    op.drop_index('ix_transactions_block', table_name='transactions')
    op.drop_index('ix_transactions_method', table_name='transactions')
    op.drop_index('ix_transactions_transaction_hash', table_name='transactions')
    op.drop_table('transactions')

    op.drop_index('ix_users_sponsor', table_name='users')
    op.drop_index('ix_users_address', table_name='users')
    op.drop_table('users')
