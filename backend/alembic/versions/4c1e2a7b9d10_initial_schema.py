"""initial schema: users, spending_categories, transactions

Revision ID: 4c1e2a7b9d10
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1e2a7b9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('income', sa.Numeric(12, 2), nullable=True),
        sa.Column('total_budget', sa.Numeric(12, 2), nullable=True),
        sa.Column('current_total', sa.Numeric(12, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'spending_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('total_budget_percent', sa.Numeric(5, 2), nullable=True),
        sa.Column('total_budget_number', sa.Numeric(12, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'name', name='uq_spending_categories_user_name'),
    )
    op.create_index('ix_spending_categories_id', 'spending_categories', ['id'])
    op.create_index('ix_spending_categories_user_id', 'spending_categories', ['user_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('spending_categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('item_purchased', sa.String(255), nullable=False),
        sa.Column('cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('time', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('plaid_category', sa.String(255), nullable=True),
    )
    op.create_index('ix_transactions_id', 'transactions', ['id'])
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_category_id', 'transactions', ['category_id'])


def downgrade() -> None:
    op.drop_table('transactions')
    op.drop_table('spending_categories')
    op.drop_table('users')
