"""Create ambassador program tables and seed default tiers

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19

"""
from decimal import Decimal
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


DEFAULT_TIERS = [
    # (rank, name, min_referrals, min_sales, commission_rate, signup_bonus_points)
    (1, 'Member', 0, Decimal('0.00'), Decimal('0.0500'), 50),
    (2, 'Promoter', 5, Decimal('500.00'), Decimal('0.0750'), 75),
    (3, 'Ambassador', 15, Decimal('2000.00'), Decimal('0.1000'), 100),
    (4, 'Elite', 50, Decimal('10000.00'), Decimal('0.1500'), 150),
]


def upgrade() -> None:
    # Tier ladder
    tiers = op.create_table(
        'ambassador_tiers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('rank', sa.Integer(), nullable=False),
        sa.Column('min_referrals', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('min_sales', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('commission_rate', sa.DECIMAL(6, 4), nullable=False),
        sa.Column('signup_bonus_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('commission_rate >= 0 AND commission_rate <= 1', name='check_tier_commission_rate_range'),
        sa.CheckConstraint('min_referrals >= 0', name='check_tier_min_referrals_non_negative'),
        sa.CheckConstraint('min_sales >= 0', name='check_tier_min_sales_non_negative'),
        sa.CheckConstraint('signup_bonus_points >= 0', name='check_tier_signup_bonus_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ambassador_tiers_name', 'ambassador_tiers', ['name'], unique=True)
    op.create_index('ix_ambassador_tiers_rank', 'ambassador_tiers', ['rank'], unique=True)
    op.create_index('ix_ambassador_tiers_is_active', 'ambassador_tiers', ['is_active'])

    # Ambassadors and their balance snapshot
    op.create_table(
        'ambassadors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('referral_code', sa.String(20), nullable=True),
        sa.Column('lifetime_referral_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('lifetime_referred_sales', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('total_earnings', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('available_balance', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('bonus_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('available_balance >= 0', name='check_ambassador_available_balance_non_negative'),
        sa.CheckConstraint('lifetime_referral_count >= 0', name='check_ambassador_referral_count_non_negative'),
        sa.CheckConstraint('lifetime_referred_sales >= 0', name='check_ambassador_referred_sales_non_negative'),
        sa.CheckConstraint('bonus_points >= 0', name='check_ambassador_bonus_points_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ambassadors_user_id', 'ambassadors', ['user_id'], unique=True)
    op.create_index('ix_ambassadors_referral_code', 'ambassadors', ['referral_code'], unique=True)

    # Referred customers
    op.create_table(
        'referrals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ambassador_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('referral_code', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='inactive'),
        sa.Column('first_purchase_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['ambassador_id'], ['ambassadors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_referrals_ambassador_id', 'referrals', ['ambassador_id'])
    op.create_index('ix_referrals_customer_id', 'referrals', ['customer_id'], unique=True)
    op.create_index('idx_referrals_ambassador_status', 'referrals', ['ambassador_id', 'status'])

    # Payout requests (before the ledger, which references them)
    op.create_table(
        'ambassador_payout_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ambassador_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('payout_type', sa.String(20), nullable=False, server_default='store_credit'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('amount > 0', name='check_payout_amount_positive'),
        sa.CheckConstraint("payout_type IN ('store_credit', 'cash', 'points')", name='check_payout_type'),
        sa.CheckConstraint("status IN ('pending', 'approved', 'paid', 'cancelled')", name='check_payout_status'),
        sa.ForeignKeyConstraint(['ambassador_id'], ['ambassadors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ambassador_payout_requests_ambassador_id', 'ambassador_payout_requests', ['ambassador_id'])
    op.create_index('ix_ambassador_payout_requests_status', 'ambassador_payout_requests', ['status'])
    op.create_index('idx_payout_requests_ambassador_status', 'ambassador_payout_requests', ['ambassador_id', 'status'])

    # Append-only ledger
    op.create_table(
        'ambassador_ledger_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ambassador_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('related_transaction_id', sa.Integer(), nullable=True),
        sa.Column('payout_request_id', sa.Integer(), nullable=True),
        sa.Column('subtotal', sa.DECIMAL(12, 2), nullable=True),
        sa.Column('tier_name', sa.String(50), nullable=True),
        sa.Column('commission_rate', sa.DECIMAL(6, 4), nullable=True),
        sa.Column('shortfall', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("type IN ('accrual', 'reversal', 'redemption')", name='check_ledger_entry_type'),
        sa.CheckConstraint(
            "(type = 'accrual' AND amount >= 0) OR (type != 'accrual' AND amount <= 0)",
            name='check_ledger_entry_amount_sign'
        ),
        sa.CheckConstraint('shortfall >= 0', name='check_ledger_entry_shortfall_non_negative'),
        sa.ForeignKeyConstraint(['ambassador_id'], ['ambassadors.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['payout_request_id'], ['ambassador_payout_requests.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ambassador_ledger_entries_ambassador_id', 'ambassador_ledger_entries', ['ambassador_id'])
    op.create_index('idx_ledger_ambassador_created', 'ambassador_ledger_entries', ['ambassador_id', 'created_at'])
    op.create_index('idx_ledger_transaction_type', 'ambassador_ledger_entries', ['related_transaction_id', 'type'])

    # Seed default tier ladder
    op.bulk_insert(
        tiers,
        [
            {
                'rank': rank,
                'name': name,
                'min_referrals': min_referrals,
                'min_sales': min_sales,
                'commission_rate': commission_rate,
                'signup_bonus_points': signup_bonus_points,
                'is_active': True,
            }
            for rank, name, min_referrals, min_sales, commission_rate, signup_bonus_points in DEFAULT_TIERS
        ],
    )


def downgrade() -> None:
    op.drop_index('idx_ledger_transaction_type', table_name='ambassador_ledger_entries')
    op.drop_index('idx_ledger_ambassador_created', table_name='ambassador_ledger_entries')
    op.drop_index('ix_ambassador_ledger_entries_ambassador_id', table_name='ambassador_ledger_entries')
    op.drop_table('ambassador_ledger_entries')

    op.drop_index('idx_payout_requests_ambassador_status', table_name='ambassador_payout_requests')
    op.drop_index('ix_ambassador_payout_requests_status', table_name='ambassador_payout_requests')
    op.drop_index('ix_ambassador_payout_requests_ambassador_id', table_name='ambassador_payout_requests')
    op.drop_table('ambassador_payout_requests')

    op.drop_index('idx_referrals_ambassador_status', table_name='referrals')
    op.drop_index('ix_referrals_customer_id', table_name='referrals')
    op.drop_index('ix_referrals_ambassador_id', table_name='referrals')
    op.drop_table('referrals')

    op.drop_index('ix_ambassadors_referral_code', table_name='ambassadors')
    op.drop_index('ix_ambassadors_user_id', table_name='ambassadors')
    op.drop_table('ambassadors')

    op.drop_index('ix_ambassador_tiers_is_active', table_name='ambassador_tiers')
    op.drop_index('ix_ambassador_tiers_rank', table_name='ambassador_tiers')
    op.drop_index('ix_ambassador_tiers_name', table_name='ambassador_tiers')
    op.drop_table('ambassador_tiers')
