"""create subscriptions table

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2025-09-01
"""
from alembic import op
import sqlalchemy as sa


revision = 'a1c2e3f4b5d6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'subscriptions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('service_name', sa.String(255), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('price >= 0', name='ck_subscriptions_price_non_negative'),
        sa.CheckConstraint('start_date <= end_date', name='ck_subscriptions_period'),
    )
    op.create_index('ix_subscriptions_user_service', 'subscriptions', ['user_id', 'service_name'])


def downgrade():
    op.drop_index('ix_subscriptions_user_service', table_name='subscriptions')
    op.drop_table('subscriptions')
