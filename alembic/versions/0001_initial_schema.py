"""initial_schema

Create tokens, alerts and scan_settings tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('address', sa.Text(), nullable=False, unique=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('symbol', sa.Text(), nullable=False),
        sa.Column('market_cap', sa.Float(), nullable=True),
        sa.Column('volume_24h', sa.Float(), nullable=True),
        sa.Column('liquidity', sa.Float(), nullable=True),
        sa.Column('price_change_24h', sa.Float(), nullable=True),
        sa.Column('holders', sa.Integer(), nullable=True),
        sa.Column('liquidity_locked', sa.Boolean(), nullable=False),
        sa.Column('mint_disabled', sa.Boolean(), nullable=False),
        sa.Column('freeze_disabled', sa.Boolean(), nullable=False),
        sa.Column('top10_holders', sa.Float(), nullable=True),
        sa.Column('contract_age', sa.Float(), nullable=True),
        sa.Column('risk_score', sa.Integer(), nullable=False),
        sa.Column('risk_level', sa.String(20), nullable=False),
        sa.Column('first_detected', sa.DateTime(), nullable=False),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_risk_level', 'tokens', ['risk_level'])
    op.create_index('idx_tokens_last_updated', 'tokens', ['last_updated'])

    op.create_table(
        'alerts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('token_address', sa.Text(), sa.ForeignKey('tokens.address'), nullable=False),
        sa.Column('alert_type', sa.String(30), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_alert_timestamp', 'alerts', ['timestamp'])
    op.create_index('idx_alert_type', 'alerts', ['alert_type'])

    op.create_table(
        'scan_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('min_cap', sa.Float(), nullable=True),
        sa.Column('max_cap', sa.Float(), nullable=True),
        sa.Column('min_volume', sa.Float(), nullable=True),
        sa.Column('min_liquidity', sa.Float(), nullable=True),
        sa.Column('liquidity_locked', sa.Boolean(), nullable=False),
        sa.Column('mint_disabled', sa.Boolean(), nullable=False),
        sa.Column('freeze_disabled', sa.Boolean(), nullable=False),
        sa.Column('top_holders_limit', sa.Float(), nullable=True),
        sa.Column('started_at', sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('scan_settings')
    op.drop_index('idx_alert_type', 'alerts')
    op.drop_index('idx_alert_timestamp', 'alerts')
    op.drop_table('alerts')
    op.drop_index('idx_tokens_last_updated', 'tokens')
    op.drop_index('idx_risk_level', 'tokens')
    op.drop_table('tokens')
