"""create_payment_credential_tables

Revision ID: 4c1f2e9a7b30
Revises:
Create Date: 2026-10-19 10:12:41.218806

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1f2e9a7b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create scoped provider accounts and the legacy gateways table."""
    op.create_table(
        'payment_provider_accounts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=False),
        sa.Column('scope_type', sa.String(length=20), nullable=False),
        sa.Column('scope_id', sa.String(length=100), nullable=True),
        sa.Column('scope_key', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('environment', sa.String(length=20), nullable=False, server_default='production'),
        sa.Column('integration_type', sa.String(length=50), nullable=False, server_default='online'),
        sa.Column('credential_payload', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('display_name', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "scope_type IN ('platform', 'partner', 'tenant')",
            name='ck_provider_account_scope_type',
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'error')",
            name='ck_provider_account_status',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_payment_provider_accounts_provider'),
        'payment_provider_accounts',
        ['provider'],
        unique=False,
    )
    # Natural key; scope_key is '' for platform rows so they collide
    op.create_index(
        'ux_provider_account_natural_key',
        'payment_provider_accounts',
        ['provider', 'scope_type', 'scope_key', 'environment'],
        unique=True,
    )

    op.create_table(
        'payment_gateways',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=False),
        sa.Column('api_key_masked', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_payment_gateways_provider'), 'payment_gateways', ['provider'], unique=False
    )


def downgrade() -> None:
    """Drop both credential tables."""
    op.drop_index(op.f('ix_payment_gateways_provider'), table_name='payment_gateways')
    op.drop_table('payment_gateways')
    op.drop_index('ux_provider_account_natural_key', table_name='payment_provider_accounts')
    op.drop_index(
        op.f('ix_payment_provider_accounts_provider'), table_name='payment_provider_accounts'
    )
    op.drop_table('payment_provider_accounts')
