"""
Credential tables: scoped provider accounts and the legacy gateway table.

Just the data structure - no business logic or class methods.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, String

from .db_base import JSON, TimestampMixin, UUIDMixin, utc_now
from .db_config import Base


class PaymentProviderAccount(Base, UUIDMixin, TimestampMixin):
    """Credential set for one provider at one scope and environment."""

    __tablename__ = "payment_provider_accounts"

    provider = Column(String(50), nullable=False, index=True)
    scope_type = Column(String(20), nullable=False)
    scope_id = Column(String(100), nullable=True)
    # scope_id or "" - unique indexes treat NULLs as distinct, so platform
    # rows need a non-null value to collide on the natural key
    scope_key = Column(String(100), nullable=False, default="")
    environment = Column(String(20), nullable=False, default="production")
    integration_type = Column(String(50), nullable=False, default="online")
    credential_payload = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default="active")
    display_name = Column(String(200), nullable=True)

    __table_args__ = (
        Index(
            "ux_provider_account_natural_key",
            "provider",
            "scope_type",
            "scope_key",
            "environment",
            unique=True,
        ),
        CheckConstraint(
            "scope_type IN ('platform', 'partner', 'tenant')",
            name="ck_provider_account_scope_type",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive', 'error')",
            name="ck_provider_account_status",
        ),
    )


class LegacyPaymentGateway(Base, UUIDMixin):
    """Unscoped gateway credential predating provider accounts. Read-only here."""

    __tablename__ = "payment_gateways"

    provider = Column(String(50), nullable=False, index=True)
    api_key_masked = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
