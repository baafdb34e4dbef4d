"""
SQLAlchemy models and database wiring for the credential tables.
"""

from .db_base import JSON, TimestampMixin, UUIDMixin, new_uuid, utc_now
from .db_config import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    close_db,
    get_configured_database,
    get_db_manager,
    get_production_config,
    import_all_models,
    initialize_db,
    set_db_manager,
)
from .db_credential_models import LegacyPaymentGateway, PaymentProviderAccount

__all__ = [
    # Base definitions
    "Base",
    "JSON",
    "TimestampMixin",
    "UUIDMixin",
    "new_uuid",
    "utc_now",
    # Configuration
    "DatabaseConfig",
    "DatabaseManager",
    "close_db",
    "get_configured_database",
    "get_db_manager",
    "get_production_config",
    "import_all_models",
    "initialize_db",
    "set_db_manager",
    # Models
    "LegacyPaymentGateway",
    "PaymentProviderAccount",
]
