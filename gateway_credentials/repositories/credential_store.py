"""
Credential store adapter.

Translates the generic credential operations used by origin resolution and
promotion into queries against two tables:

- payment_provider_accounts: scoped credential sets, unique per
  (provider, scope_type, scope_id, environment)
- payment_gateways: legacy unscoped credentials, read-only here

The adapter holds no business logic. Each call opens and closes its own
session so concurrent reads from worker threads never share one.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Union

from sqlalchemy import func, insert, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..context.service_decorators import handle_store_errors
from ..db.db_base import new_uuid, utc_now
from ..db.db_config import DatabaseManager
from ..db.db_credential_models import LegacyPaymentGateway, PaymentProviderAccount
from ..enums import ScopeType
from ..exceptions import ConflictError
from ..schemas.credential_schemas import (
    LegacyCredentialRecord,
    ScopedCredentialAccount,
    ScopedCredentialUpsert,
)
from ..utils.logger import get_logger

NATURAL_KEY_COLUMNS = ("provider", "scope_type", "scope_key", "environment")

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
_ON_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CredentialStoreAdapter(ABC):
    """Operations the resolver and orchestrator need from a credential store."""

    @abstractmethod
    def list_scoped_by_provider(self, provider: str) -> List[ScopedCredentialAccount]:
        """All scoped accounts for a provider, any scope, newest-updated first."""

    @abstractmethod
    def list_active_legacy_by_provider(self, provider: str) -> List[LegacyCredentialRecord]:
        """Legacy rows for a provider with is_active set."""

    @abstractmethod
    def get_scoped(
        self,
        provider: str,
        scope_type: Union[ScopeType, str],
        scope_id: Optional[str],
        environment: str,
    ) -> Optional[ScopedCredentialAccount]:
        """The account at one natural key, or None."""

    @abstractmethod
    def upsert_scoped(
        self, record: Union[ScopedCredentialUpsert, Dict[str, Any]]
    ) -> ScopedCredentialAccount:
        """Atomic insert-or-update keyed on the natural key."""

    @abstractmethod
    def get_legacy_by_id(self, legacy_id: str) -> Optional[LegacyCredentialRecord]:
        """A legacy row by ID, or None."""


class SQLAlchemyCredentialStore(CredentialStoreAdapter):
    """Credential store backed by SQLAlchemy (PostgreSQL in production, SQLite in tests)."""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self.logger = get_logger()

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self.db_manager.new_session()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _natural_key_filter(
        query, provider: str, scope_type: str, scope_id: Optional[str], environment: str
    ):
        return query.filter(
            PaymentProviderAccount.provider == provider,
            PaymentProviderAccount.scope_type == scope_type,
            PaymentProviderAccount.scope_key == (scope_id or ""),
            PaymentProviderAccount.environment == environment,
        )

    @handle_store_errors("list_scoped_by_provider")
    def list_scoped_by_provider(self, provider: str) -> List[ScopedCredentialAccount]:
        provider = provider.strip().lower()
        with self._session() as session:
            rows = (
                session.query(PaymentProviderAccount)
                .filter(PaymentProviderAccount.provider == provider)
                .order_by(
                    PaymentProviderAccount.updated_at.desc(),
                    PaymentProviderAccount.created_at.desc(),
                    PaymentProviderAccount.id,
                )
                .all()
            )
            accounts = [ScopedCredentialAccount.model_validate(row) for row in rows]

        self.logger.debug(
            "Listed scoped provider accounts",
            extra={"provider": provider, "count": len(accounts)},
        )
        return accounts

    @handle_store_errors("list_active_legacy_by_provider")
    def list_active_legacy_by_provider(self, provider: str) -> List[LegacyCredentialRecord]:
        provider = provider.strip().lower()
        with self._session() as session:
            rows = (
                session.query(LegacyPaymentGateway)
                .filter(
                    func.lower(LegacyPaymentGateway.provider) == provider,
                    LegacyPaymentGateway.is_active.is_(True),
                )
                .order_by(LegacyPaymentGateway.created_at.desc(), LegacyPaymentGateway.id)
                .all()
            )
            records = [LegacyCredentialRecord.model_validate(row) for row in rows]

        self.logger.debug(
            "Listed active legacy gateways",
            extra={"provider": provider, "count": len(records)},
        )
        return records

    @handle_store_errors("get_scoped")
    def get_scoped(
        self,
        provider: str,
        scope_type: Union[ScopeType, str],
        scope_id: Optional[str],
        environment: str,
    ) -> Optional[ScopedCredentialAccount]:
        with self._session() as session:
            row = self._natural_key_filter(
                session.query(PaymentProviderAccount),
                provider.strip().lower(),
                ScopeType(scope_type).value,
                scope_id,
                environment.lower(),
            ).one_or_none()
            return ScopedCredentialAccount.model_validate(row) if row else None

    @handle_store_errors("get_legacy_by_id")
    def get_legacy_by_id(self, legacy_id: str) -> Optional[LegacyCredentialRecord]:
        with self._session() as session:
            row = session.get(LegacyPaymentGateway, legacy_id)
            return LegacyCredentialRecord.model_validate(row) if row else None

    @handle_store_errors("upsert_scoped")
    def upsert_scoped(
        self, record: Union[ScopedCredentialUpsert, Dict[str, Any]]
    ) -> ScopedCredentialAccount:
        """
        Insert or update the account at the record's natural key.

        Both paths end in the same state. An existing row keeps its id and
        created_at; everything else, including updated_at, is overwritten.

        Raises:
            ConflictError: payload validation failed or a non-natural-key constraint was violated
            StoreUnavailableError: the store could not be reached
        """
        if not isinstance(record, ScopedCredentialUpsert):
            record = ScopedCredentialUpsert.model_validate(record)

        now = utc_now()
        values = {
            "id": new_uuid(),
            "provider": record.provider,
            "scope_type": record.scope_type.value,
            "scope_id": record.scope_id,
            "scope_key": record.scope_key,
            "environment": record.environment,
            "integration_type": record.integration_type,
            "credential_payload": record.credential_payload,
            "status": record.status.value,
            "display_name": record.display_name,
            "created_at": now,
            "updated_at": now,
        }
        update_columns = [
            key for key in values if key not in NATURAL_KEY_COLUMNS + ("id", "created_at")
        ]

        with self._session() as session:
            dialect = session.get_bind().dialect.name
            dialect_insert = _ON_CONFLICT_INSERTS.get(dialect)

            if dialect_insert is not None:
                stmt = dialect_insert(PaymentProviderAccount).values(**values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=list(NATURAL_KEY_COLUMNS),
                    set_={column: stmt.excluded[column] for column in update_columns},
                )
                session.execute(stmt)
            else:
                self._insert_or_update(
                    session, values, {column: values[column] for column in update_columns}
                )

            session.commit()

            row = self._natural_key_filter(
                session.query(PaymentProviderAccount),
                record.provider,
                record.scope_type.value,
                record.scope_id,
                record.environment,
            ).one()
            account = ScopedCredentialAccount.model_validate(row)

        self.logger.info(
            "Scoped provider account upserted",
            extra={
                "provider": account.provider,
                "scope_type": account.scope_type.value,
                "scope_id": account.scope_id,
                "environment": account.environment,
                "account_id": account.id,
                "credential_keys": sorted(account.credential_payload.keys()),
            },
        )
        return account

    def _insert_or_update(
        self, session: Session, values: Dict[str, Any], update_values: Dict[str, Any]
    ) -> None:
        """Portable upsert for dialects without ON CONFLICT: insert, update on key collision."""
        try:
            with session.begin_nested():
                session.execute(insert(PaymentProviderAccount).values(**values))
            return
        except IntegrityError:
            self.logger.debug(
                "Natural key exists, taking update path",
                extra={"provider": values["provider"], "scope_type": values["scope_type"]},
            )

        result = session.execute(
            update(PaymentProviderAccount)
            .where(
                PaymentProviderAccount.provider == values["provider"],
                PaymentProviderAccount.scope_type == values["scope_type"],
                PaymentProviderAccount.scope_key == values["scope_key"],
                PaymentProviderAccount.environment == values["environment"],
            )
            .values(**update_values)
        )
        if result.rowcount == 0:
            raise ConflictError(
                "Insert rejected and no row exists at the natural key",
                operation="upsert_scoped",
                provider=values["provider"],
                scope_type=values["scope_type"],
                environment=values["environment"],
            )
