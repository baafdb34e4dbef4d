"""Tests for database configuration and the credential tables."""

import os
from unittest.mock import patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from gateway_credentials.config import AppConfig, set_config
from gateway_credentials.db import (
    DatabaseConfig,
    DatabaseManager,
    PaymentProviderAccount,
    get_configured_database,
    get_db_manager,
    get_production_config,
)
from gateway_credentials.db.db_config import set_db_manager
from gateway_credentials.exceptions import ServiceError, ValidationError


class TestDatabaseConfig:
    """Test DatabaseConfig connection strings."""

    def test_sqlite(self):
        config = DatabaseConfig(db_type="sqlite", database="/tmp/creds.db")
        assert config.get_connection_string() == "sqlite:////tmp/creds.db"
        assert config.is_sqlite is True

    def test_postgres(self):
        config = DatabaseConfig(
            host="db", database="creds", username="app", password="secret", port="5433"
        )
        assert config.get_connection_string() == "postgresql://app:secret@db:5433/creds"
        assert config.is_sqlite is False

    def test_url_wins(self):
        config = DatabaseConfig(url="postgresql://u:p@h/d", host="ignored")
        assert config.get_connection_string() == "postgresql://u:p@h/d"

    def test_postgres_missing_parameters(self):
        with pytest.raises(ValidationError):
            DatabaseConfig(host="db").get_connection_string()

    def test_unsupported_type(self):
        with pytest.raises(ValidationError):
            DatabaseConfig(db_type="oracle").get_connection_string()

    def test_repr_masks_password(self):
        config = DatabaseConfig(password="hunter2")
        assert "hunter2" not in repr(config)

    def test_production_config_database_url(self):
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql://u:p@h/d"}):
            assert get_production_config().get_connection_string() == "postgresql://u:p@h/d"

    def test_configured_database_from_app_config(self):
        config = AppConfig()
        config.database.connection_string = "sqlite:///./configured.db"
        set_config(config)

        db_config = get_configured_database()

        assert db_config.db_type == "sqlite"
        assert db_config.get_connection_string() == "sqlite:///./configured.db"


class TestDatabaseManager:
    """Test DatabaseManager wiring."""

    def test_tables_created(self, db_manager):
        tables = set(inspect(db_manager.engine).get_table_names())
        assert {"payment_provider_accounts", "payment_gateways"} <= tables
        assert get_db_manager() is db_manager

    def test_uninitialized_manager(self):
        set_db_manager(None)
        with pytest.raises(ServiceError):
            get_db_manager()

    def test_drop_tables_requires_development_mode(self, tmp_path):
        manager = DatabaseManager(
            DatabaseConfig(db_type="sqlite", database=str(tmp_path / "prod.db"))
        )
        try:
            with pytest.raises(ServiceError):
                manager.drop_tables()
        finally:
            manager.close()

    def test_new_sessions_are_independent(self, db_manager):
        first = db_manager.new_session()
        second = db_manager.new_session()
        try:
            assert first is not second
        finally:
            first.close()
            second.close()


class TestNaturalKeyConstraint:
    """Test the unique natural-key index on scoped accounts."""

    def _account(self, **overrides):
        data = {
            "provider": "stripe",
            "scope_type": "platform",
            "scope_id": None,
            "scope_key": "",
            "environment": "production",
            "credential_payload": {"secret_key": "sk_live_abcdefghijklmnop"},
        }
        data.update(overrides)
        return PaymentProviderAccount(**data)

    def test_two_platform_rows_rejected(self, db_session):
        """Test a second platform row for the same provider and environment is refused."""
        db_session.add(self._account())
        db_session.commit()

        db_session.add(self._account())
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_invalid_scope_type_rejected(self, db_session):
        db_session.add(self._account(scope_type="global"))
        with pytest.raises(IntegrityError):
            db_session.commit()
