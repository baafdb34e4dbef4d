"""
Test fixtures for the gateway credentials package.

Each test gets its own file-backed SQLite database under tmp_path so that the
resolver's worker threads read through separate connections, as they would
against PostgreSQL.
"""

import pytest
from sqlalchemy.orm import Session

from gateway_credentials.config import reset_config
from gateway_credentials.db import DatabaseConfig, DatabaseManager
from gateway_credentials.db.db_config import close_db, initialize_db, set_db_manager
from gateway_credentials.exceptions import clear_correlation_id
from gateway_credentials.repositories.credential_store import SQLAlchemyCredentialStore
from gateway_credentials.services.reauthentication import CallbackAuthenticator
from gateway_credentials.utils.logger import reset_logging
from tests.fixtures.factories import configure_factories

ADMIN_IDENTITY = "admin@x.com"
ADMIN_PASSWORD = "correctpass"


@pytest.fixture(autouse=True)
def clean_globals():
    """Reset process-wide configuration, logger and correlation state around each test."""
    reset_config()
    reset_logging()
    clear_correlation_id()
    yield
    clear_correlation_id()
    reset_logging()
    reset_config()


@pytest.fixture(scope="function")
def db_config(tmp_path) -> DatabaseConfig:
    """SQLite database file for one test."""
    return DatabaseConfig(
        db_type="sqlite",
        database=str(tmp_path / "gateway_credentials.db"),
        echo=False,
        development_mode=True,
    )


@pytest.fixture(scope="function")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Initialize the database manager and create both credential tables."""
    manager = initialize_db(db_config)
    yield manager
    close_db()
    set_db_manager(None)


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Session used to arrange and inspect rows directly.

    Factories are bound to it for the duration of the test.
    """
    session = db_manager.new_session()
    configure_factories(session)
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope="function")
def credential_store(db_manager: DatabaseManager) -> SQLAlchemyCredentialStore:
    """Store adapter over the test database."""
    return SQLAlchemyCredentialStore(db_manager)


@pytest.fixture(scope="function")
def authenticator() -> CallbackAuthenticator:
    """Authenticator accepting only the admin password."""
    return CallbackAuthenticator(
        lambda identity, secret: identity == ADMIN_IDENTITY and secret == ADMIN_PASSWORD
    )
