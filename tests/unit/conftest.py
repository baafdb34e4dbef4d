"""
Unit test conftest.py - Component-specific fixtures.

Services are wired against the real SQLite-backed store; mocks are only
used for collaborators that must fail.
"""

import pytest

from gateway_credentials.services.gateway_credential_service import GatewayCredentialService
from gateway_credentials.services.origin_resolver import OriginResolver
from gateway_credentials.services.promotion_service import PromotionOrchestrator

# ==================== SERVICE FIXTURES ====================


@pytest.fixture(scope="function")
def origin_resolver(credential_store):
    """Origin resolver over the test store."""
    return OriginResolver(credential_store)


@pytest.fixture(scope="function")
def promotion_orchestrator(credential_store, authenticator):
    """Promotion orchestrator over the test store."""
    return PromotionOrchestrator(credential_store, authenticator)


@pytest.fixture(scope="function")
def gateway_credential_service(credential_store, authenticator):
    """Facade over the test store."""
    return GatewayCredentialService(credential_store, authenticator)
