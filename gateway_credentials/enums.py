"""
Enums used across the gateway_credentials package.

This module contains enum definitions that are used by multiple modules
to avoid circular import issues.
"""

import enum


class ScopeType(str, enum.Enum):
    """Hierarchy level a scoped credential applies to."""

    PLATFORM = "platform"
    PARTNER = "partner"
    TENANT = "tenant"


class CredentialEnvironment(str, enum.Enum):
    """Provider environment a credential targets."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"


class AccountStatus(str, enum.Enum):
    """Status of a scoped provider account."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


class CredentialSource(str, enum.Enum):
    """Where a resolved candidate came from."""

    SCOPED = "scoped"
    LEGACY = "legacy"
