"""
Pydantic schemas for scoped provider accounts, legacy gateway rows and the
derived views produced by origin resolution and promotion.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import DEFAULT_INTEGRATION_TYPE
from ..enums import AccountStatus, CredentialEnvironment, CredentialSource, ScopeType

_PROVIDER_PATTERN = re.compile(r"^[a-z0-9_.-]+$")


def _normalize_provider(value: str) -> str:
    value = value.strip().lower()
    if not _PROVIDER_PATTERN.match(value):
        raise ValueError(
            "Provider can only contain letters, numbers, underscore, hyphen, and dot"
        )
    return value


class ScopedCredentialAccount(BaseModel):
    """Schema for reading a scoped provider account."""

    id: str = Field(..., description="Account ID")
    provider: str = Field(..., description="Payment provider")
    scope_type: ScopeType = Field(..., description="Hierarchy level")
    scope_id: Optional[str] = Field(None, description="Partner/tenant ID, None for platform")
    environment: str = Field(..., description="Provider environment")
    integration_type: str = Field(DEFAULT_INTEGRATION_TYPE, description="Integration flavour")
    credential_payload: Dict[str, Any] = Field(
        default_factory=dict, description="Provider-specific credential values"
    )
    status: AccountStatus = Field(..., description="Account status")
    display_name: Optional[str] = Field(None, description="Human-friendly label")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last write timestamp")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("credential_payload", mode="before")
    @classmethod
    def default_empty_payload(cls, v):
        """Stored payloads may be NULL."""
        return v or {}

    @property
    def natural_key(self) -> tuple:
        return (self.provider, self.scope_type.value, self.scope_id, self.environment)


class ScopedCredentialUpsert(BaseModel):
    """Schema for writing a scoped provider account through its natural key."""

    provider: str = Field(..., min_length=1, max_length=50, description="Payment provider")
    scope_type: ScopeType = Field(..., description="Hierarchy level")
    scope_id: Optional[str] = Field(None, max_length=100, description="Partner/tenant ID")
    environment: str = Field(
        CredentialEnvironment.PRODUCTION.value,
        min_length=1,
        max_length=20,
        description="Provider environment",
    )
    credential_payload: Dict[str, Any] = Field(
        ..., description="Credential key/value pairs, stored exactly as given"
    )
    status: AccountStatus = Field(AccountStatus.ACTIVE, description="Account status")
    integration_type: str = Field(
        DEFAULT_INTEGRATION_TYPE, min_length=1, max_length=50, description="Integration flavour"
    )
    display_name: Optional[str] = Field(None, max_length=200, description="Human-friendly label")

    model_config = ConfigDict(extra="forbid")

    @field_validator(
        "provider", "scope_id", "environment", "integration_type", "display_name", mode="before"
    )
    @classmethod
    def strip_key_fields(cls, v):
        """Key and label fields are trimmed; payload values are not."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v):
        return _normalize_provider(v)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        return v.lower()

    @field_validator("scope_id")
    @classmethod
    def blank_scope_id_is_none(cls, v):
        return v or None

    @model_validator(mode="after")
    def validate_scope(self):
        """Platform rows have no scope ID; partner and tenant rows require one."""
        if self.scope_type == ScopeType.PLATFORM and self.scope_id is not None:
            raise ValueError("Platform-scoped accounts cannot have a scope_id")
        if self.scope_type != ScopeType.PLATFORM and self.scope_id is None:
            raise ValueError(f"{self.scope_type.value}-scoped accounts require a scope_id")
        return self

    @property
    def scope_key(self) -> str:
        """Non-null stand-in for scope_id used by the natural-key index."""
        return self.scope_id or ""


class LegacyCredentialRecord(BaseModel):
    """Schema for reading a legacy (unscoped) gateway row."""

    id: str = Field(..., description="Gateway ID")
    provider: str = Field(..., description="Payment provider")
    masked_credential: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("masked_credential", "api_key_masked"),
        description="Stored (masked) key",
    )
    is_active: bool = Field(..., description="Whether the gateway is enabled")
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Candidate(BaseModel):
    """Normalized view of one credential record considered during resolution."""

    source: CredentialSource
    id: str
    provider: str
    scope_type: str
    scope_id: Optional[str] = None
    environment: Optional[str] = None
    status: str
    updated_at: Optional[datetime] = None
    has_real_credential: bool
    credentials_preview: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_legacy(self) -> bool:
        return self.source == CredentialSource.LEGACY

    @property
    def is_platform(self) -> bool:
        return self.source == CredentialSource.SCOPED and self.scope_type == ScopeType.PLATFORM.value


class OriginResolution(BaseModel):
    """Every candidate for a provider plus the authoritative one."""

    provider: str
    target_scope: Optional[ScopeType] = None
    candidates: List[Candidate] = Field(default_factory=list)
    active: Optional[Candidate] = None
    platform_candidate: Optional[Candidate] = None
    is_using_legacy: bool = False
    needs_promotion: bool = False

    def to_summary(self) -> Dict[str, Any]:
        """Plain dict for rendering."""
        return self.model_dump(mode="json")


class PromotionStatus(str, Enum):
    """Outcome of a promotion request."""

    PROMOTED = "promoted"
    NOTHING_TO_PROMOTE = "nothing_to_promote"


class PromotionResult(BaseModel):
    """
    Result of a promotion request.

    Failures (bad password, vanished source, store errors) are raised as
    exceptions; "nothing to promote" is a normal, non-exceptional outcome.
    """

    status: PromotionStatus
    success: bool
    provider: str
    candidate: Optional[Candidate] = None
    account: Optional[ScopedCredentialAccount] = None
    resolution: Optional[OriginResolution] = None
    message: Optional[str] = None
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def promoted(
        cls, candidate: Candidate, account: ScopedCredentialAccount, **kwargs
    ) -> "PromotionResult":
        return cls(
            status=PromotionStatus.PROMOTED,
            success=True,
            provider=candidate.provider,
            candidate=candidate,
            account=account,
            message="Credential promoted to platform scope",
            **kwargs,
        )

    @classmethod
    def nothing_to_promote(cls, provider: str, **kwargs) -> "PromotionResult":
        return cls(
            status=PromotionStatus.NOTHING_TO_PROMOTE,
            success=False,
            provider=provider,
            message="No credential needs promotion",
            **kwargs,
        )
