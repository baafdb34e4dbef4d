"""Pydantic schemas for credential records and resolution results."""

from .credential_schemas import (
    Candidate,
    LegacyCredentialRecord,
    OriginResolution,
    PromotionResult,
    PromotionStatus,
    ScopedCredentialAccount,
    ScopedCredentialUpsert,
)

__all__ = [
    "Candidate",
    "LegacyCredentialRecord",
    "OriginResolution",
    "PromotionResult",
    "PromotionStatus",
    "ScopedCredentialAccount",
    "ScopedCredentialUpsert",
]
