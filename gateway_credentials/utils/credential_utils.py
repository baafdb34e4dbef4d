"""
Credential heuristics shared by origin resolution and promotion.

Legacy gateway rows carry a single masked key and no scope, so their
environment and "realness" are inferred here from explicit lookup tables
rather than inline string matching.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from ..constants import (
    DEFAULT_INTEGRATION_TYPE,
    DEFAULT_LEGACY_PAYLOAD_KEY,
    INTEGRATION_TYPES,
    LEGACY_CREDENTIAL_MIN_LENGTH,
    LEGACY_PAYLOAD_KEYS,
    PREVIEW_PREFIX_LENGTH,
    PREVIEW_SUFFIX_LENGTH,
    PRODUCTION_KEY_PREFIXES,
    SCOPED_CREDENTIAL_MIN_LENGTH,
)
from ..enums import CredentialEnvironment


def infer_environment(
    masked_credential: Optional[str], production_prefixes: Iterable[str] = PRODUCTION_KEY_PREFIXES
) -> CredentialEnvironment:
    """
    Infer the environment of a legacy key from its prefix.

    Unmatched or missing keys are sandbox; this never raises.
    """
    if masked_credential and masked_credential.startswith(tuple(production_prefixes)):
        return CredentialEnvironment.PRODUCTION
    return CredentialEnvironment.SANDBOX


def payload_has_real_credential(payload: Optional[Mapping[str, Any]]) -> bool:
    """True if at least one payload value is non-empty and longer than the placeholder threshold."""
    if not payload:
        return False
    return any(
        value is not None and len(str(value)) > SCOPED_CREDENTIAL_MIN_LENGTH
        for value in payload.values()
    )


def masked_has_real_credential(masked_credential: Optional[str]) -> bool:
    """True if a legacy masked key is long enough to be a real key."""
    return bool(masked_credential) and len(masked_credential) > LEGACY_CREDENTIAL_MIN_LENGTH


def mask_credential_preview(masked_credential: Optional[str]) -> Optional[str]:
    """Short display form of a legacy key, or None when the key is not real."""
    if not masked_has_real_credential(masked_credential):
        return None
    return (
        f"{masked_credential[:PREVIEW_PREFIX_LENGTH]}..."
        f"{masked_credential[-PREVIEW_SUFFIX_LENGTH:]}"
    )


def legacy_payload_key(provider: str) -> str:
    """Payload key a provider expects its single legacy value under."""
    return LEGACY_PAYLOAD_KEYS.get(provider.lower(), DEFAULT_LEGACY_PAYLOAD_KEY)


def legacy_payload_for_provider(provider: str, masked_credential: Optional[str]) -> Dict[str, str]:
    """
    Map a legacy row's stored value into the provider-specific payload shape.

    Examples:
        stripe -> {"secret_key": value}
        asaas  -> {"api_key": value}
        other  -> {"api_key": value}
    """
    return {legacy_payload_key(provider): masked_credential or ""}


def integration_type_for_provider(provider: str) -> str:
    """Integration type recorded on accounts created by promotion."""
    return INTEGRATION_TYPES.get(provider.lower(), DEFAULT_INTEGRATION_TYPE)
