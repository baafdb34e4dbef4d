"""Utility modules for the gateway credentials package."""

# Credential heuristics
from .credential_utils import (
    infer_environment,
    integration_type_for_provider,
    legacy_payload_for_provider,
    legacy_payload_key,
    mask_credential_preview,
    masked_has_real_credential,
    payload_has_real_credential,
)

# Logging utilities
from .logger import (
    AzureQueueHandler,
    ContextAwareLogger,
    CorrelationContextFilter,
    configure_logging,
    get_logger,
)

__all__ = [
    # Credential heuristics
    "infer_environment",
    "integration_type_for_provider",
    "legacy_payload_for_provider",
    "legacy_payload_key",
    "mask_credential_preview",
    "masked_has_real_credential",
    "payload_has_real_credential",
    # Logging utilities
    "AzureQueueHandler",
    "ContextAwareLogger",
    "CorrelationContextFilter",
    "configure_logging",
    "get_logger",
]
