"""Credential origin resolution and promotion services."""

from .gateway_credential_service import GatewayCredentialService
from .origin_resolver import OriginResolver, build_resolution
from .promotion_service import PromotionOrchestrator
from .reauthentication import Authenticator, CallbackAuthenticator

__all__ = [
    "Authenticator",
    "CallbackAuthenticator",
    "GatewayCredentialService",
    "OriginResolver",
    "PromotionOrchestrator",
    "build_resolution",
]
