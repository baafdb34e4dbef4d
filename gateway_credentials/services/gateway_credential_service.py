"""
Application-facing entry point for gateway credential origins.

Wraps resolution and promotion for the settings screens: report where a
provider's credential comes from, and promote it to the platform scope on
explicit confirmation, returning the re-resolved state afterward.
"""

from typing import Any, Dict, Optional

from ..context.correlation_context import correlation_context
from ..enums import ScopeType
from ..repositories.credential_store import CredentialStoreAdapter
from ..schemas.credential_schemas import Candidate, OriginResolution, PromotionResult
from ..utils.logger import get_logger
from .origin_resolver import OriginResolver
from .promotion_service import PromotionOrchestrator
from .reauthentication import Authenticator


class GatewayCredentialService:
    """
    Facade over origin resolution and promotion.

    Errors from the store and from reauthentication propagate unchanged;
    "nothing to promote" is reported as a result, not an error.
    """

    def __init__(
        self,
        store: CredentialStoreAdapter,
        authenticator: Authenticator,
        resolver: Optional[OriginResolver] = None,
        orchestrator: Optional[PromotionOrchestrator] = None,
    ):
        self.store = store
        self.authenticator = authenticator
        self.resolver = resolver or OriginResolver(store)
        self.orchestrator = orchestrator or PromotionOrchestrator(store, authenticator)
        self.logger = get_logger()

    def resolve(
        self, provider: str, target_scope: Optional[ScopeType] = ScopeType.PLATFORM
    ) -> OriginResolution:
        with correlation_context():
            return self.resolver.resolve_origins(provider, target_scope)

    def get_origin_summary(
        self, provider: str, target_scope: Optional[ScopeType] = ScopeType.PLATFORM
    ) -> Dict[str, Any]:
        """Resolution for a provider as a plain dict for rendering."""
        return self.resolve(provider, target_scope).to_summary()

    def promote_candidate(
        self, candidate: Candidate, acting_identity: str, secret: str
    ) -> PromotionResult:
        """
        Promote a specific candidate and re-resolve its provider.

        Raises:
            InvalidCredentialError: Reauthentication failed
            SourceNotFoundError: The candidate's record vanished; re-resolve and retry
            StoreUnavailableError: The store could not be reached
        """
        with correlation_context() as correlation_id:
            self.logger.info(
                "Credential promotion requested",
                extra={
                    "provider": candidate.provider,
                    "source": candidate.source.value,
                    "source_id": candidate.id,
                    "correlation_id": correlation_id,
                },
            )
            result = self.orchestrator.promote(candidate, acting_identity, secret)
            resolution = self.resolver.resolve_origins(candidate.provider, ScopeType.PLATFORM)
            return result.model_copy(update={"resolution": resolution})

    def promote_active(self, provider: str, acting_identity: str, secret: str) -> PromotionResult:
        """
        Promote the provider's active candidate when the platform scope lacks one.

        Returns a NOTHING_TO_PROMOTE result (no reauthentication attempted)
        when the platform already holds a real credential or nothing is active.
        """
        with correlation_context():
            resolution = self.resolver.resolve_origins(provider, ScopeType.PLATFORM)
            if not resolution.needs_promotion or resolution.active is None:
                self.logger.info(
                    "Nothing to promote",
                    extra={
                        "provider": resolution.provider,
                        "has_platform_credential": resolution.platform_candidate is not None,
                        "has_active_credential": resolution.active is not None,
                    },
                )
                return PromotionResult.nothing_to_promote(
                    resolution.provider, resolution=resolution
                )

            return self.promote_candidate(resolution.active, acting_identity, secret)
