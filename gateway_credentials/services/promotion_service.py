"""
Credential promotion.

Copies the credential behind a resolution candidate (legacy row or scoped
account) into the platform-scoped account for the same provider and
environment. Steps run strictly in order, each gating the next:

    reauthenticate -> extract payload -> upsert platform account

The source record is only ever read. The orchestrator keeps no state and
takes no locks; the natural-key upsert is the single serialization point,
so concurrent promotions resolve as last writer wins.
"""

from typing import Any, Dict, Tuple

from ..config import get_config
from ..enums import AccountStatus, CredentialEnvironment, ScopeType
from ..exceptions import SourceNotFoundError
from ..repositories.credential_store import CredentialStoreAdapter
from ..schemas.credential_schemas import Candidate, PromotionResult, ScopedCredentialUpsert
from ..utils.credential_utils import integration_type_for_provider, legacy_payload_for_provider
from ..utils.logger import get_logger
from .reauthentication import Authenticator


class PromotionOrchestrator:
    """Promotes a credential candidate to the platform scope behind reauthentication."""

    def __init__(self, store: CredentialStoreAdapter, authenticator: Authenticator):
        self.store = store
        self.authenticator = authenticator
        self.logger = get_logger()

    def _extract_payload(self, candidate: Candidate) -> Tuple[Dict[str, Any], str]:
        """
        Load the candidate's source record and return (payload, source environment).

        Raises:
            SourceNotFoundError: The record was removed after resolution
        """
        if candidate.is_legacy:
            record = self.store.get_legacy_by_id(candidate.id)
            if record is None:
                raise SourceNotFoundError(
                    f"Legacy gateway '{candidate.id}' no longer exists",
                    provider=candidate.provider,
                    source_id=candidate.id,
                    source="legacy",
                )
            return (
                legacy_payload_for_provider(candidate.provider, record.masked_credential),
                candidate.environment,
            )

        account = self.store.get_scoped(
            candidate.provider,
            candidate.scope_type,
            candidate.scope_id,
            candidate.environment or CredentialEnvironment.PRODUCTION.value,
        )
        if account is None or account.id != candidate.id:
            raise SourceNotFoundError(
                f"Scoped account '{candidate.id}' no longer exists",
                provider=candidate.provider,
                source_id=candidate.id,
                source="scoped",
                scope_type=candidate.scope_type,
                scope_id=candidate.scope_id,
            )
        return dict(account.credential_payload), account.environment

    def promote(self, candidate: Candidate, acting_identity: str, secret: str) -> PromotionResult:
        """
        Promote a candidate's credential to the platform scope.

        An existing platform account for the same provider and environment is
        overwritten; otherwise one is created. Calling this twice with the same
        inputs leaves the same single platform account.

        Args:
            candidate: Candidate taken from a prior resolution
            acting_identity: Identity of the user confirming the promotion
            secret: That user's password

        Returns:
            PromotionResult carrying the written platform account

        Raises:
            InvalidCredentialError: Reauthentication failed; nothing was written
            SourceNotFoundError: The candidate's record vanished; nothing was written
            StoreUnavailableError: The store could not be reached
            ConflictError: The write violated a store constraint
        """
        self.authenticator.verify(acting_identity, secret)

        payload, environment = self._extract_payload(candidate)
        environment = environment or CredentialEnvironment.PRODUCTION.value

        account = self.store.upsert_scoped(
            ScopedCredentialUpsert(
                provider=candidate.provider,
                scope_type=ScopeType.PLATFORM,
                scope_id=None,
                environment=environment,
                credential_payload=payload,
                status=AccountStatus.ACTIVE,
                integration_type=integration_type_for_provider(candidate.provider),
            )
        )

        if get_config().features.enable_audit_logging:
            self.logger.info(
                "AUDIT: credential promoted to platform scope",
                extra={
                    "provider": candidate.provider,
                    "environment": environment,
                    "source": candidate.source.value,
                    "source_id": candidate.id,
                    "source_scope_type": candidate.scope_type,
                    "source_scope_id": candidate.scope_id,
                    "acting_identity": acting_identity,
                    "platform_account_id": account.id,
                    "credential_keys": sorted(payload.keys()),
                },
            )

        return PromotionResult.promoted(candidate, account)
