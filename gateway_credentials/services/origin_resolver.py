"""
Credential origin resolution.

For a provider, collects every candidate credential from the scoped accounts
table and the legacy gateways table, normalizes them, and picks the single
authoritative one:

1. the first platform-scoped candidate holding a real credential
2. otherwise the first candidate (scoped rows before legacy rows) holding a
   real credential
3. otherwise nothing

Resolution is read-only and may run at any time, including while a
promotion is in flight.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import get_config
from ..constants import LEGACY_SCOPE, PRODUCTION_KEY_PREFIXES
from ..context.correlation_context import propagate_correlation
from ..enums import AccountStatus, CredentialSource, ScopeType
from ..repositories.credential_store import CredentialStoreAdapter
from ..schemas.credential_schemas import (
    Candidate,
    LegacyCredentialRecord,
    OriginResolution,
    ScopedCredentialAccount,
)
from ..utils.credential_utils import (
    infer_environment,
    mask_credential_preview,
    masked_has_real_credential,
    payload_has_real_credential,
)
from ..utils.logger import get_logger


def scoped_candidate(account: ScopedCredentialAccount) -> Candidate:
    """Normalize a scoped account into a Candidate."""
    return Candidate(
        source=CredentialSource.SCOPED,
        id=account.id,
        provider=account.provider,
        scope_type=account.scope_type.value,
        scope_id=account.scope_id,
        environment=account.environment,
        status=account.status.value,
        updated_at=account.updated_at,
        has_real_credential=payload_has_real_credential(account.credential_payload),
    )


def legacy_candidate(
    record: LegacyCredentialRecord,
    production_prefixes: Iterable[str] = PRODUCTION_KEY_PREFIXES,
) -> Candidate:
    """Normalize a legacy gateway row into a Candidate."""
    return Candidate(
        source=CredentialSource.LEGACY,
        id=record.id,
        provider=record.provider.lower(),
        scope_type=LEGACY_SCOPE,
        scope_id=None,
        environment=infer_environment(record.masked_credential, production_prefixes).value,
        status=(AccountStatus.ACTIVE if record.is_active else AccountStatus.INACTIVE).value,
        updated_at=record.created_at,
        has_real_credential=masked_has_real_credential(record.masked_credential),
        credentials_preview=mask_credential_preview(record.masked_credential),
    )


def build_resolution(
    provider: str,
    scoped_accounts: Sequence[ScopedCredentialAccount],
    legacy_records: Sequence[LegacyCredentialRecord],
    target_scope: Optional[ScopeType] = ScopeType.PLATFORM,
    production_prefixes: Iterable[str] = PRODUCTION_KEY_PREFIXES,
) -> OriginResolution:
    """
    Compute the resolution from already-fetched rows.

    Pure: the inputs are not modified and equal inputs give equal output.
    """
    production_prefixes = tuple(production_prefixes)
    candidates: List[Candidate] = [scoped_candidate(a) for a in scoped_accounts]
    candidates.extend(legacy_candidate(r, production_prefixes) for r in legacy_records)

    real = [c for c in candidates if c.has_real_credential]
    platform_candidate = next((c for c in real if c.is_platform), None)
    active = platform_candidate or (real[0] if real else None)

    return OriginResolution(
        provider=provider,
        target_scope=target_scope,
        candidates=candidates,
        active=active,
        platform_candidate=platform_candidate,
        is_using_legacy=active is not None and active.is_legacy,
        needs_promotion=(
            target_scope == ScopeType.PLATFORM
            and platform_candidate is None
            and active is not None
        ),
    )


class OriginResolver:
    """Resolves which stored credential is authoritative for a provider."""

    def __init__(
        self,
        store: CredentialStoreAdapter,
        max_workers: Optional[int] = None,
        production_prefixes: Optional[Tuple[str, ...]] = None,
    ):
        resolver_config = get_config().resolver
        self.store = store
        self.max_workers = max_workers or resolver_config.max_workers
        self.production_prefixes = production_prefixes or resolver_config.production_key_prefixes
        self.logger = get_logger()

    def _fetch(
        self, provider: str
    ) -> Tuple[List[ScopedCredentialAccount], List[LegacyCredentialRecord]]:
        """Read scoped and legacy rows concurrently and wait for both."""
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="origin-resolver"
        ) as executor:
            scoped_future = executor.submit(
                propagate_correlation(self.store.list_scoped_by_provider), provider
            )
            legacy_future = executor.submit(
                propagate_correlation(self.store.list_active_legacy_by_provider), provider
            )
            return scoped_future.result(), legacy_future.result()

    def resolve_origins(
        self, provider: str, target_scope: Optional[ScopeType] = ScopeType.PLATFORM
    ) -> OriginResolution:
        """
        Resolve every credential candidate for a provider and the active one.

        Args:
            provider: Payment provider name (case-insensitive)
            target_scope: Scope the caller is configuring; promotion is only
                offered when this is the platform scope

        Returns:
            OriginResolution with candidates, active and promotion flags

        Raises:
            StoreUnavailableError: Either read failed
        """
        provider = provider.strip().lower()
        scoped_accounts, legacy_records = self._fetch(provider)

        resolution = build_resolution(
            provider,
            scoped_accounts,
            legacy_records,
            target_scope=target_scope,
            production_prefixes=self.production_prefixes,
        )

        active = resolution.active
        self.logger.info(
            "Credential origins resolved",
            extra={
                "provider": provider,
                "target_scope": target_scope.value if target_scope else None,
                "scoped_count": len(scoped_accounts),
                "legacy_count": len(legacy_records),
                "active_source": active.source.value if active else None,
                "active_scope": active.scope_type if active else None,
                "is_using_legacy": resolution.is_using_legacy,
                "needs_promotion": resolution.needs_promotion,
            },
        )
        return resolution
