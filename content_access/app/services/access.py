"""Application wiring for the entitlement store and content gates."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ...config import AccessConfig, load_access_config
from ..entitlements import EntitlementStore, SubscriptionStatus
from ..feature_gates import AccessContext, AccessPolicy, FreeViewQuotaTracker
from ..storage import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessServices:
    """Entitlement and quota components sharing one store and one lock.

    Built once at start-up and passed to whoever needs it; there is no
    module-level instance.
    """

    config: AccessConfig
    kv_store: KeyValueStore
    entitlements: EntitlementStore
    quota: FreeViewQuotaTracker
    policy: AccessPolicy
    context: AccessContext

    @property
    def is_premium(self) -> bool:
        return self.entitlements.is_premium

    @property
    def current_status(self) -> SubscriptionStatus:
        return self.entitlements.current_status

    @property
    def needs_verification(self) -> bool:
        return self.entitlements.needs_verification

    def can_access_content(self, content_id: int) -> bool:
        return self.policy.can_access_content(content_id)

    def record_view(self) -> int:
        return self.quota.record_view()

    def remaining_views(self) -> int:
        return self.quota.remaining_views()

    def sign_out(self) -> None:
        """Clear account-scoped state; the trial flag and view ledger stay."""

        self.entitlements.clear()


def _build_kv_store(config: AccessConfig) -> KeyValueStore:
    if config.state_path is None:
        logger.info("No access state path configured; using in-memory storage")
        return InMemoryKeyValueStore()
    logger.info("Persisting access state to %s", config.state_path)
    return JsonFileKeyValueStore(config.state_path)


def build_access_services(
    config: Optional[AccessConfig] = None,
    *,
    store: Optional[KeyValueStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> AccessServices:
    resolved_config = config or load_access_config()
    kv_store = store if store is not None else _build_kv_store(resolved_config)
    lock = threading.RLock()

    entitlements = EntitlementStore(
        kv_store,
        clock=clock,
        verification_interval_hours=resolved_config.verification_interval_hours,
        lock=lock,
    )
    quota = FreeViewQuotaTracker(
        kv_store,
        max_free_views_per_day=resolved_config.max_free_views_per_day,
        clock=clock,
        day_timezone=resolved_config.day_timezone,
        lock=lock,
    )
    policy = AccessPolicy(entitlements, quota)
    return AccessServices(
        config=resolved_config,
        kv_store=kv_store,
        entitlements=entitlements,
        quota=quota,
        policy=policy,
        context=AccessContext(policy=policy, quota=quota),
    )
