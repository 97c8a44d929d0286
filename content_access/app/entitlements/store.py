"""Persistence of the subscription snapshot with expiration applied on read."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, ContextManager, Optional

from ..storage import KeyValueStore, StorageError
from .catalog import SubscriptionTier, find_product_definition
from .errors import SerializationError
from .models import (
    FREE_SUBSCRIPTION,
    StoreOutcome,
    StoreResult,
    SubscriptionRecord,
    SubscriptionStatus,
    decode_record,
    encode_record,
)

SUBSCRIPTION_INFO_KEY = "subscription_info"
LAST_VERIFICATION_KEY = "subscription_last_verification"
FREE_TRIAL_USED_KEY = "free_trial_used"

DEFAULT_VERIFICATION_INTERVAL_HOURS = 24

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EntitlementStore:
    """Owns the persisted subscription record and the verification clock.

    Every failure while reading or writing degrades to the least-privileged
    answer (the free record, verification due) and is reported through the
    module logger instead of being raised to the caller. The ``*_result``
    methods expose the same operations with a :class:`StoreResult` describing
    what actually happened.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        verification_interval_hours: int = DEFAULT_VERIFICATION_INTERVAL_HOURS,
        lock: Optional[ContextManager] = None,
    ) -> None:
        self._kv = kv_store
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._verification_interval = timedelta(hours=max(verification_interval_hours, 1))
        self._lock = lock if lock is not None else threading.RLock()

    @property
    def lock(self) -> ContextManager:
        return self._lock

    def _now(self) -> datetime:
        # Naive clock readings are taken as UTC, matching stored record dates.
        return _as_utc(self._clock())

    def save(self, record: SubscriptionRecord) -> StoreResult[SubscriptionRecord]:
        """Persist ``record`` and stamp the verification clock."""

        with self._lock:
            return self._write(record)

    def load_result(self) -> StoreResult[SubscriptionRecord]:
        with self._lock:
            try:
                data = self._kv.get_data(SUBSCRIPTION_INFO_KEY)
            except StorageError as exc:
                logger.warning("Failed to read subscription info: %s", exc)
                return StoreResult(FREE_SUBSCRIPTION, StoreOutcome.STORAGE_FAILED, exc)
            if data is None:
                return StoreResult(FREE_SUBSCRIPTION, StoreOutcome.MISSING)

            try:
                record = decode_record(data)
            except SerializationError as exc:
                logger.warning("Failed to load subscription info: %s", exc)
                return StoreResult(FREE_SUBSCRIPTION, StoreOutcome.DECODE_FAILED, exc)

            if not record.needs_expiration(self._now()):
                return StoreResult(record, StoreOutcome.LOADED)

            expired = record.as_expired()
            logger.info(
                "Subscription %s expired at %s; status %s -> %s",
                record.product_id,
                record.expiration_date.isoformat() if record.expiration_date else None,
                record.status.value,
                expired.status.value,
            )
            written = self._write(expired)
            return StoreResult(expired, StoreOutcome.NORMALIZED, written.error)

    def load(self) -> SubscriptionRecord:
        """Return the current record, expiring it in place if its date has passed."""

        return self.load_result().value

    def clear_result(self) -> StoreResult[None]:
        with self._lock:
            try:
                self._kv.remove(SUBSCRIPTION_INFO_KEY)
                self._kv.remove(LAST_VERIFICATION_KEY)
            except StorageError as exc:
                logger.warning("Failed to clear subscription info: %s", exc)
                return StoreResult(None, StoreOutcome.STORAGE_FAILED, exc)
        logger.info("Subscription info cleared")
        return StoreResult(None, StoreOutcome.CLEARED)

    def clear(self) -> None:
        """Forget the account-scoped entitlement state (sign-out)."""

        self.clear_result()

    @property
    def is_premium(self) -> bool:
        return self.load().is_active

    @property
    def current_status(self) -> SubscriptionStatus:
        return self.load().status

    @property
    def current_tier(self) -> Optional[SubscriptionTier]:
        record = self.load()
        if not record.is_active:
            return None
        product = find_product_definition(record.product_id)
        if product is None:
            logger.warning("Active subscription references unknown product %s", record.product_id)
            return None
        return product.tier

    @property
    def days_remaining(self) -> Optional[int]:
        return self.load().days_remaining(self._now())

    @property
    def last_verification_time(self) -> Optional[datetime]:
        try:
            return self._kv.get_timestamp(LAST_VERIFICATION_KEY)
        except StorageError as exc:
            logger.warning("Failed to read last verification time: %s", exc)
            return None

    @property
    def needs_verification(self) -> bool:
        """Whether 24 whole hours (or the configured interval) passed since the last check."""

        last_verified = self.last_verification_time
        if last_verified is None:
            return True
        elapsed_hours = (self._now() - _as_utc(last_verified)) // timedelta(hours=1)
        return elapsed_hours >= self._verification_interval // timedelta(hours=1)

    @property
    def has_free_trial_been_used(self) -> bool:
        try:
            return self._kv.get_bool(FREE_TRIAL_USED_KEY)
        except StorageError as exc:
            # Unknown trial state is reported as consumed.
            logger.warning("Failed to read free trial flag: %s", exc)
            return True

    def mark_free_trial_used(self) -> None:
        with self._lock:
            try:
                self._kv.set_bool(FREE_TRIAL_USED_KEY, True)
            except StorageError as exc:
                logger.warning("Failed to persist free trial flag: %s", exc)

    def _write(self, record: SubscriptionRecord) -> StoreResult[SubscriptionRecord]:
        try:
            data = encode_record(record)
        except SerializationError as exc:
            logger.warning("Failed to save subscription info: %s", exc)
            return StoreResult(record, StoreOutcome.ENCODE_FAILED, exc)

        try:
            self._kv.set_data(SUBSCRIPTION_INFO_KEY, data)
            self._kv.set_timestamp(LAST_VERIFICATION_KEY, self._now())
        except StorageError as exc:
            logger.warning("Failed to persist subscription info: %s", exc)
            return StoreResult(record, StoreOutcome.STORAGE_FAILED, exc)

        logger.info("Subscription info saved: %s", record.status.value)
        return StoreResult(record, StoreOutcome.SAVED)
