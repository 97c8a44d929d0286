"""Domain models for locally persisted subscription entitlements."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import SerializationError


class SubscriptionStatus(str, Enum):
    """Lifecycle state for a subscription snapshot."""

    FREE = "free"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class SubscriptionRecord(BaseModel):
    """Entitlement snapshot handed over by the purchase verification subsystem."""

    status: SubscriptionStatus = SubscriptionStatus.FREE
    product_id: Optional[str] = None
    purchase_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    original_transaction_id: Optional[str] = None
    auto_renew_enabled: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("purchase_date", "expiration_date")
    @classmethod
    def _ensure_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE

    def is_past_expiration(self, now: datetime) -> bool:
        """Return whether the expiration date lies strictly before ``now``.

        Records without an expiration date (lifetime or promotional grants)
        never pass their expiration.
        """

        return self.expiration_date is not None and self.expiration_date < now

    def needs_expiration(self, now: datetime) -> bool:
        return self.is_past_expiration(now) and self.status != SubscriptionStatus.EXPIRED

    def as_expired(self) -> "SubscriptionRecord":
        """Return a copy marked expired with auto-renew switched off."""

        return self.model_copy(
            update={"status": SubscriptionStatus.EXPIRED, "auto_renew_enabled": False}
        )

    def days_remaining(self, now: datetime) -> Optional[int]:
        if self.expiration_date is None:
            return None
        return max(0, (self.expiration_date - now).days)


FREE_SUBSCRIPTION = SubscriptionRecord()


def encode_record(record: SubscriptionRecord) -> bytes:
    """Serialize a record into the opaque blob stored under ``subscription_info``."""

    try:
        return record.model_dump_json().encode("utf-8")
    except ValueError as exc:
        raise SerializationError("encode", str(exc)) from exc


def decode_record(data: bytes) -> SubscriptionRecord:
    """Rebuild a record from its persisted blob."""

    try:
        return SubscriptionRecord.model_validate_json(data)
    except (ValidationError, ValueError) as exc:
        raise SerializationError("decode", str(exc)) from exc


class StoreOutcome(str, Enum):
    """What happened during a persistence step."""

    LOADED = "loaded"
    MISSING = "missing"
    NORMALIZED = "normalized"
    SAVED = "saved"
    CLEARED = "cleared"
    ENCODE_FAILED = "encode_failed"
    DECODE_FAILED = "decode_failed"
    STORAGE_FAILED = "storage_failed"


T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Value produced by a store operation together with how it was obtained."""

    value: T
    outcome: StoreOutcome
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
