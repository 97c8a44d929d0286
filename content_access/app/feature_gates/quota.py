"""Daily free-view quota backed by a rolling per-day ledger."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, ContextManager, Dict, Mapping, Optional

from ..storage import KeyValueStore, StorageError
from .exceptions import FeatureGateError

FREE_CONTENT_VIEW_COUNT_KEY = "free_content_view_count"
DEFAULT_MAX_FREE_VIEWS_PER_DAY = 3
LEDGER_RETENTION_DAYS = 7

logger = logging.getLogger(__name__)


def day_key(day: date) -> str:
    return day.isoformat()


def parse_day_key(key: object) -> Optional[date]:
    if not isinstance(key, str):
        return None
    try:
        return date.fromisoformat(key)
    except ValueError:
        return None


def prune_ledger(
    ledger: Mapping[date, int],
    today: date,
    *,
    retention_days: int = LEDGER_RETENTION_DAYS,
) -> Dict[date, int]:
    """Drop every day that lies ``retention_days`` or more calendar days before ``today``."""

    return {day: count for day, count in ledger.items() if (today - day).days < retention_days}


@dataclass(frozen=True)
class FreeViewQuotaEvaluation:
    """Snapshot of the free-view quota for the current day."""

    views_today: int
    max_views: int
    remaining: int
    allowed: bool

    def to_dict(self) -> dict[str, int | bool]:
        """Serialize the evaluation for logging or telemetry."""

        return {
            "views_today": self.views_today,
            "max_views": self.max_views,
            "remaining": self.remaining,
            "allowed": self.allowed,
        }


class FreeViewQuotaTracker:
    """Counts free content views per calendar day.

    Day boundaries follow ``day_timezone`` so two checks on the same local
    day always hit the same ledger entry. Old days are pruned only when a
    view is recorded; reads never rewrite the ledger.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        *,
        max_free_views_per_day: int = DEFAULT_MAX_FREE_VIEWS_PER_DAY,
        clock: Optional[Callable[[], datetime]] = None,
        day_timezone: Optional[tzinfo] = None,
        lock: Optional[ContextManager] = None,
    ) -> None:
        self._kv = kv_store
        self._max_free_views = max(max_free_views_per_day, 0)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._timezone = day_timezone or timezone.utc
        self._lock = lock if lock is not None else threading.RLock()

    @property
    def max_free_views_per_day(self) -> int:
        return self._max_free_views

    @property
    def lock(self) -> ContextManager:
        return self._lock

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def today(self) -> date:
        return self._now().astimezone(self._timezone).date()

    def ledger(self) -> Dict[date, int]:
        """Return the persisted ledger keyed by calendar date.

        Entries whose key is not a calendar date or whose count is not an
        integer are skipped.
        """

        try:
            raw = self._kv.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY)
        except StorageError as exc:
            logger.warning("Failed to read free view ledger: %s", exc)
            return {}

        ledger: Dict[date, int] = {}
        for key, count in raw.items():
            day = parse_day_key(key)
            if day is None or isinstance(count, bool) or not isinstance(count, int):
                continue
            ledger[day] = count
        return ledger

    def view_count_today(self) -> int:
        return self.ledger().get(self.today(), 0)

    def record_view(self) -> int:
        """Prune stale days, count one view for today and persist; returns today's count."""

        with self._lock:
            today = self.today()
            current = self.ledger()
            pruned = prune_ledger(current, today)
            if len(pruned) != len(current):
                logger.debug("Pruned %d stale free view entries", len(current) - len(pruned))
            pruned[today] = pruned.get(today, 0) + 1

            try:
                self._kv.set_mapping(
                    FREE_CONTENT_VIEW_COUNT_KEY,
                    {day_key(day): count for day, count in pruned.items()},
                )
            except StorageError as exc:
                logger.warning("Failed to persist free view ledger: %s", exc)
            return pruned[today]

    def has_quota_remaining(self) -> bool:
        return self.view_count_today() < self._max_free_views

    def remaining_views(self) -> int:
        return max(0, self._max_free_views - self.view_count_today())

    def evaluate(self) -> FreeViewQuotaEvaluation:
        views_today = self.view_count_today()
        return FreeViewQuotaEvaluation(
            views_today=views_today,
            max_views=self._max_free_views,
            remaining=max(0, self._max_free_views - views_today),
            allowed=views_today < self._max_free_views,
        )


def assert_view_quota(
    tracker: FreeViewQuotaTracker,
    *,
    error_code: str = "free_view_quota_exceeded",
) -> FreeViewQuotaEvaluation:
    """Raise when today's free views are used up."""

    evaluation = tracker.evaluate()
    if not evaluation.allowed:
        raise FeatureGateError(
            code=error_code,
            message="Daily free view limit reached.",
            detail={
                "views_today": evaluation.views_today,
                "max_views": evaluation.max_views,
            },
        )
    return evaluation
