from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping

import pytest

from content_access.app.feature_gates import (
    FREE_CONTENT_VIEW_COUNT_KEY,
    FeatureGateError,
    FreeViewQuotaEvaluation,
    FreeViewQuotaTracker,
    assert_view_quota,
    prune_ledger,
)
from content_access.app.storage import InMemoryKeyValueStore, StorageError

NOW = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class ReadOnlyKeyValueStore(InMemoryKeyValueStore):
    def set_mapping(self, key: str, value: Mapping[str, Any]) -> None:
        raise StorageError(key, "read-only volume")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def tracker(kv_store, clock) -> FreeViewQuotaTracker:
    return FreeViewQuotaTracker(kv_store, clock=clock)


def _days_ago(days: int) -> str:
    return (TODAY - timedelta(days=days)).isoformat()


def test_empty_ledger_has_full_quota(tracker):
    assert tracker.view_count_today() == 0
    assert tracker.has_quota_remaining() is True
    assert tracker.remaining_views() == 3


def test_three_views_exhaust_default_quota(tracker):
    for expected in (1, 2, 3):
        assert tracker.record_view() == expected

    assert tracker.view_count_today() == 3
    assert tracker.has_quota_remaining() is False
    assert tracker.remaining_views() == 0

    assert tracker.record_view() == 4
    assert tracker.view_count_today() == 4
    assert tracker.remaining_views() == 0


def test_record_view_prunes_old_entries(tracker, kv_store):
    kv_store.set_mapping(FREE_CONTENT_VIEW_COUNT_KEY, {_days_ago(10): 2})

    tracker.record_view()

    assert kv_store.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY) == {TODAY.isoformat(): 1}


def test_reads_do_not_prune(tracker, kv_store):
    kv_store.set_mapping(FREE_CONTENT_VIEW_COUNT_KEY, {_days_ago(10): 2})

    assert tracker.view_count_today() == 0
    assert tracker.remaining_views() == 3

    assert kv_store.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY) == {_days_ago(10): 2}


def test_retention_window_is_seven_calendar_days(tracker, kv_store):
    kv_store.set_mapping(
        FREE_CONTENT_VIEW_COUNT_KEY,
        {_days_ago(6): 3, _days_ago(7): 1, _days_ago(1): 2},
    )

    tracker.record_view()

    assert kv_store.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY) == {
        _days_ago(6): 3,
        _days_ago(1): 2,
        TODAY.isoformat(): 1,
    }


def test_unparseable_entries_are_dropped_on_write(tracker, kv_store):
    kv_store.set_mapping(
        FREE_CONTENT_VIEW_COUNT_KEY,
        {"yesterday": 4, _days_ago(2): "many", TODAY.isoformat(): 1},
    )

    assert tracker.view_count_today() == 1

    tracker.record_view()

    assert kv_store.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY) == {TODAY.isoformat(): 2}


def test_counter_resets_at_midnight(kv_store):
    clock = FakeClock(datetime(2025, 3, 10, 23, 30, tzinfo=timezone.utc))
    tracker = FreeViewQuotaTracker(kv_store, clock=clock)
    tracker.record_view()
    tracker.record_view()

    clock.advance(hours=1)

    assert tracker.view_count_today() == 0
    assert tracker.record_view() == 1
    assert kv_store.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY) == {
        "2025-03-10": 2,
        "2025-03-11": 1,
    }


def test_day_keys_follow_configured_timezone(kv_store):
    clock = FakeClock(datetime(2025, 3, 10, 23, 30, tzinfo=timezone.utc))
    tracker = FreeViewQuotaTracker(
        kv_store,
        clock=clock,
        day_timezone=timezone(timedelta(hours=9)),
    )

    tracker.record_view()

    assert tracker.today() == date(2025, 3, 11)
    assert kv_store.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY) == {"2025-03-11": 1}


def test_custom_daily_limit(kv_store, clock):
    tracker = FreeViewQuotaTracker(kv_store, clock=clock, max_free_views_per_day=1)

    tracker.record_view()

    assert tracker.has_quota_remaining() is False
    assert tracker.max_free_views_per_day == 1


def test_prune_ledger_keeps_future_days():
    ledger = {TODAY + timedelta(days=1): 1, TODAY - timedelta(days=8): 5}

    assert prune_ledger(ledger, TODAY) == {TODAY + timedelta(days=1): 1}


def test_evaluation_snapshot(tracker):
    tracker.record_view()

    evaluation = tracker.evaluate()

    assert isinstance(evaluation, FreeViewQuotaEvaluation)
    assert evaluation.to_dict() == {
        "views_today": 1,
        "max_views": 3,
        "remaining": 2,
        "allowed": True,
    }


def test_assert_view_quota_raises_when_exhausted(tracker):
    assert_view_quota(tracker)
    for _ in range(3):
        tracker.record_view()

    with pytest.raises(FeatureGateError) as exc:
        assert_view_quota(tracker)

    assert exc.value.code == "free_view_quota_exceeded"
    assert exc.value.payload["views_today"] == 3
    assert exc.value.payload["max_views"] == 3


def test_write_failure_is_logged_not_raised(clock, caplog):
    tracker = FreeViewQuotaTracker(ReadOnlyKeyValueStore(), clock=clock)

    assert tracker.record_view() == 1
    assert tracker.view_count_today() == 0
    assert "Failed to persist free view ledger" in caplog.text


def test_naive_clock_is_read_as_utc(kv_store):
    clock = FakeClock(datetime(2025, 3, 10, 23, 30))
    tracker = FreeViewQuotaTracker(
        kv_store, clock=clock, day_timezone=timezone(timedelta(hours=2))
    )

    tracker.record_view()

    assert tracker.today() == date(2025, 3, 11)
    assert kv_store.get_mapping(FREE_CONTENT_VIEW_COUNT_KEY) == {"2025-03-11": 1}
