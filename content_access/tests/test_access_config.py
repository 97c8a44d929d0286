from __future__ import annotations

from datetime import timezone
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from content_access.config import AccessConfig, load_access_config


def test_defaults_when_environment_is_empty():
    config = load_access_config({})

    assert config == AccessConfig()
    assert config.max_free_views_per_day == 3
    assert config.verification_interval_hours == 24
    assert config.state_path is None
    assert config.day_timezone is timezone.utc


def test_environment_overrides():
    config = load_access_config(
        {
            "ACCESS_MAX_FREE_VIEWS_PER_DAY": "5",
            "ACCESS_VERIFICATION_INTERVAL_HOURS": "12",
            "ACCESS_STATE_PATH": "/var/lib/content-access/state.json",
            "ACCESS_DAY_TIMEZONE": "UTC",
        }
    )

    assert config.max_free_views_per_day == 5
    assert config.verification_interval_hours == 12
    assert config.state_path == Path("/var/lib/content-access/state.json")


def test_values_are_clamped_to_one():
    config = load_access_config(
        {"ACCESS_MAX_FREE_VIEWS_PER_DAY": "0", "ACCESS_VERIFICATION_INTERVAL_HOURS": "-4"}
    )

    assert config.max_free_views_per_day == 1
    assert config.verification_interval_hours == 1


def test_invalid_integer_raises():
    with pytest.raises(ValueError):
        load_access_config({"ACCESS_MAX_FREE_VIEWS_PER_DAY": "three"})


def test_named_timezone_is_resolved():
    try:
        ZoneInfo("Asia/Seoul")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")

    config = load_access_config({"ACCESS_DAY_TIMEZONE": "Asia/Seoul"})

    assert str(config.day_timezone) == "Asia/Seoul"


def test_unknown_timezone_raises():
    with pytest.raises(ValueError):
        load_access_config({"ACCESS_DAY_TIMEZONE": "Mars/Olympus_Mons"})
