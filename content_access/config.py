"""Configuration for the local entitlement store."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


@dataclass(frozen=True)
class AccessConfig:
    """Tunables for entitlement verification and the free-view quota."""

    max_free_views_per_day: int = 3
    verification_interval_hours: int = 24
    state_path: Optional[Path] = None
    day_timezone: tzinfo = timezone.utc


def _to_int(value: Optional[str], *, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected integer value, got {value!r}") from exc


def _to_timezone(value: Optional[str]) -> tzinfo:
    if value is None or value.strip() == "" or value.strip().upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(value.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone {value!r}") from exc


def load_access_config(env: Optional[Mapping[str, str]] = None) -> AccessConfig:
    """Load :class:`AccessConfig` from environment variables.

    When ``env`` is omitted a ``.env`` file is read first, then ``os.environ``.
    """

    if env is None:
        load_dotenv()
        env_mapping: Mapping[str, str] = os.environ
    else:
        env_mapping = env

    max_free_views = max(1, _to_int(env_mapping.get("ACCESS_MAX_FREE_VIEWS_PER_DAY"), default=3))
    verification_hours = max(
        1, _to_int(env_mapping.get("ACCESS_VERIFICATION_INTERVAL_HOURS"), default=24)
    )
    raw_path = (env_mapping.get("ACCESS_STATE_PATH") or "").strip()

    return AccessConfig(
        max_free_views_per_day=max_free_views,
        verification_interval_hours=verification_hours,
        state_path=Path(raw_path).expanduser() if raw_path else None,
        day_timezone=_to_timezone(env_mapping.get("ACCESS_DAY_TIMEZONE")),
    )
