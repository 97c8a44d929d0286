"""Content classification rules and the access decision for a piece of content."""
from __future__ import annotations

from enum import Enum
from typing import Protocol

FREE_TRACK_COUNT = 2
CONTENT_IDS_PER_TRACK = 100


class PremiumStatusSource(Protocol):
    """Anything that can tell whether the current user holds an active subscription."""

    @property
    def is_premium(self) -> bool:
        ...


class FreeViewQuota(Protocol):
    """Read side of the daily free-view quota."""

    def has_quota_remaining(self) -> bool:
        ...

    def remaining_views(self) -> int:
        ...


class AccessDecision(str, Enum):
    """Reason a piece of content was opened or refused."""

    PREMIUM = "premium"
    FREE_TRACK = "free_track"
    FREE_VIEW_QUOTA = "free_view_quota"
    DENIED = "denied"

    @property
    def allowed(self) -> bool:
        return self is not AccessDecision.DENIED


def track_number(content_id: int) -> int:
    """Track a content id belongs to; ids 101 and 102 are track 1, 201 is track 2."""

    return content_id // CONTENT_IDS_PER_TRACK


def is_premium_track(track_index: int) -> bool:
    """Whether a zero-based track index is paid content; indexes 0 and 1 are free."""

    return track_index >= FREE_TRACK_COUNT


def is_premium_level(level_id: int) -> bool:
    return track_number(level_id) > FREE_TRACK_COUNT


class AccessPolicy:
    """Decides whether content can be opened right now.

    Premium users open everything. Free users always open the first two
    tracks; anything else consumes the daily free-view quota. Checking access
    never records a view.
    """

    def __init__(self, entitlements: PremiumStatusSource, quota: FreeViewQuota) -> None:
        self._entitlements = entitlements
        self._quota = quota

    def evaluate(self, content_id: int) -> AccessDecision:
        if self._entitlements.is_premium:
            return AccessDecision.PREMIUM
        if track_number(content_id) <= FREE_TRACK_COUNT:
            return AccessDecision.FREE_TRACK
        if self._quota.has_quota_remaining():
            return AccessDecision.FREE_VIEW_QUOTA
        return AccessDecision.DENIED

    def can_access_content(self, content_id: int) -> bool:
        return self.evaluate(content_id).allowed

    def remaining_views(self) -> int:
        return self._quota.remaining_views()
