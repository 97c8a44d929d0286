"""Content gating: classification rules, free-view quota and enforcement."""
from .context import AccessContext
from .enforcement import require_content_access
from .exceptions import FeatureGateError
from .policy import (
    AccessDecision,
    AccessPolicy,
    is_premium_level,
    is_premium_track,
    track_number,
)
from .quota import (
    FREE_CONTENT_VIEW_COUNT_KEY,
    FreeViewQuotaEvaluation,
    FreeViewQuotaTracker,
    assert_view_quota,
    prune_ledger,
)

__all__ = [
    "AccessContext",
    "AccessDecision",
    "AccessPolicy",
    "FREE_CONTENT_VIEW_COUNT_KEY",
    "FeatureGateError",
    "FreeViewQuotaEvaluation",
    "FreeViewQuotaTracker",
    "assert_view_quota",
    "is_premium_level",
    "is_premium_track",
    "prune_ledger",
    "require_content_access",
    "track_number",
]
