"""Facade bundling the access policy with the free-view quota it consumes."""
from __future__ import annotations

from dataclasses import dataclass

from .enforcement import require_content_access
from .policy import AccessDecision, AccessPolicy
from .quota import FreeViewQuotaEvaluation, FreeViewQuotaTracker


@dataclass(frozen=True)
class AccessContext:
    """Gating helpers for the UI and content layer."""

    policy: AccessPolicy
    quota: FreeViewQuotaTracker

    def can_open(self, content_id: int) -> bool:
        return self.policy.can_access_content(content_id)

    def require(self, content_id: int, *, error_code: str = "content_locked") -> AccessDecision:
        return require_content_access(self.policy, content_id, error_code=error_code)

    def open_content(self, content_id: int) -> AccessDecision:
        """Check access and, when the view is paid for by the daily quota, record it.

        The check and the increment run under the tracker's lock so two callers
        cannot both spend the last free view.
        """

        with self.quota.lock:
            decision = self.require(content_id)
            if decision is AccessDecision.FREE_VIEW_QUOTA:
                self.quota.record_view()
            return decision

    def quota_status(self) -> FreeViewQuotaEvaluation:
        return self.quota.evaluate()
