"""Helpers for enforcing content access checks on API and service layers."""
from __future__ import annotations

from .exceptions import FeatureGateError
from .policy import AccessDecision, AccessPolicy, track_number


def require_content_access(
    policy: AccessPolicy,
    content_id: int,
    *,
    error_code: str = "content_locked",
    message: str | None = None,
) -> AccessDecision:
    """Ensure a piece of content may be opened before proceeding.

    Parameters
    ----------
    policy:
        The :class:`AccessPolicy` evaluating the current user's entitlements.
    content_id:
        Identifier of the content about to be opened.
    error_code:
        Optional override for the surfaced error code when access is refused.
        Defaults to ``"content_locked"``.
    message:
        Optional human-friendly message explaining the failure. If omitted, a
        default message mentioning the content id is used.

    Returns the decision so callers can tell whether the view counts against
    the free quota.
    """

    decision = policy.evaluate(content_id)

    if not decision.allowed:
        failure_message = message or f"Content {content_id} requires a premium subscription."
        raise FeatureGateError(
            code=error_code,
            message=failure_message,
            detail={
                "content_id": content_id,
                "track": track_number(content_id),
                "remaining_free_views": policy.remaining_views(),
            },
        )
    return decision
