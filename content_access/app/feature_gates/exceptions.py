"""Exceptions raised when a content gate refuses access."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException, status


class FeatureGateError(Exception):
    """A refused content or quota check, carrying a JSON-ready payload."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: int = status.HTTP_403_FORBIDDEN,
        detail: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.detail = dict(detail) if detail else {}

    @property
    def payload(self) -> Mapping[str, Any]:
        body: Dict[str, Any] = {"error": self.code, "message": self.message}
        body.update(self.detail)
        return body

    def to_http_exception(self) -> HTTPException:
        """Convert the gate failure into a FastAPI HTTPException."""

        return HTTPException(status_code=self.status_code, detail=dict(self.payload))
