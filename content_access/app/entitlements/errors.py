"""Errors raised while encoding or decoding persisted entitlement state."""
from __future__ import annotations


class SerializationError(Exception):
    """Raised when a subscription record cannot be encoded or decoded."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"Failed to {operation} subscription record: {message}")
