"""Utility functions and helpers."""

from sfn_retry.utils.exceptions import (
    AuthenticationError,
    ConflictError,
    MalformedResponseError,
    RetryToolError,
    TransportError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "MalformedResponseError",
    "RetryToolError",
    "TransportError",
    "ValidationError",
]
