"""Classified failures raised by the weather pipeline."""

from __future__ import annotations

from typing import Optional


class MausamError(Exception):
    """Base class for every failure the CLI knows how to report."""

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        return f"{self.operation}: {self.message}"


class ConfigError(MausamError):
    """Required configuration is missing; nothing else is attempted."""


class EmptyInputError(MausamError):
    """An explicit place was given but contained only whitespace."""


class NetworkError(MausamError):
    """A provider could not be reached or refused to answer."""

    def __init__(
        self, message: str, operation: str, status: Optional[int] = None
    ) -> None:
        super().__init__(message, operation)
        self.status = status


class TransientError(NetworkError):
    """Timeouts, connection failures and 5xx responses; safe to retry."""


class RetriesExhaustedError(TransientError):

    def __init__(self, operation: str, attempts: int) -> None:
        super().__init__(f"gave up after {attempts} attempts", operation)
        self.attempts = attempts


class ClientError(MausamError):
    """A 4xx answer: bad query or invalid API key. Never retried."""

    def __init__(self, status: int, query: str, operation: str, detail: str = "") -> None:
        message = f"request for {query!r} was rejected with status {status}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, operation)
        self.status = status
        self.query = query
        self.detail = detail


class DataFormatError(MausamError):
    """A response body did not have the expected shape."""

    def __init__(self, message: str, operation: str, excerpt: str = "") -> None:
        if excerpt:
            message = f"{message}; body starts with: {excerpt!r}"
        super().__init__(message, operation)
        self.excerpt = excerpt


class NumericError(MausamError):
    """A temperature was NaN or infinite."""


EXCERPT_LIMIT = 200


def body_excerpt(text: str, limit: int = EXCERPT_LIMIT) -> str:
    """Return at most ``limit`` characters of a response body for diagnostics."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
