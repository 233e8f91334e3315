"""
Exception types raised by jobdraft.

Every error the package raises on purpose derives from
:class:`JobDraftError`, so callers (the CLI in particular) can catch one
base class and show the message to the user.
"""

from __future__ import annotations

from typing import Optional


class JobDraftError(Exception):
    """Base class for all jobdraft errors."""


class InvalidRequest(JobDraftError, ValueError):
    """Input was rejected before any network call was made."""


class FetchFailure(JobDraftError):
    """A job page could not be downloaded.

    Carries the HTTP status code when the server answered, or ``None``
    for network errors and timeouts.
    """

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}" if status_code is not None else (reason or "network error")
        super().__init__(f"Failed to fetch {url}: {detail}")


class ParseFailure(JobDraftError):
    """The model reply was not valid JSON or did not match the schema."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(message)


class QuotaFailure(JobDraftError):
    """The model provider rejected the call with a rate limit (HTTP 429)."""

    status_code = 429

    def __init__(self, model: str, message: str = "") -> None:
        self.model = model
        super().__init__(message or f"Rate limit reached for model {model}")


class ModelError(JobDraftError):
    """The model provider is unusable or returned nothing."""
