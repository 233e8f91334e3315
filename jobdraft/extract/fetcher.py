"""
Job page fetcher.

Downloads the raw HTML of a job posting with a single HTTP GET.  Some
career sites reject clients that do not look like a browser, so a
browser ``User-Agent`` is always sent.  Failures are reported through
:class:`FetchResult` instead of exceptions so the pipeline can degrade
to an empty result; :meth:`Fetcher.fetch_or_raise` is available for
callers that prefer an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..config import DEFAULT_USER_AGENT
from ..errors import FetchFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch.  ``text`` is empty whenever ``ok`` is False."""

    url: str
    status_code: Optional[int]
    text: str
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error and self.status_code is not None and 200 <= self.status_code < 300


class Fetcher:
    """Single-attempt HTTP fetcher with a bounded timeout."""

    def __init__(self, *, user_agent: str = DEFAULT_USER_AGENT, timeout: float = 15.0) -> None:
        self.timeout = timeout
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    def fetch(self, url: str) -> FetchResult:
        """GET ``url`` once.

        Returns:
            A :class:`FetchResult`.  Timeouts, connection errors and
            non-2xx statuses all produce a failed result with empty text.
        """
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.Timeout:
            logger.warning("Timed out after %.1fs fetching %s", self.timeout, url)
            return FetchResult(url=url, status_code=None, text="", error="timeout")
        except requests.RequestException as exc:
            logger.warning("Error fetching %s: %s", url, exc)
            return FetchResult(url=url, status_code=None, text="", error=str(exc) or exc.__class__.__name__)
        if not 200 <= response.status_code < 300:
            logger.warning("Fetching %s returned HTTP %d", url, response.status_code)
            return FetchResult(
                url=url,
                status_code=response.status_code,
                text="",
                error=f"HTTP {response.status_code}",
            )
        logger.debug("Fetched %s (%d chars)", url, len(response.text))
        return FetchResult(url=url, status_code=response.status_code, text=response.text)

    def fetch_or_raise(self, url: str) -> str:
        """Like :meth:`fetch` but raise :class:`FetchFailure` on failure."""
        result = self.fetch(url)
        if not result.ok:
            raise FetchFailure(url, status_code=result.status_code, reason=result.error)
        return result.text
