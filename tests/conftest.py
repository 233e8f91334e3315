"""Shared fixtures: canned fetchers and scripted LLM providers.

Nothing here touches the network.  `make_fetcher` returns a fetcher
that replays a fixed page, and `make_provider` returns an
``LLMProvider`` whose replies (or exceptions) are scripted up front
and whose calls are recorded for assertions.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from jobdraft.config import Settings
from jobdraft.extract.fetcher import Fetcher, FetchResult
from jobdraft.llm.providers import LLMProvider

ENV_VARS = (
    "JOBDRAFT_STRATEGY",
    "JOBDRAFT_MAX_CHARS",
    "JOBDRAFT_FETCH_TIMEOUT",
    "JOBDRAFT_USER_AGENT",
    "LLM_PROVIDER",
    "LLM_MODEL",
    "LLM_FALLBACK_MODEL",
    "LLM_TIMEOUT",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "GROQ_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
)


class CannedFetcher(Fetcher):
    """Fetcher that returns the same result for every URL."""

    def __init__(self, html: str = "", status_code: Optional[int] = 200, error: str = "") -> None:
        super().__init__()
        self.html = html
        self.status_code = status_code
        self.error = error
        self.urls: List[str] = []

    def fetch(self, url: str) -> FetchResult:
        self.urls.append(url)
        ok = not self.error and self.status_code is not None and 200 <= self.status_code < 300
        return FetchResult(
            url=url,
            status_code=self.status_code,
            text=self.html if ok else "",
            error=self.error or ("" if ok else f"HTTP {self.status_code}"),
        )


class ScriptedProvider(LLMProvider):
    """Provider that plays back replies; exceptions in the script are raised."""

    name = "scripted"

    def __init__(self, *replies: object, model: str = "primary-model") -> None:
        self.replies = list(replies)
        self.model = model
        self.calls: List[Dict[str, object]] = []

    def complete(self, system: str, user: str, *, model: Optional[str] = None, json_mode: bool = False) -> str:
        self.calls.append({"system": system, "user": user, "model": model or self.model, "json_mode": json_mode})
        if not self.replies:
            raise AssertionError("ScriptedProvider ran out of replies")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply  # type: ignore[return-value]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate tests from the developer's environment and any .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_fetcher():
    return CannedFetcher


@pytest.fixture
def make_provider():
    return ScriptedProvider


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def posting_html() -> str:
    return (
        "<html><head><title>Careers</title><style>.x { color: red; }</style></head>"
        "<body>"
        "<header><a href='/'>Home</a> <a href='/jobs'>All jobs</a></header>"
        "<nav><ul><li>Benefits</li><li>Teams</li></ul></nav>"
        "<script>window.analytics = {track: function() {}};</script>"
        "<h1>Senior Data Engineer</h1>"
        "<p>Join our platform team at Acme Robotics.</p>"
        "<h2>Job Description</h2>"
        "<p>You will design and operate streaming pipelines.</p>"
        "<h2>Responsibilities</h2>"
        "<ul><li>Own the ingestion layer</li><li>Mentor engineers</li></ul>"
        "<aside>Similar jobs: Data Analyst</aside>"
        "<footer>Copyright Acme</footer>"
        "</body></html>"
    )
