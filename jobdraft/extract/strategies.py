"""
Field recovery strategies.

Every strategy turns an :class:`ExtractionRequest` into an
:class:`ExtractionResult` the same way: fetch the page, normalize it,
then recover the job title, company name and description.  Only the
last step differs between implementations:

* :class:`HeuristicStrategy` – rules over the HTML and normalized text,
  no model call.
* :class:`ModelAssistedStrategy` – asks a language model for a JSON
  object with the three fields.
* :class:`ModelWithFallbackStrategy` – as above, but retries once on a
  secondary model when the primary one is rate limited.

A failed fetch degrades to an empty result under every strategy; the
model is never called with an empty page.  Strategies hold only
configuration, so one instance can serve concurrent requests.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

from bs4 import BeautifulSoup

from ..config import Settings
from ..errors import QuotaFailure
from ..llm.output import parse_json_object
from ..llm.providers import LLMProvider, get_provider
from .fetcher import Fetcher
from .normalizer import DEFAULT_MAX_CHARS, NON_CONTENT_TAGS, extract_body, normalize_html
from .schema import RESULT_KEYS, ExtractionRequest, ExtractionResult

logger = logging.getLogger(__name__)


class ExtractionStrategy(ABC):
    """Fetch, normalize and recover fields for one request."""

    name = "base"

    def __init__(self, *, fetcher: Optional[Fetcher] = None, max_chars: int = DEFAULT_MAX_CHARS) -> None:
        self.fetcher = fetcher or Fetcher()
        self.max_chars = max_chars

    def extract(self, request: ExtractionRequest) -> ExtractionResult:
        fetched = self.fetcher.fetch(request.job_url)
        if not fetched.ok:
            logger.warning("Extraction degraded to empty result for %s (%s)", request.job_url, fetched.error)
            return ExtractionResult.empty()
        content = normalize_html(fetched.text, self.max_chars)
        result = self.recover(request, fetched.text, content)
        logger.info(
            "Extracted %s via %s: title=%r company=%r description=%d chars",
            request.job_url,
            self.name,
            result.job_title,
            result.company_name,
            len(result.job_description),
        )
        return result

    @abstractmethod
    def recover(self, request: ExtractionRequest, html: str, content: str) -> ExtractionResult:
        """Produce the result fields from the raw HTML and normalized text."""
        raise NotImplementedError


class HeuristicStrategy(ExtractionStrategy):
    """Rule based field recovery.  Deterministic for identical HTML."""

    name = "heuristic"

    DESCRIPTION_ANCHORS = ("About the job", "Job Description", "Responsibilities")

    # The value may follow on the next line or after one blank line, since
    # "<b>Company:</b> X" normalizes to "Company:\n X".
    _TITLE_LABEL_RE = re.compile(r"\bjob\s+title\s*:[ \t]*(?:\n[ \t]*){0,2}(\S[^\n]*)", re.IGNORECASE)
    _COMPANY_LABEL_RE = re.compile(r"\bcompany\s*:[ \t]*(?:\n[ \t]*){0,2}(\S[^\n]*)", re.IGNORECASE)
    # "at" followed by one or more capitalised words on the same line
    _AT_COMPANY_RE = re.compile(r"\b[Aa]t[ \t]+([A-Z][\w&'.-]*(?:[ \t]+[A-Z][\w&'.-]*)*)")
    _PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
    # Capitalised words after "at" that do not start a company name
    AT_STOPWORDS = frozenset(
        ("The", "Our", "This", "That", "These", "Least", "Most", "Once", "All", "Any", "Times", "Home", "Your")
    )

    def recover(self, request: ExtractionRequest, html: str, content: str) -> ExtractionResult:
        return ExtractionResult(
            job_title=self.find_title(html, content),
            company_name=self.find_company(content),
            job_description=self.find_description(content),
        )

    def find_title(self, html: str, content: str) -> str:
        # Same page region the normalizer keeps: body only, no site chrome.
        soup = BeautifulSoup(extract_body(html), "html.parser")
        for element in soup.find_all(list(NON_CONTENT_TAGS)):
            if not element.decomposed:  # nested inside one already removed
                element.decompose()
        h1 = soup.find("h1")
        if h1 is not None:
            title = h1.get_text(" ", strip=True)
            if title:
                return title
        match = self._TITLE_LABEL_RE.search(content)
        return match.group(1).strip() if match else ""

    def find_company(self, content: str) -> str:
        match = self._COMPANY_LABEL_RE.search(content)
        if match and match.group(1).strip():
            return match.group(1).strip()
        for match in self._AT_COMPANY_RE.finditer(content):
            name = match.group(1).rstrip(".,;:")
            if name.split()[0] not in self.AT_STOPWORDS:
                return name
        return ""

    def find_description(self, content: str) -> str:
        for anchor in self.DESCRIPTION_ANCHORS:
            match = re.search(rf"\b{re.escape(anchor)}\b", content, re.IGNORECASE)
            if not match:
                continue
            rest = content[match.end():].lstrip(" \t:-").strip()
            block = self._PARAGRAPH_BREAK_RE.split(rest, maxsplit=1)[0].strip()
            if block:
                return block
        return content


class ModelAssistedStrategy(ExtractionStrategy):
    """Ask a language model to pull the fields out of the page text."""

    name = "model"

    SYSTEM_PROMPT = (
        "You are an expert web scraper and data extractor. You will be given the "
        "text content of a job posting page. Identify the job title, the hiring "
        "company's name and the main job description (responsibilities, "
        "qualifications and other relevant details). Ignore navigation, headers, "
        "footers and other unrelated page content.\n\n"
        "Return a valid JSON object with exactly these keys: \"jobTitle\", "
        "\"companyName\", \"jobDescription\". If you cannot confidently determine "
        "a value, use an empty string for it."
    )

    def __init__(
        self,
        provider: LLMProvider,
        *,
        model: Optional[str] = None,
        fetcher: Optional[Fetcher] = None,
        max_chars: int = DEFAULT_MAX_CHARS,
    ) -> None:
        super().__init__(fetcher=fetcher, max_chars=max_chars)
        self.provider = provider
        self.model = model

    def recover(self, request: ExtractionRequest, html: str, content: str) -> ExtractionResult:
        if not content:
            logger.info("No text content at %s; skipping model call", request.job_url)
            return ExtractionResult.empty()
        user = f"Job URL: {request.job_url}\n\nPage content:\n{content}"
        reply = self.complete(self.SYSTEM_PROMPT, user)
        data = parse_json_object(reply, RESULT_KEYS, what="job extraction reply")
        return ExtractionResult.from_model_output(data)

    def complete(self, system: str, user: str) -> str:
        return self.provider.complete(system, user, model=self.model, json_mode=True)


class ModelWithFallbackStrategy(ModelAssistedStrategy):
    """Model assisted extraction with one retry on a secondary model.

    Only a rate limit on the primary model triggers the retry.  The
    secondary model is tried exactly once; its errors propagate.
    """

    name = "model_fallback"

    def __init__(
        self,
        provider: LLMProvider,
        *,
        fallback_model: str,
        model: Optional[str] = None,
        fetcher: Optional[Fetcher] = None,
        max_chars: int = DEFAULT_MAX_CHARS,
    ) -> None:
        super().__init__(provider, model=model, fetcher=fetcher, max_chars=max_chars)
        self.fallback_model = fallback_model

    def complete(self, system: str, user: str) -> str:
        try:
            return super().complete(system, user)
        except QuotaFailure as exc:
            logger.warning(
                "Model %s rate limited (%s); retrying once with %s",
                exc.model,
                exc,
                self.fallback_model,
            )
        return self.provider.complete(system, user, model=self.fallback_model, json_mode=True)


def build_strategy(
    settings: Settings,
    *,
    provider: Optional[LLMProvider] = None,
    fetcher: Optional[Fetcher] = None,
) -> ExtractionStrategy:
    """Create the strategy named by ``settings.strategy``.

    A provider is only resolved (via :func:`get_provider`) for the model
    based strategies.  When the provider is not the configured one, the
    configured fallback model belongs to another service, so the
    provider's own ``fallback_model`` is used instead.
    """
    fetcher = fetcher or Fetcher(user_agent=settings.user_agent, timeout=settings.fetch_timeout)
    if settings.strategy == "heuristic":
        return HeuristicStrategy(fetcher=fetcher, max_chars=settings.max_content_chars)
    provider = provider or get_provider(settings)
    if settings.strategy == "model":
        return ModelAssistedStrategy(
            provider,
            fetcher=fetcher,
            max_chars=settings.max_content_chars,
        )
    fallback_model = settings.llm_fallback_model
    if provider.name != settings.llm_provider and provider.fallback_model:
        logger.info(
            "Provider %s stands in for %s; rate limit fallback uses %s",
            provider.name,
            settings.llm_provider,
            provider.fallback_model,
        )
        fallback_model = provider.fallback_model
    return ModelWithFallbackStrategy(
        provider,
        fallback_model=fallback_model,
        fetcher=fetcher,
        max_chars=settings.max_content_chars,
    )
