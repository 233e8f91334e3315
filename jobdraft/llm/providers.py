"""
LLM provider abstractions.

This module defines a common interface for the large language model
(LLM) services jobdraft talks to.  Concrete implementations are provided
for OpenAI, Groq (through its OpenAI compatible endpoint) and Gemini
(Google Generative AI).  Applications select the provider via
configuration (see :mod:`jobdraft.config`) or pass an instance of
``LLMProvider`` directly.

Each provider makes exactly one API call per :meth:`LLMProvider.complete`
invocation: SDK level retries are switched off and every call is bounded
by a timeout.  Retrying is left to the caller; the only retry in the
package lives in the fallback extraction strategy.  Replies are returned
as they arrive, including empty ones, so that validating them stays with
the caller (see :func:`jobdraft.llm.output.parse_json_object`).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..config import Settings
from ..errors import ModelError, QuotaFailure

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_TIMEOUT = 60.0


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name = "base"
    #: Model used when ``complete`` is called without ``model``.
    model: str
    #: Secondary model for rate limit retries when this provider stands in
    #: for the configured one.
    fallback_model: str = ""

    @abstractmethod
    def complete(self, system: str, user: str, *, model: Optional[str] = None, json_mode: bool = False) -> str:
        """Send a system/user message pair and return the reply text.

        Args:
            system: System instruction.
            user: User message.
            model: Model name overriding the provider default.
            json_mode: Ask the service to force a JSON object reply.

        Returns:
            The reply text, possibly empty.

        Raises:
            QuotaFailure: If the service reports a rate limit (HTTP 429).
            ModelError: If the service call fails for any other reason.
        """
        raise NotImplementedError


class OpenAIProvider(LLMProvider):
    """Provider that uses the OpenAI chat completions API."""

    name = "openai"
    fallback_model = "gpt-3.5-turbo"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: object | None = None,
    ) -> None:
        try:
            import openai  # type: ignore
        except ImportError as exc:
            raise ModelError(
                "openai package is required for OpenAIProvider. Install it via pip."
            ) from exc
        self.openai = openai
        self.api_key = api_key
        self.model = model
        if not self.api_key:
            raise ModelError(f"API key for {self.name} not provided")
        # One HTTP attempt per call; a 429 must reach the caller untouched.
        self.client = openai.OpenAI(
            api_key=self.api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    def complete(self, system: str, user: str, *, model: Optional[str] = None, json_mode: bool = False) -> str:
        model_name = model or self.model
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        kwargs: Dict[str, object] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        logger.debug("Sending prompt to %s/%s: %s", self.name, model_name, user[:200])
        try:
            response = self.client.chat.completions.create(
                model=model_name,
                messages=messages,
                temperature=0.0,
                **kwargs,
            )
        except self.openai.RateLimitError as exc:
            raise QuotaFailure(model_name, str(exc)) from exc
        except self.openai.APIError as exc:
            raise ModelError(f"{self.name} model {model_name} call failed: {exc}") from exc
        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.warning("%s model %s returned an empty response", self.name, model_name)
            return ""
        return content


class GroqProvider(OpenAIProvider):
    """Groq models served through the OpenAI compatible endpoint."""

    name = "groq"
    fallback_model = "llama-3.1-8b-instant"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "llama3-8b-8192",
        timeout: float = DEFAULT_TIMEOUT,
        http_client: object | None = None,
    ) -> None:
        super().__init__(
            api_key=api_key,
            model=model,
            base_url=GROQ_BASE_URL,
            timeout=timeout,
            http_client=http_client,
        )


class GeminiProvider(LLMProvider):
    """Provider that uses Google Generative AI (Gemini) via google‑generativeai."""

    name = "gemini"
    fallback_model = "gemini-1.5-flash-8b"

    def __init__(self, api_key: str | None = None, model: str = "gemini-1.5-flash", timeout: float = DEFAULT_TIMEOUT) -> None:
        try:
            import google.generativeai as genai  # type: ignore
            from google.api_core import exceptions as google_exceptions  # type: ignore
        except ImportError as exc:
            raise ModelError(
                "google-generativeai package is required for GeminiProvider. Install it via pip."
            ) from exc
        self.genai = genai
        self.google_exceptions = google_exceptions
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        if not self.api_key:
            raise ModelError("GEMINI_API_KEY/GOOGLE_API_KEY not provided")
        self.genai.configure(api_key=self.api_key)

    def complete(self, system: str, user: str, *, model: Optional[str] = None, json_mode: bool = False) -> str:
        model_name = model or self.model
        generation_config: Dict[str, object] = {"temperature": 0.0}
        if json_mode:
            generation_config["response_mime_type"] = "application/json"
        logger.debug("Sending prompt to gemini/%s: %s", model_name, user[:200])
        gen_model = self.genai.GenerativeModel(model_name, system_instruction=system)
        try:
            response = gen_model.generate_content(
                user,
                generation_config=generation_config,
                request_options={"timeout": self.timeout},
            )
        except self.google_exceptions.ResourceExhausted as exc:
            raise QuotaFailure(model_name, str(exc)) from exc
        except self.google_exceptions.GoogleAPICallError as exc:
            raise ModelError(f"gemini model {model_name} call failed: {exc}") from exc
        try:
            content = response.text
        except ValueError as exc:
            # .text raises when the candidate was blocked or carries no parts
            logger.warning("gemini model %s returned no text: %s", model_name, exc)
            return ""
        return content or ""


def _build(name: str, settings: Settings, *, configured_model: bool = True) -> LLMProvider:
    # Model names are provider specific; a substitute provider keeps its own default.
    kwargs: Dict[str, object] = {"timeout": settings.llm_timeout}
    if configured_model:
        kwargs["model"] = settings.llm_model
    if name == "groq":
        return GroqProvider(settings.groq_api_key, **kwargs)
    if name == "openai":
        return OpenAIProvider(settings.openai_api_key, base_url=settings.openai_base_url, **kwargs)
    if name == "gemini":
        return GeminiProvider(settings.gemini_api_key, **kwargs)
    raise ModelError(f"Unknown LLM provider '{name}'")


def get_provider(settings: Settings) -> LLMProvider:
    """Return an LLMProvider instance based on configuration and API keys.

    The resolution order is:

    1. The provider named by ``settings.llm_provider``.  If it cannot
       be initialised (e.g. missing API key or package), a warning is
       logged and the automatic detection logic is used.
    2. The first of Groq, OpenAI and Gemini that has an API key
       configured.

    Raises:
        ModelError: If no provider can be initialised.
    """
    try:
        return _build(settings.llm_provider, settings)
    except ModelError as exc:
        logger.warning("LLM_PROVIDER=%s but failed to initialise provider: %s", settings.llm_provider, exc)
    available = {
        "groq": settings.groq_api_key,
        "openai": settings.openai_api_key,
        "gemini": settings.gemini_api_key,
    }
    for name, key in available.items():
        if name == settings.llm_provider or not key:
            continue
        try:
            provider = _build(name, settings, configured_model=False)
        except ModelError as exc:
            logger.warning("Failed to initialise %s provider: %s", name, exc)
            continue
        logger.info("Using %s provider instead of %s", name, settings.llm_provider)
        return provider
    raise ModelError(
        "No LLM provider available; set GROQ_API_KEY, OPENAI_API_KEY or GEMINI_API_KEY"
    )
