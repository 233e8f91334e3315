"""
Runtime configuration.

Settings are resolved in three layers: built‑in defaults, an optional
YAML file, and environment variables (a ``.env`` file in the working
directory is loaded first via python‑dotenv).  Environment variables
always win so deployments can override a checked in config file.

Example YAML::

    jobdraft:
      strategy: model_fallback
      max_content_chars: 20000
      llm_provider: groq
      llm_model: llama3-8b-8192
      llm_fallback_model: llama-3.1-8b-instant
      llm_timeout: 60
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Dict, Optional

import yaml  # type: ignore
from dotenv import find_dotenv, load_dotenv

from .errors import InvalidRequest

logger = logging.getLogger(__name__)

STRATEGIES = ("heuristic", "model", "model_fallback")
PROVIDERS = ("openai", "groq", "gemini")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Environment variable -> Settings field
_ENV_MAP = {
    "JOBDRAFT_STRATEGY": "strategy",
    "JOBDRAFT_MAX_CHARS": "max_content_chars",
    "JOBDRAFT_FETCH_TIMEOUT": "fetch_timeout",
    "JOBDRAFT_USER_AGENT": "user_agent",
    "LLM_PROVIDER": "llm_provider",
    "LLM_MODEL": "llm_model",
    "LLM_FALLBACK_MODEL": "llm_fallback_model",
    "LLM_TIMEOUT": "llm_timeout",
    "OPENAI_API_KEY": "openai_api_key",
    "OPENAI_BASE_URL": "openai_base_url",
    "GROQ_API_KEY": "groq_api_key",
}


@dataclass(frozen=True)
class Settings:
    """Immutable configuration shared by every request."""

    strategy: str = "heuristic"
    max_content_chars: int = 20_000
    fetch_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    llm_provider: str = "groq"
    llm_model: str = "llama3-8b-8192"
    llm_fallback_model: str = "llama-3.1-8b-instant"
    llm_timeout: float = 60.0
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    groq_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    def validate(self) -> "Settings":
        if self.strategy not in STRATEGIES:
            raise InvalidRequest(
                f"Unknown strategy '{self.strategy}'; expected one of {', '.join(STRATEGIES)}"
            )
        if self.llm_provider not in PROVIDERS:
            raise InvalidRequest(
                f"Unknown LLM provider '{self.llm_provider}'; expected one of {', '.join(PROVIDERS)}"
            )
        if self.max_content_chars <= 0:
            raise InvalidRequest("max_content_chars must be positive")
        if self.fetch_timeout <= 0:
            raise InvalidRequest("fetch_timeout must be positive")
        if self.llm_timeout <= 0:
            raise InvalidRequest("llm_timeout must be positive")
        return self


def _coerce(name: str, value: object) -> object:
    """Convert a raw YAML/env value to the type of the named field."""
    if value is None:
        return None
    try:
        if name == "max_content_chars":
            return int(value)
        if name in ("fetch_timeout", "llm_timeout"):
            return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRequest(f"Invalid value for {name}: {value!r}") from exc
    value = str(value)
    if name in ("strategy", "llm_provider"):
        return value.strip().lower()
    return value


def _load_yaml(path: str) -> Dict[str, object]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidRequest(f"Config file {path} must contain a mapping")
    section = data.get("jobdraft", data)
    return section if isinstance(section, dict) else {}


def load_settings(path: Optional[str] = None, **overrides: object) -> Settings:
    """Build :class:`Settings` from defaults, YAML, environment and overrides.

    Args:
        path: Optional YAML config file.
        **overrides: Explicit values (e.g. from CLI flags); ``None``
            values are ignored.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        InvalidRequest: If a value is unknown or out of range.
    """
    load_dotenv(find_dotenv(usecwd=True))
    known = {f.name for f in fields(Settings)}
    values: Dict[str, object] = {}
    if path:
        for key, value in _load_yaml(path).items():
            if key in known:
                values[key] = _coerce(key, value)
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, path)
    for env_name, field_name in _ENV_MAP.items():
        env_value = os.getenv(env_name)
        if env_value:
            values[field_name] = _coerce(field_name, env_value)
    gemini_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if gemini_key:
        values["gemini_api_key"] = gemini_key
    for key, value in overrides.items():
        if value is not None and key in known:
            values[key] = _coerce(key, value)
    settings = replace(Settings(), **values)
    logger.debug(
        "Loaded settings: strategy=%s provider=%s model=%s",
        settings.strategy,
        settings.llm_provider,
        settings.llm_model,
    )
    return settings.validate()
