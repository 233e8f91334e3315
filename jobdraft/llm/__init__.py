"""
Language model access for jobdraft.

The `llm` package hides the differences between hosted model APIs
behind :class:`LLMProvider`.  Callers hand over a system and a user
message, optionally ask for JSON output, and get the reply text back.
Rate limits are reported uniformly as :class:`~jobdraft.errors.QuotaFailure`
so the extraction strategies can react to them without knowing which
SDK raised them.

* `providers` – OpenAI, Groq (OpenAI compatible) and Gemini providers
  plus the :func:`get_provider` factory.
* `output` – Decoding and validating JSON replies.
"""

from .output import parse_json_object  # noqa: F401
from .providers import (  # noqa: F401
    GeminiProvider,
    GroqProvider,
    LLMProvider,
    OpenAIProvider,
    get_provider,
)
