"""
Extraction subsystem for jobdraft.

This package turns a job posting URL into an :class:`ExtractionResult`
holding the job title, company name and job description.  The work is
split into three stages:

* `fetcher` – One HTTP GET with a browser user agent and a timeout.
* `normalizer` – Strips non-content markup and bounds the text size.
* `strategies` – Recovers the fields with rules, a language model, or
  a language model with a rate limit fallback.

`pipeline.extract_job_description` wires the stages together.
"""

from .fetcher import Fetcher, FetchResult  # noqa: F401
from .normalizer import DEFAULT_MAX_CHARS, normalize_html  # noqa: F401
from .pipeline import extract_job_description  # noqa: F401
from .schema import ExtractionRequest, ExtractionResult  # noqa: F401
from .strategies import (  # noqa: F401
    ExtractionStrategy,
    HeuristicStrategy,
    ModelAssistedStrategy,
    ModelWithFallbackStrategy,
    build_strategy,
)
