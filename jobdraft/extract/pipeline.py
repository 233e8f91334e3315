"""
Job description extraction entry point.

:func:`extract_job_description` is the single public operation of the
extraction subsystem.  The strategy is chosen once from configuration
rather than per request, so callers see the same behaviour on every
call regardless of which strategy backs it.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

from ..config import Settings, load_settings
from .schema import ExtractionRequest, ExtractionResult
from .strategies import ExtractionStrategy, build_strategy

logger = logging.getLogger(__name__)

RequestLike = Union[ExtractionRequest, Mapping[str, str], str]


def extract_job_description(
    request: RequestLike,
    *,
    strategy: Optional[ExtractionStrategy] = None,
    settings: Optional[Settings] = None,
) -> ExtractionResult:
    """Extract the job title, company name and description from a posting URL.

    Args:
        request: An :class:`ExtractionRequest`, a mapping with a
            ``jobUrl`` key, or the URL itself.
        strategy: Strategy to use.  Built from ``settings`` when omitted.
        settings: Configuration used to build the strategy; loaded from
            the environment when omitted.

    Returns:
        An :class:`ExtractionResult`.  Fields that could not be
        recovered are empty strings, and a page that could not be
        fetched yields an entirely empty result.

    Raises:
        InvalidRequest: If the URL is malformed.  No network call is made.
        ParseFailure: If a model reply is not valid JSON or fails validation.
        QuotaFailure: If the model is rate limited and no fallback succeeds.
    """
    req = ExtractionRequest.coerce(request)
    if strategy is None:
        strategy = build_strategy(settings or load_settings())
    logger.debug("Extracting %s with %s strategy", req.job_url, strategy.name)
    return strategy.extract(req)
