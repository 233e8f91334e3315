"""
Cover letter and cold email generation.

A single prompt and parse round trip: the job details go into the
system message, the résumé into the user message, and the model must
answer with a JSON object holding ``coverLetter`` and ``coldEmail``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..llm.output import parse_json_object
from ..llm.providers import LLMProvider

logger = logging.getLogger(__name__)

DRAFT_KEYS = ("coverLetter", "coldEmail")

NO_RESUME_NOTE = (
    "The user has not provided a resume. Please generate a cover letter and cold "
    "email that is not tailored to a specific resume."
)


@dataclass(frozen=True)
class DraftRequest:
    """Inputs for one draft generation."""

    resume: str
    job_description: str
    company_name: str
    job_title: str


@dataclass(frozen=True)
class ApplicationDrafts:
    cover_letter: str
    cold_email: str

    def to_dict(self) -> Dict[str, str]:
        return {"coverLetter": self.cover_letter, "coldEmail": self.cold_email}


def _system_prompt(request: DraftRequest) -> str:
    return (
        "You are an expert career coach. You will generate a cover letter and a "
        "cold email based on the user's resume and the job description.\n\n"
        "You must return the data in a valid JSON object with the following keys: "
        "\"coverLetter\", \"coldEmail\".\n\n"
        f"Company Name: {request.company_name}\n"
        f"Job Title: {request.job_title}\n\n"
        f"Job Description:\n{request.job_description}\n\n"
        "Please follow these instructions carefully:\n\n"
        "1. Cover Letter: Write a professional cover letter that is tailored to the "
        "job description. Make sure it is well-written and error-free. Focus on "
        "highlighting how the user's skills and experience align with the job "
        "requirements. Use the resume only as needed, if available.\n"
        "2. Cold Email: Write a concise, high-conversion cold email to the "
        "recruiter. This email should be attention-grabbing and should highlight "
        "the user's key qualifications for the role. Keep it short and to the point."
    )


def generate_application_drafts(
    request: DraftRequest,
    provider: LLMProvider,
    model: Optional[str] = None,
) -> ApplicationDrafts:
    """Generate a cover letter and cold email for one application.

    Args:
        request: Résumé and job details.  An empty résumé is allowed; the
            model is told to write untailored drafts.
        provider: Language model provider.
        model: Optional model name overriding the provider default.

    Returns:
        The generated :class:`ApplicationDrafts`.

    Raises:
        ModelError: If the provider call fails.
        ParseFailure: If the reply is not JSON with both keys as strings.
        QuotaFailure: If the provider is rate limited.
    """
    resume = request.resume.strip()
    user = f"Here is my resume/CV:\n{resume if resume else NO_RESUME_NOTE}"
    reply = provider.complete(_system_prompt(request), user, model=model, json_mode=True)
    data = parse_json_object(reply, DRAFT_KEYS, what="application drafts reply")
    logger.info("Generated drafts for %s at %s", request.job_title, request.company_name)
    return ApplicationDrafts(cover_letter=data["coverLetter"], cold_email=data["coldEmail"])
