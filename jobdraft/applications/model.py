"""
Application records.

An application is created in the ``Drafted`` state once drafts have
been generated, and later moved through the other statuses by hand.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Dict

from ..drafts.generate import ApplicationDrafts
from ..errors import InvalidRequest
from ..extract.schema import is_absolute_url

APPLICATION_STATUSES = ("Drafted", "Applied", "Interviewing", "Rejected")

MIN_NAME_CHARS = 2
MIN_DESCRIPTION_CHARS = 50


@dataclass(frozen=True)
class ApplicationForm:
    """Validated user input for a new application."""

    company_name: str
    job_title: str
    job_description: str
    job_url: str = ""


@dataclass
class Application:
    id: str
    company_name: str
    job_title: str
    job_description: str
    cover_letter: str
    cold_email: str
    status: str
    created_at: str          # ISO8601, UTC

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "Application":
        return cls(**{key: data.get(key, "") for key in cls.__dataclass_fields__})


def validate_application_form(
    company_name: str,
    job_title: str,
    job_description: str,
    job_url: str = "",
) -> ApplicationForm:
    """Check the new-application form the way the web form does.

    Raises:
        InvalidRequest: With every problem found, joined into one message.
    """
    company_name = (company_name or "").strip()
    job_title = (job_title or "").strip()
    job_description = (job_description or "").strip()
    job_url = (job_url or "").strip()
    problems = []
    if len(company_name) < MIN_NAME_CHARS:
        problems.append("Company name is required")
    if len(job_title) < MIN_NAME_CHARS:
        problems.append("Job title is required")
    if len(job_description) < MIN_DESCRIPTION_CHARS:
        problems.append(f"Job description must be at least {MIN_DESCRIPTION_CHARS} characters")
    if job_url and not is_absolute_url(job_url):
        problems.append("Job URL must be a valid URL")
    if problems:
        raise InvalidRequest("; ".join(problems))
    return ApplicationForm(company_name, job_title, job_description, job_url)


def create_application(form: ApplicationForm, drafts: ApplicationDrafts) -> Application:
    return Application(
        id=uuid.uuid4().hex,
        company_name=form.company_name,
        job_title=form.job_title,
        job_description=form.job_description,
        cover_letter=drafts.cover_letter,
        cold_email=drafts.cold_email,
        status="Drafted",
        created_at=datetime.now(timezone.utc).isoformat(),
    )
