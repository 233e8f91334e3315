"""
Jobdraft package for the job-application assistant.

This package contains submodules for pulling job postings off the web,
turning them into structured fields, and drafting application material
with a hosted language model.  Each submodule implements one step of the
flow a user goes through when applying for a role.

The high‑level flow is:

1. **extract** – Fetch a job posting URL, strip the page down to plain
   text and recover the job title, company name and description.  The
   field recovery step is pluggable: a rule based extractor, a model
   assisted extractor, or a model assisted extractor that switches to a
   secondary model when the primary one is rate limited.
2. **resume** – Read a résumé from text, PDF or Word files and ask the
   model for a cleaned copy plus a short profile summary.
3. **drafts** – Generate a tailored cover letter and a cold email for
   the recruiter from the résumé and the job description.
4. **applications** – Keep a small JSON file of drafted applications
   and their status (Drafted, Applied, Interviewing, Rejected).
5. **cli** – Command line entry point wiring together the above
   components.

Configuration lives in :mod:`jobdraft.config`; model access goes through
the providers in :mod:`jobdraft.llm`.
"""

from .errors import (  # noqa: F401
    FetchFailure,
    InvalidRequest,
    JobDraftError,
    ModelError,
    ParseFailure,
    QuotaFailure,
)
from .extract import ExtractionRequest, ExtractionResult, extract_job_description  # noqa: F401

__version__ = "0.1.0"
