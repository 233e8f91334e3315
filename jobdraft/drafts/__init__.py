"""
Application draft generation.

Produces a tailored cover letter and a short cold email for the
recruiter from the user's résumé and a job description.
"""

from .generate import ApplicationDrafts, DraftRequest, generate_application_drafts  # noqa: F401
