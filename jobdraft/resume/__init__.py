"""
Résumé subsystem for jobdraft.

Reads résumé files and asks the language model for a cleaned copy of
the text plus a short profile summary.
"""

from .summarize import ResumeSummary, read_resume_text, summarize_resume  # noqa: F401
