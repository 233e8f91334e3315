"""
Resume reader and summarizer.

Text is pulled out of the résumé file first (plain text, PDF or Word),
then a language model removes PDF parsing artifacts, reformats the text
as Markdown and writes a two to three sentence profile summary.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidRequest
from ..llm.output import parse_json_object
from ..llm.providers import LLMProvider

logger = logging.getLogger(__name__)

# Optional imports for document handling.  These libraries enable
# extraction of text from PDF and DOCX files and may be ``None`` if not
# installed.
try:
    import pdfplumber  # type: ignore
except ImportError:
    pdfplumber = None  # type: ignore
try:
    import docx  # type: ignore
except ImportError:
    docx = None  # type: ignore

SUMMARY_KEYS = ("cleanedText", "summary")

SYSTEM_PROMPT = (
    "You are an expert document processor and career coach. Your task is to "
    "process raw text extracted from a resume.\n\n"
    "Please perform the following actions:\n"
    "1. Clean and Format: Clean up the text by removing any PDF parsing "
    "artifacts, extra whitespace, and messy formatting. Re-organize it into a "
    "clean, readable, well-structured text format. Use markdown for headings "
    "and lists where appropriate.\n"
    "2. Summarize Profile: Based on the cleaned content, write a concise, "
    "professional summary of the candidate's profile. This summary should be "
    "2-3 sentences long and highlight their key skills, years of experience, "
    "and main qualifications.\n\n"
    "Return the result as a JSON object with 'cleanedText' and 'summary' fields."
)


@dataclass(frozen=True)
class ResumeSummary:
    cleaned_text: str
    summary: str


def read_resume_text(file_path: str) -> str:
    """Extract text from a résumé file.

    For plain text files the contents are read as UTF‑8.  PDF and DOCX
    formats use ``pdfplumber`` and ``python‑docx`` respectively.

    Args:
        file_path: Path to the résumé file.

    Returns:
        A single string containing the extracted text.

    Raises:
        FileNotFoundError: If the file does not exist.
        RuntimeError: If the library needed for the file type is missing.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(file_path)
    ext = os.path.splitext(file_path)[1].lower()
    if ext == ".pdf":
        if pdfplumber is None:
            raise RuntimeError("pdfplumber is required to read PDF résumés; install it via pip")
        pages = []
        with pdfplumber.open(file_path) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")
        return "\n".join(pages)
    if ext == ".docx":
        if docx is None:
            raise RuntimeError("python-docx is required to parse Word résumés; install it via pip")
        document = docx.Document(file_path)
        return "\n".join(p.text for p in document.paragraphs)
    with open(file_path, "r", encoding="utf-8") as f:
        return f.read()


def summarize_resume(resume_text: str, provider: LLMProvider, model: Optional[str] = None) -> ResumeSummary:
    """Clean raw résumé text and summarize the candidate profile.

    Raises:
        InvalidRequest: If ``resume_text`` is blank.
        ParseFailure: If the reply is not JSON with both keys as strings.
    """
    if not resume_text or not resume_text.strip():
        raise InvalidRequest("Resume text is empty")
    user = f"Raw Resume Text:\n{resume_text}"
    reply = provider.complete(SYSTEM_PROMPT, user, model=model, json_mode=True)
    data = parse_json_object(reply, SUMMARY_KEYS, what="resume summary reply")
    logger.debug("Summarized résumé into %d chars", len(data["cleanedText"]))
    return ResumeSummary(cleaned_text=data["cleanedText"], summary=data["summary"])
