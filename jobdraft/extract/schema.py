"""
Extraction data model.

`ExtractionRequest` is the only input of the extraction pipeline and
`ExtractionResult` its only output.  Result fields are always strings;
a field that could not be recovered is the empty string, never ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Union
from urllib.parse import urlparse

from ..errors import InvalidRequest

# camelCase keys used on the wire and in model prompts
RESULT_KEYS = ("jobTitle", "companyName", "jobDescription")


def is_absolute_url(value: str) -> bool:
    """Return True for http(s) URLs with a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    return not any(ch.isspace() for ch in parsed.netloc)


@dataclass(frozen=True)
class ExtractionRequest:
    """A job posting URL to extract fields from."""

    job_url: str

    def __post_init__(self) -> None:
        url = self.job_url.strip() if isinstance(self.job_url, str) else ""
        if not is_absolute_url(url):
            raise InvalidRequest(f"Invalid job URL: {self.job_url!r}")
        object.__setattr__(self, "job_url", url)

    @classmethod
    def coerce(cls, value: Union["ExtractionRequest", Mapping[str, str], str]) -> "ExtractionRequest":
        """Accept a request, a ``{"jobUrl": ...}`` mapping or a bare URL."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Mapping):
            url = value.get("jobUrl", value.get("job_url"))
            if url is None:
                raise InvalidRequest("Extraction request requires 'jobUrl'")
            return cls(url)
        raise InvalidRequest(f"Unsupported extraction request type: {type(value).__name__}")


@dataclass(frozen=True)
class ExtractionResult:
    """Fields recovered from a job posting."""

    job_title: str = ""
    company_name: str = ""
    job_description: str = ""

    def __post_init__(self) -> None:
        for name in ("job_title", "company_name", "job_description"):
            value = getattr(self, name)
            object.__setattr__(self, name, "" if value is None else str(value).strip())

    @classmethod
    def empty(cls) -> "ExtractionResult":
        return cls()

    @classmethod
    def from_model_output(cls, data: Mapping[str, str]) -> "ExtractionResult":
        """Build a result from an already validated model payload."""
        return cls(
            job_title=data["jobTitle"],
            company_name=data["companyName"],
            job_description=data["jobDescription"],
        )

    def is_empty(self) -> bool:
        return not (self.job_title or self.company_name or self.job_description)

    def to_dict(self) -> Dict[str, str]:
        return {
            "jobTitle": self.job_title,
            "companyName": self.company_name,
            "jobDescription": self.job_description,
        }
