"""
HTML to plain text normalizer.

Turns a raw job page into bounded plain text for the field recovery
step.  The steps run in a fixed order, each on the output of the
previous one:

1. Keep only the ``<body>`` contents when the page has a body.
2. Drop ``style``, ``script``, ``nav``, ``header``, ``footer`` and
   ``aside`` elements together with their contents.
3. Replace every remaining tag with a newline so block boundaries
   survive as line breaks.
4. Collapse three or more consecutive newlines into a blank line.
5. Collapse runs of spaces and tabs into one space.
6. Trim, then cut hard at ``max_chars`` characters.
"""

from __future__ import annotations

import re

DEFAULT_MAX_CHARS = 20_000

NON_CONTENT_TAGS = ("style", "script", "nav", "header", "footer", "aside")

_BODY_RE = re.compile(r"<body\b[^>]*>([\s\S]*)</body>", re.IGNORECASE)
_ELEMENT_RES = [
    re.compile(rf"<{tag}\b[^>]*>[\s\S]*?</{tag}\s*>", re.IGNORECASE) for tag in NON_CONTENT_TAGS
]
_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_LINES_RE = re.compile(r"(\n\s*){3,}")
_HSPACE_RE = re.compile(r"[ \t\f\v\r]+")


def extract_body(html: str) -> str:
    """Return the inner HTML of ``<body>``, or the whole document without one."""
    match = _BODY_RE.search(html)
    return match.group(1) if match else html


def strip_markup(html: str) -> str:
    """Remove non-content elements, then turn every other tag into a newline."""
    text = html
    for pattern in _ELEMENT_RES:
        text = pattern.sub("", text)
    return _TAG_RE.sub("\n", text)


def collapse_whitespace(text: str) -> str:
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return _HSPACE_RE.sub(" ", text)


def normalize_html(html: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Convert raw HTML into plain text no longer than ``max_chars``.

    Args:
        html: Raw page HTML.  Plain text passes through unchanged apart
            from whitespace collapsing and truncation.
        max_chars: Hard character cap on the output.

    Returns:
        Tag free text.  The cut is by character count and may split a
        word.
    """
    if not html:
        return ""
    text = collapse_whitespace(strip_markup(extract_body(html)))
    return text.strip()[:max_chars]
