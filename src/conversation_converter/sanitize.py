"""Regex clean-up for message fragments scraped from shared conversation pages.

Fragments come from a single known page layout, so pattern stripping is enough
here; this is not a general purpose HTML sanitizer.
"""

from __future__ import annotations

import re


CITATION_SPAN_RE = re.compile(
    r'<span[^>]*data-testid="webpage-citation-pill"[^>]*>.*?</span>', re.IGNORECASE | re.DOTALL
)
CITATION_LINK_RE = re.compile(
    r'<a[^>]*data-testid="webpage-citation-pill"[^>]*>.*?</a>', re.IGNORECASE | re.DOTALL
)
DATA_START_RE = re.compile(r'\sdata-start="\d+"')
DATA_END_RE = re.compile(r'\sdata-end="\d+"')

_PATTERNS = (CITATION_SPAN_RE, CITATION_LINK_RE, DATA_START_RE, DATA_END_RE)


def clean_html(html: str) -> str:
    for pattern in _PATTERNS:
        html = pattern.sub("", html)
    return html


__all__ = ["clean_html"]
