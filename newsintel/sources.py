from __future__ import annotations
import re, uuid
from typing import List

from .schemas import NewsSource

# publishers searched by default on first run
DEFAULT_SOURCES: List[NewsSource] = [
    NewsSource(id="reuters", domain="reuters.com", name="Reuters"),
    NewsSource(id="nytimes", domain="nytimes.com", name="New York Times"),
    NewsSource(id="ft", domain="ft.com", name="Financial Times"),
    NewsSource(id="wsj", domain="wsj.com", name="Wall Street Journal"),
    NewsSource(id="techcrunch", domain="techcrunch.com", name="TechCrunch"),
    NewsSource(id="theguardian", domain="theguardian.com", name="The Guardian"),
    NewsSource(id="politico", domain="politico.com", name="Politico"),
    NewsSource(id="bbc", domain="bbc.com", name="BBC"),
    NewsSource(id="bloomberg", domain="bloomberg.com", name="Bloomberg"),
    NewsSource(id="wired", domain="wired.com", name="Wired"),
    NewsSource(id="arstechnica", domain="arstechnica.com", name="Ars Technica"),
    NewsSource(id="theverge", domain="theverge.com", name="The Verge"),
]

_TLD_SUFFIX = re.compile(r"\.(?:com|org|net|co|io)$")


def clean_domain(raw: str) -> str:
    if not raw: return ""
    s = raw.strip().lower()
    s = re.sub(r"^https?://", "", s)
    s = re.sub(r"^www\.", "", s)
    return s.split("/")[0]


def display_name(domain: str) -> str:
    """ "example.com" -> "example"; only one common suffix is removed """
    return _TLD_SUFFIX.sub("", domain)


def add_source(sources: List[NewsSource], raw: str) -> List[NewsSource]:
    """
    Returns a new list with the cleaned domain appended, or the same list
    untouched when the domain is empty or already present
    """
    domain = clean_domain(raw)
    if not domain:
        return sources
    if any(s.domain == domain for s in sources):
        return sources
    new = NewsSource(id=f"source-{uuid.uuid4().hex[:12]}", domain=domain, name=display_name(domain))
    return [*sources, new]


def delete_source(sources: List[NewsSource], source_id: str) -> List[NewsSource]:
    return [s for s in sources if s.id != source_id]
