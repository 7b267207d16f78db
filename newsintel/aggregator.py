from __future__ import annotations
import asyncio, logging, re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from . import tavily
from .schemas import SearchResult

log = logging.getLogger("uvicorn.error")


@dataclass
class SearchBatch:
    results: Dict[str, List[SearchResult]]
    is_demo: bool
    searched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# placeholder articles served when no search credential is configured
# (title, content, source, days ago)
DEMO_CATALOG: Dict[str, List[tuple]] = {
    "AI Regulation": [
        ("White House Announces New AI Safety Framework for 2026",
         "The Biden administration unveiled comprehensive AI safety guidelines requiring companies to "
         "conduct risk assessments before deploying high-risk AI systems. The framework establishes "
         "mandatory reporting requirements for AI incidents.",
         "reuters.com", 1),
        ("China Releases Draft Rules for Generative AI Services",
         "Chinese regulators have proposed new rules requiring generative AI service providers to obtain "
         "licenses and ensure their systems do not generate content that undermines national security.",
         "techcrunch.com", 2),
        ("UK AI Safety Institute Partners with Major Tech Companies",
         "The UK AI Safety Institute announced partnerships with leading AI companies to develop shared "
         "safety testing protocols and establish industry-wide benchmarks for responsible AI deployment.",
         "theguardian.com", 3),
    ],
    "EU AI Act": [
        ("EU AI Act: First Enforcement Actions Expected by Q2 2026",
         "European regulators are preparing for the first wave of enforcement actions under the EU AI Act, "
         "with focus on high-risk AI systems in healthcare and critical infrastructure sectors.",
         "euractiv.com", 1),
        ("Companies Rush to Comply with EU AI Act Transparency Requirements",
         "Major tech companies are scrambling to implement transparency measures required by the EU AI Act, "
         "including mandatory disclosure of AI-generated content and training data documentation.",
         "politico.eu", 2),
        ("EU AI Act Compliance Guide: What Businesses Need to Know",
         "Legal experts outline key compliance requirements under the EU AI Act, including risk "
         "classification, conformity assessments, and the establishment of AI governance frameworks.",
         "lexology.com", 4),
    ],
    "Copyright in AI training": [
        ("NYT v. OpenAI: Court Sets Trial Date for Landmark Copyright Case",
         "A federal judge has scheduled the trial for the New York Times lawsuit against OpenAI for "
         "September 2026, in what could become a defining case for AI copyright law.",
         "nytimes.com", 1),
        ("Music Industry Files Class Action Against AI Music Generators",
         "Major record labels have filed a class action lawsuit against AI music generation platforms, "
         "alleging unauthorized use of copyrighted songs for training purposes.",
         "billboard.com", 2),
        ("EU Proposes Mandatory Licensing Framework for AI Training Data",
         "The European Commission is considering mandatory licensing requirements for copyrighted content "
         "used in AI training, potentially reshaping how AI companies source training data.",
         "ft.com", 3),
    ],
    "Tech law": [
        ("FTC Proposes Stricter Rules on Data Broker Practices",
         "The Federal Trade Commission has proposed new regulations limiting how data brokers can collect "
         "and sell consumer information, with significant implications for the adtech industry.",
         "wsj.com", 1),
        ("Supreme Court to Hear Case on Social Media Content Moderation",
         "The Supreme Court has agreed to hear arguments on whether social media platforms can be held "
         "liable for algorithmic content recommendations.",
         "scotusblog.com", 2),
    ],
}


def _slug(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", s.lower()).strip("-") or "topic"


def _match_catalog(keyword: str) -> Optional[str]:
    kw = keyword.lower()
    for key in DEMO_CATALOG:
        k = key.lower()
        if k in kw or kw in k:
            return key
    return None


def demo_results(keywords: List[str], now: Optional[datetime] = None) -> Dict[str, List[SearchResult]]:
    """
    Deterministic placeholder results per keyword: the first catalog entry whose
    name contains (or is contained by) the keyword, else one generic item
    """
    now = now or datetime.now(timezone.utc)
    out: Dict[str, List[SearchResult]] = {}
    for keyword in keywords:
        key = _match_catalog(keyword)
        if key is not None:
            items, slug = DEMO_CATALOG[key], _slug(key)
        else:
            items = [(
                f"Latest Developments in {keyword}",
                f"Stay updated on the latest news and regulatory changes related to {keyword}. "
                "Legal experts are closely monitoring developments in this rapidly evolving area.",
                "lawtech.com", 1,
            )]
            slug = _slug(keyword)
        out[keyword] = [
            SearchResult(
                title=title,
                url=f"https://{source}/article/{slug}-{i}",
                content=content,
                score=round(0.95 - i * 0.05, 2),
                published_date=now - timedelta(days=days_ago),
                source=source,
            )
            for i, (title, content, source, days_ago) in enumerate(items)
        ]
    return out


async def search_keywords(
    keywords: List[str],
    domains: Optional[List[str]] = None,
    api_key: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SearchBatch:
    """
    Fan one search per keyword out concurrently and join them all.
    A failed keyword comes back as an empty list; without `api_key` the
    demo catalog is used instead.
    """
    if not keywords:
        raise ValueError("at least one keyword is required")
    now = now or datetime.now(timezone.utc)

    if not api_key:
        log.info(f"no search credential; serving demo results for {len(keywords)} keywords")
        return SearchBatch(results=demo_results(keywords, now), is_demo=True, searched_at=now)

    async with tavily.new_client() as client:
        settled = await asyncio.gather(
            *(tavily.search_news(k, api_key, domains, client=client, now=now) for k in keywords),
            return_exceptions=True,
        )

    results: Dict[str, List[SearchResult]] = {}
    for keyword, outcome in zip(keywords, settled):
        if isinstance(outcome, Exception):
            log.warning(f"search failed for {keyword!r}: {outcome}")
            results[keyword] = []
        else:
            results[keyword] = outcome
    log.info(f"searched {len(keywords)} keywords, {sum(len(v) for v in results.values())} results")
    return SearchBatch(results=results, is_demo=False, searched_at=now)
