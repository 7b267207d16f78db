from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse
import logging
import httpx

from . import config
from .schemas import SearchResult, TavilyExtractResponse, TavilySearchResponse

log = logging.getLogger("uvicorn.error")

UA = "Mozilla/5.0 (compatible; NewsIntel/1.0)"


def new_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=config.TAVILY_BASE_URL,
        headers={"User-Agent": UA},
        timeout=config.HTTP_TIMEOUT if timeout is None else timeout,
    )


def hostname(url: str) -> str:
    host = urlparse(url).hostname
    if not host:
        return "Unknown"
    return host[4:] if host.startswith("www.") else host


async def search_news(
    query: str,
    api_key: str,
    include_domains: Optional[List[str]] = None,
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> List[SearchResult]:
    """
    One search call. Raises httpx.HTTPError on transport/status failure and
    pydantic.ValidationError on a malformed payload; callers decide how to absorb.
    """
    now = now or datetime.now(timezone.utc)
    body = {
        "api_key": api_key,
        "query": query,
        "search_depth": "advanced",
        "include_domains": include_domains or [],
        "exclude_domains": [],
        "max_results": config.SEARCH_MAX_RESULTS,
        "include_answer": False,
        "include_raw_content": False,
        "topic": "news",
    }
    if client is None:
        async with new_client() as c:
            r = await c.post("/search", json=body)
    else:
        r = await client.post("/search", json=body)
    r.raise_for_status()

    data = TavilySearchResponse.model_validate(r.json())
    out: List[SearchResult] = []
    for item in data.results:
        if not item.url:
            log.warning(f"dropping search result without url for {query!r}")
            continue
        out.append(SearchResult(
            title=item.title or "",
            url=item.url,
            content=item.content or "",
            score=item.score if item.score is not None else 0.0,
            published_date=item.published_date or now,
            source=hostname(item.url),
        ))
    return out


async def extract_content(
    url: str,
    api_key: Optional[str],
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """ Raw article text for `url`, or None when there is nothing usable """
    if not api_key:
        return None
    body = {"api_key": api_key, "urls": [url]}
    try:
        if client is None:
            async with new_client() as c:
                r = await c.post("/extract", json=body)
        else:
            r = await client.post("/extract", json=body)
        r.raise_for_status()
        data = TavilyExtractResponse.model_validate(r.json())
    except (httpx.HTTPError, ValueError) as e:
        log.warning(f"extract failed for {url}: {e}")
        return None

    if not data.results:
        return None
    first = data.results[0]
    return first.raw_content or first.text or None
