import asyncio, logging
from typing import List, Optional

from . import tavily
from .cleaner import clean_article_content
from .schemas import Article

log = logging.getLogger("uvicorn.error")


def _with_snippet(article: Article) -> Article:
    return article.model_copy(update={"content": clean_article_content(article.content)})


async def _enrich_one(article: Article, api_key: Optional[str], client) -> Article:
    full = await tavily.extract_content(article.url, api_key, client=client) if article.url else None
    if full:
        return article.model_copy(update={"content": clean_article_content(full)})
    return _with_snippet(article)


async def enrich_articles(articles: List[Article], api_key: Optional[str] = None) -> List[Article]:
    """
    Swap each snippet for cleaned full text when extraction works, else the
    cleaned snippet. Same length and order as the input; never raises.
    """
    if not api_key:
        return [_with_snippet(a) for a in articles]

    try:
        async with tavily.new_client() as client:
            settled = await asyncio.gather(
                *(_enrich_one(a, api_key, client) for a in articles),
                return_exceptions=True,
            )
    except Exception as e:
        log.warning(f"extraction client unavailable; using snippets. Error: {e}")
        return [_with_snippet(a) for a in articles]

    enriched: List[Article] = []
    for article, outcome in zip(articles, settled):
        if isinstance(outcome, Exception):
            log.warning(f"enrichment failed for {article.url}: {outcome}")
            enriched.append(_with_snippet(article))
        else:
            enriched.append(outcome)
    log.info(f"enriched {len(enriched)} articles")
    return enriched
