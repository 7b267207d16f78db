from typing import Dict, List, Optional

from .aggregator import SearchBatch
from .schemas import SearchResult
from .tavily import hostname


def flatten_results(by_keyword: Dict[str, List[SearchResult]]) -> List[SearchResult]:
    """ Keyword insertion order, each item labelled with its keyword as category """
    flat: List[SearchResult] = []
    for keyword, items in by_keyword.items():
        for item in items or []:
            flat.append(item.model_copy(update={
                "category": keyword,
                "source": item.source or hostname(item.url),
            }))
    return flat


def dedupe_and_rank(items: List[SearchResult]) -> List[SearchResult]:
    """
    One entry per url. A later duplicate only wins with a strictly higher score,
    so on equal scores the first-seen keyword keeps the label.
    Output is newest first; equal dates keep first-seen order.
    """
    best: Dict[str, SearchResult] = {}
    for item in items:
        seen = best.get(item.url)
        if seen is None or item.score > seen.score:
            best[item.url] = item
    return sorted(best.values(), key=lambda r: r.published_date, reverse=True)


def rank_batch(batch: SearchBatch) -> List[SearchResult]:
    return dedupe_and_rank(flatten_results(batch.results))


def filter_by_category(items: List[SearchResult], category: Optional[str]) -> List[SearchResult]:
    if not category:
        return items
    return [r for r in items if r.category == category]


def count_sources(items: List[SearchResult]) -> int:
    return len({r.source for r in items})
