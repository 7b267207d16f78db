from fastapi import FastAPI, Body, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from typing import List, Optional
from datetime import datetime, timezone
import logging, threading

from . import config
from .aggregator import search_keywords
from .digest import generate_newsletter, fallback_newsletter
from .cleaner import clean_article_content
from .drafts import DraftSession, stamp_news_ids
from .ranking import rank_batch, filter_by_category, count_sources
from .store import StateStore
from .tavily import extract_content
from .schemas import (
    NewsRequest, NewsResponse, FeedResponse,
    SummarizeRequest, SummarizeResponse,
    ExtractRequest, ExtractResponse,
    Topic, TopicIn, NewsSource, SourceIn,
    Article, SearchResult, SelectedArticle, Insight, InsightIn,
)

log = logging.getLogger("uvicorn.error")

app = FastAPI(title="News Intelligence API", version="1.0.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS, allow_credentials=False,
    allow_methods=["*"], allow_headers=["*"],
)

_store: Optional[StateStore] = None
_drafts: Optional[DraftSession] = None
_init_lock = threading.Lock()


def get_store() -> StateStore:
    global _store
    with _init_lock:
        if _store is None:
            _store = StateStore(config.DATA_DIR)
        return _store


def get_drafts() -> DraftSession:
    global _drafts
    with _init_lock:
        if _drafts is None:
            _drafts = DraftSession()
        return _drafts


async def _newsletter(articles: List[Article]) -> SummarizeResponse:
    try:
        newsletter, is_ai = await generate_newsletter(
            articles,
            api_key=config.GENERATION_API_KEY,
            extract_key=config.TAVILY_API_KEY,
        )
    except Exception:
        log.exception("newsletter pipeline error")
        newsletter, is_ai = fallback_newsletter(articles), False
    return SummarizeResponse(newsletter=newsletter, is_ai=is_ai)


# -------------------- Endpoints --------------------

@app.get("/healthz")
def healthz():
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}


@app.post("/api/news", response_model=NewsResponse, tags=["search"])
async def news(payload: NewsRequest = Body(...)):
    keywords = [k.strip() for k in (payload.keywords or []) if k and k.strip()]
    if not keywords:
        raise HTTPException(status_code=400, detail="Keywords array is required")

    batch = await search_keywords(keywords, payload.domains or [], api_key=config.TAVILY_API_KEY)
    return NewsResponse(results=stamp_news_ids(batch.results), searched_at=batch.searched_at, is_demo=batch.is_demo)


@app.get("/api/feed", response_model=FeedResponse, tags=["search"],
         summary="Search every stored topic over the stored sources, deduped and newest first")
async def feed(category: Optional[str] = Query(None, description="Only this topic"),
               store: StateStore = Depends(get_store),
               drafts: DraftSession = Depends(get_drafts)):
    keywords = [t.name for t in store.topics]
    if not keywords:
        drafts.set_results([])
        return FeedResponse(results=[], searched_at=datetime.now(timezone.utc), is_demo=False, unique_sources=0)

    batch = await search_keywords(keywords, [s.domain for s in store.sources], api_key=config.TAVILY_API_KEY)
    batch.results = stamp_news_ids(batch.results)
    ranked = rank_batch(batch)
    drafts.set_results(ranked)
    return FeedResponse(
        results=filter_by_category(ranked, category),
        searched_at=batch.searched_at,
        is_demo=batch.is_demo,
        unique_sources=count_sources(ranked),
    )


@app.get("/api/feed/current", response_model=List[SearchResult], tags=["search"],
         summary="The last feed as currently labelled, without searching again")
def current_feed(category: Optional[str] = Query(None), drafts: DraftSession = Depends(get_drafts)):
    return filter_by_category(drafts.results, category)


@app.post("/api/summarize", response_model=SummarizeResponse, tags=["digest"])
async def summarize(payload: SummarizeRequest = Body(...)):
    if not payload.articles:
        raise HTTPException(status_code=400, detail="No articles provided")
    return await _newsletter(payload.articles)


@app.post("/api/extract", response_model=ExtractResponse, tags=["ingest"],
          summary="Fetch & clean full article text by URL")
async def extract(payload: ExtractRequest = Body(...)):
    if not payload.url:
        raise HTTPException(status_code=400, detail="URL is required")

    raw = await extract_content(payload.url, config.TAVILY_API_KEY)
    if not raw:
        return ExtractResponse(extracted_content=None)
    return ExtractResponse(extracted_content=clean_article_content(raw))


# -------------------- Selection & insights --------------------

@app.get("/api/selection", response_model=List[SelectedArticle], tags=["drafts"])
def list_selection(drafts: DraftSession = Depends(get_drafts)):
    return drafts.selected


@app.post("/api/selection", response_model=List[SelectedArticle], tags=["drafts"],
          summary="Select the article, or deselect it when its url is already selected")
def toggle_selection(result: SearchResult = Body(...), drafts: DraftSession = Depends(get_drafts)):
    return drafts.toggle(result)


@app.delete("/api/selection", response_model=List[SelectedArticle], tags=["drafts"])
def clear_selection(drafts: DraftSession = Depends(get_drafts)):
    drafts.clear()
    return drafts.selected


@app.post("/api/selection/newsletter", response_model=SummarizeResponse, tags=["digest"])
async def selection_newsletter(drafts: DraftSession = Depends(get_drafts)):
    articles = drafts.articles()
    if not articles:
        raise HTTPException(status_code=400, detail="No articles selected")
    return await _newsletter(articles)


@app.get("/api/insights/{news_id:path}", response_model=Insight, tags=["drafts"])
def get_insight(news_id: str, drafts: DraftSession = Depends(get_drafts)):
    note = drafts.insights.get(news_id)
    if note is None:
        raise HTTPException(status_code=404, detail="No insight for this article")
    return note


@app.put("/api/insights/{news_id:path}", response_model=Optional[Insight], tags=["drafts"],
         summary="Save a note; blank text removes it")
def put_insight(news_id: str, payload: InsightIn = Body(...), drafts: DraftSession = Depends(get_drafts)):
    if payload.insight is None:
        raise HTTPException(status_code=400, detail="Insight text is required")
    return drafts.insights.save(news_id, payload.insight)


@app.delete("/api/insights/{news_id:path}", tags=["drafts"])
def delete_insight(news_id: str, drafts: DraftSession = Depends(get_drafts)):
    drafts.insights.delete(news_id)
    return {"ok": True}


# -------------------- Topics & sources --------------------

@app.get("/api/topics", response_model=List[Topic], tags=["topics"])
def list_topics(store: StateStore = Depends(get_store)):
    return store.topics


@app.post("/api/topics", response_model=List[Topic], tags=["topics"])
def add_topic(payload: TopicIn = Body(...), store: StateStore = Depends(get_store)):
    if not (payload.name or "").strip():
        raise HTTPException(status_code=400, detail="Topic name is required")
    store.add_topic(payload.name)
    return store.topics


@app.patch("/api/topics/{topic_id}", response_model=List[Topic], tags=["topics"])
def rename_topic(topic_id: str, payload: TopicIn = Body(...),
                 store: StateStore = Depends(get_store), drafts: DraftSession = Depends(get_drafts)):
    if store.get_topic(topic_id) is None:
        raise HTTPException(status_code=404, detail="Unknown topic")
    if not (payload.name or "").strip():
        raise HTTPException(status_code=400, detail="Topic name is required")
    old = store.rename_topic(topic_id, payload.name)
    if old is not None:
        drafts.topic_renamed(old.name, store.get_topic(topic_id).name)
    return store.topics


@app.delete("/api/topics/{topic_id}", response_model=List[Topic], tags=["topics"])
def delete_topic(topic_id: str, store: StateStore = Depends(get_store), drafts: DraftSession = Depends(get_drafts)):
    old = store.delete_topic(topic_id)
    if old is None:
        raise HTTPException(status_code=404, detail="Unknown topic")
    drafts.topic_deleted(old.name)
    return store.topics


@app.get("/api/sources", response_model=List[NewsSource], tags=["sources"])
def list_sources(store: StateStore = Depends(get_store)):
    return store.sources


@app.post("/api/sources", response_model=List[NewsSource], tags=["sources"])
def add_source(payload: SourceIn = Body(...), store: StateStore = Depends(get_store)):
    if payload.domain is None:
        raise HTTPException(status_code=400, detail="Domain is required")
    store.add_source(payload.domain)
    return store.sources


@app.delete("/api/sources/{source_id}", response_model=List[NewsSource], tags=["sources"])
def delete_source(source_id: str, store: StateStore = Depends(get_store)):
    if not store.delete_source(source_id):
        raise HTTPException(status_code=404, detail="Unknown source")
    return store.sources
