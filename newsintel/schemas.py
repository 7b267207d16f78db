from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict


def parse_published(value) -> Optional[datetime]:
    """
    Accepts ISO-8601 ("2026-10-17T09:00:00Z") or RFC-2822
    ("Sat, 17 Oct 2026 09:00:00 GMT"); returns an aware datetime or None
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            try:
                dt = parsedate_to_datetime(s)
            except (TypeError, ValueError):
                return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# camelCase on the wire, snake_case in python
class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# one ranked news item
class SearchResult(_Model):
    title: str = ""
    url: str
    content: str = ""
    score: float = 0.0
    published_date: datetime = Field(alias="publishedDate")
    source: str = ""
    category: str = ""
    news_id: Optional[str] = Field(default=None, alias="newsId")


# ---- provider payloads (validated at the edge) ----

class TavilyResult(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None
    content: Optional[str] = None
    score: Optional[float] = None
    published_date: Optional[datetime] = None

    @field_validator("published_date", mode="before")
    @classmethod
    def _lenient_date(cls, v):
        return parse_published(v)

    @field_validator("score", mode="before")
    @classmethod
    def _lenient_score(cls, v):
        try:
            return float(v) if v is not None else None
        except (TypeError, ValueError):
            return None


class TavilySearchResponse(BaseModel):
    results: List[TavilyResult] = []


class TavilyExtracted(BaseModel):
    url: Optional[str] = None
    raw_content: Optional[str] = None
    text: Optional[str] = None


class TavilyExtractResponse(BaseModel):
    results: List[TavilyExtracted] = []


# ---- client-held state ----

class Topic(_Model):
    id: str
    name: str
    color: str
    created_at: datetime = Field(alias="createdAt")


class NewsSource(_Model):
    id: str
    domain: str
    name: str


class SelectedArticle(_Model):
    id: str                 # the article url
    article: SearchResult


class Insight(_Model):
    news_id: str = Field(alias="newsId")
    insight: str
    updated_at: datetime = Field(alias="updatedAt")


# ---- HTTP surface ----

# what the dashboard sends to /api/news
class NewsRequest(BaseModel):
    keywords: Optional[List[str]] = None
    domains: Optional[List[str]] = None


class NewsResponse(_Model):
    results: Dict[str, List[SearchResult]]
    searched_at: datetime = Field(alias="searchedAt")
    is_demo: bool = Field(alias="isDemo")


class FeedResponse(_Model):
    results: List[SearchResult]
    searched_at: datetime = Field(alias="searchedAt")
    is_demo: bool = Field(alias="isDemo")
    unique_sources: int = Field(alias="uniqueSources")


# a selected article handed to the digest
class Article(BaseModel):
    title: str = ""
    content: str = ""
    source: str = ""
    category: str = ""
    url: str = ""


class SummarizeRequest(BaseModel):
    articles: Optional[List[Article]] = None


class SummarizeResponse(_Model):
    newsletter: str
    is_ai: bool = Field(alias="isAI")


class ExtractRequest(BaseModel):
    url: Optional[str] = None


class ExtractResponse(_Model):
    extracted_content: Optional[str] = Field(default=None, alias="extractedContent")


class TopicIn(BaseModel):
    name: Optional[str] = None


class SourceIn(BaseModel):
    domain: Optional[str] = None


class InsightIn(BaseModel):
    insight: Optional[str] = None
