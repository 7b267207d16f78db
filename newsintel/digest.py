from __future__ import annotations
import logging
from datetime import date
from typing import List, Optional, Tuple

from . import config
from .enrichment import enrich_articles
from .schemas import Article

log = logging.getLogger("uvicorn.error")

PREVIEW_CHARS = 300   # fallback digest shows only a short preview per article
TITLE = "News Intelligence Weekly"


def korean_date(d: date) -> str:
    return f"{d.year}년 {d.month}월 {d.day}일"


def _preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    text = (text or "").strip()
    return text if len(text) <= limit else text[:limit] + "..."


def fallback_newsletter(articles: List[Article], today: Optional[date] = None) -> str:
    """
    Plain Markdown digest built straight from article data; used whenever the
    model is unavailable or fails
    """
    today = today or date.today()
    parts = [
        f"# {TITLE}\n",
        f"{korean_date(today)}\n\n",
        "---\n\n",
        "## Executive Summary\n\n",
        f"이번 주 주요 뉴스 {len(articles)}건을 정리했습니다.\n\n",
        "---\n\n",
    ]
    for i, a in enumerate(articles):
        parts.append(f"## {i + 1}. {a.title}\n\n")
        parts.append(f"**카테고리:** {a.category} | **출처:** {a.source}\n\n")
        parts.append(f"{_preview(a.content)}\n\n")
        parts.append("**Key Insight:** 해당 기사의 주요 함의를 검토하시기 바랍니다.\n\n")
        parts.append(f"[원문 보기]({a.url})\n\n")
        if i < len(articles) - 1:
            parts.append("---\n\n")
    return "".join(parts)


def _articles_block(articles: List[Article]) -> str:
    return "\n\n---\n\n".join(
        f"[Article {i + 1}]\nTitle: {a.title}\nSource: {a.source}\n"
        f"Category: {a.category}\nContent: {a.content}\nURL: {a.url}"
        for i, a in enumerate(articles)
    )


def build_prompt(articles: List[Article], today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"""You are a top Substack newsletter writer known for sharp, engaging analysis. Write a Korean-language newsletter from the articles below.

Use rich Markdown formatting. Follow this structure exactly:

# 📮 {TITLE}
> 한 줄 서브헤딩 — 이번 호의 핵심 키워드를 담은 문장

**{korean_date(today)}**

---

## 🔍 이번 주 핵심 요약

Write 3-4 sentences summarizing the overarching themes across all articles. Use **bold** for key phrases.

---

Then for EACH article, write a section like this:

## 1. [Article title in Korean translation]

**📌 카테고리:** Category | **출처:** Source

Write a 3-4 sentence analysis in Korean. Add context, explain *why this matters*, and connect it to broader trends.

> 💡 **핵심 인사이트:** One sentence takeaway in Korean.

🔗 [원문 읽기](url)

---

After all articles, end with:

## 📝 에디터 노트

Write 2-3 closing sentences connecting the dots between the articles, with a forward-looking perspective.

---

*다음 호에서 또 만나요! 🙌*

IMPORTANT RULES:
- Write ALL analysis and insights in Korean
- Keep article titles translated to Korean
- Tone: professional yet warm, like a trusted industry insider
- Base your analysis on the FULL article content provided, not just headlines

Articles:
{_articles_block(articles)}"""


async def _complete(prompt: str, api_key: str) -> str:
    from openai import AsyncOpenAI
    async with AsyncOpenAI(api_key=api_key, base_url=config.GENERATION_BASE_URL) as client:
        resp = await client.chat.completions.create(
            model=config.GENERATION_MODEL,
            temperature=0.7,
            messages=[{"role": "user", "content": prompt}],
        )
    return (resp.choices[0].message.content or "").strip()


async def generate_newsletter(
    articles: List[Article],
    api_key: Optional[str] = None,
    extract_key: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[str, bool]:
    """
    Returns (markdown, is_ai). Never raises: no key, an empty reply or any
    model error all fall back to the local digest.
    """
    if not api_key:
        cleaned = await enrich_articles(articles, None)
        return fallback_newsletter(cleaned, today), False

    enriched = await enrich_articles(articles, extract_key)
    try:
        text = await _complete(build_prompt(enriched, today), api_key)
    except Exception as e:
        log.warning(f"newsletter generation failed; falling back. Error: {e}")
        return fallback_newsletter(enriched, today), False

    if not text:
        log.warning("model returned an empty newsletter; falling back")
        return fallback_newsletter(enriched, today), False
    return text, True
