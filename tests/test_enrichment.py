import asyncio
import json

import httpx

from newsintel import tavily
from newsintel.cleaner import clean_article_content
from newsintel.enrichment import enrich_articles
from newsintel.schemas import Article

SNIPPET = "Short snippet about the FTC.\n\n\n\nAdvertisement\nMore detail."
FULL = "Full body of the article.\nShare this article\nSecond paragraph.\nRelated articles\nnoise"


def _articles():
    return [
        Article(title="ok", content="snippet one", source="a.com", category="AI", url="https://a.com/ok"),
        Article(title="fails", content=SNIPPET, source="b.com", category="Law", url="https://b.com/fail"),
    ]


def _install(monkeypatch, handler):
    monkeypatch.setattr(
        tavily, "new_client",
        lambda timeout=None: httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://api.tavily.com"),
    )


def test_extracted_text_is_cleaned_and_failure_falls_back_to_snippet(monkeypatch):
    def handler(request):
        url = json.loads(request.content)["urls"][0]
        if url.endswith("/ok"):
            return httpx.Response(200, json={"results": [{"url": url, "raw_content": FULL}]})
        return httpx.Response(502)

    _install(monkeypatch, handler)
    out = asyncio.run(enrich_articles(_articles(), api_key="k"))

    assert [a.title for a in out] == ["ok", "fails"]
    assert out[0].content == "Full body of the article.\n\nSecond paragraph."
    assert out[1].content == clean_article_content(SNIPPET)
    assert out[1].content != ""


def test_text_field_used_when_raw_content_missing(monkeypatch):
    _install(monkeypatch, lambda r: httpx.Response(200, json={"results": [{"text": "Plain text body."}]}))
    out = asyncio.run(enrich_articles(_articles()[:1], api_key="k"))
    assert out[0].content == "Plain text body."


def test_empty_extraction_falls_back(monkeypatch):
    _install(monkeypatch, lambda r: httpx.Response(200, json={"results": []}))
    out = asyncio.run(enrich_articles(_articles()[:1], api_key="k"))
    assert out[0].content == "snippet one"


def test_without_credential_snippets_are_cleaned():
    out = asyncio.run(enrich_articles(_articles(), api_key=None))
    assert [a.content for a in out] == ["snippet one", clean_article_content(SNIPPET)]


def test_extract_content_without_key_is_none():
    assert asyncio.run(tavily.extract_content("https://a.com", None)) is None


def test_unexpected_extraction_error_falls_back_to_snippet(monkeypatch):
    async def flaky(url, api_key, client=None):
        if url.endswith("/fail"):
            raise httpx.InvalidURL("bad base url")
        return "Extracted body."

    monkeypatch.setattr(tavily, "extract_content", flaky)
    out = asyncio.run(enrich_articles(_articles(), api_key="k"))
    assert [a.content for a in out] == ["Extracted body.", clean_article_content(SNIPPET)]


def test_broken_client_setup_uses_snippets(monkeypatch):
    def broken(timeout=None):
        raise httpx.InvalidURL("no scheme")

    monkeypatch.setattr(tavily, "new_client", broken)
    out = asyncio.run(enrich_articles(_articles(), api_key="k"))
    assert [a.content for a in out] == ["snippet one", clean_article_content(SNIPPET)]
