# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from newsintel import config
from newsintel.api import app, get_drafts, get_store
from newsintel.drafts import DraftSession
from newsintel.store import StateStore

client = TestClient(app)


@pytest.fixture(autouse=True)
def offline(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "TAVILY_API_KEY", "")
    monkeypatch.setattr(config, "GENERATION_API_KEY", "")
    store = StateStore(str(tmp_path))
    app.dependency_overrides[get_store] = lambda: store
    drafts = DraftSession()
    app.dependency_overrides[get_drafts] = lambda: drafts
    yield
    app.dependency_overrides.clear()


def test_healthz():
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json().get("ok") is True


def test_news_demo_mode():
    r = client.post("/api/news", json={"keywords": ["AI Regulation", "Foo"], "domains": []})
    assert r.status_code == 200
    body = r.json()
    assert body["isDemo"] is True
    assert "searchedAt" in body
    assert len(body["results"]["AI Regulation"]) == 3
    item = body["results"]["Foo"][0]
    assert set(item) >= {"title", "url", "content", "score", "publishedDate", "source"}


def test_news_requires_keywords():
    assert client.post("/api/news", json={"keywords": []}).status_code == 400
    assert client.post("/api/news", json={}).status_code == 400


def test_feed_is_deduped_and_newest_first():
    r = client.get("/api/feed")
    assert r.status_code == 200
    body = r.json()
    urls = [i["url"] for i in body["results"]]
    assert len(urls) == len(set(urls))
    dates = [i["publishedDate"] for i in body["results"]]
    assert dates == sorted(dates, reverse=True)
    assert {i["category"] for i in body["results"]} == {"AI Regulation", "Tech Policy"}
    assert body["uniqueSources"] == 4

    only = client.get("/api/feed", params={"category": "Tech Policy"}).json()["results"]
    assert len(only) == 1 and only[0]["title"] == "Latest Developments in Tech Policy"


def test_summarize_fallback_without_model():
    r = client.post("/api/summarize", json={"articles": [
        {"title": "A", "content": "Body", "source": "a.com", "category": "AI", "url": "https://a.com/1"},
    ]})
    assert r.status_code == 200
    body = r.json()
    assert body["isAI"] is False
    assert "## 1. A" in body["newsletter"]


def test_summarize_requires_articles():
    assert client.post("/api/summarize", json={"articles": []}).status_code == 400


def test_extract_without_credential_is_null():
    r = client.post("/api/extract", json={"url": "https://a.com/1"})
    assert r.status_code == 200
    assert r.json() == {"extractedContent": None}
    assert client.post("/api/extract", json={}).status_code == 400


def test_topic_crud():
    topics = client.post("/api/topics", json={"name": "Data Privacy"}).json()
    assert topics[-1]["name"] == "Data Privacy"
    assert len(client.post("/api/topics", json={"name": "data privacy"}).json()) == 3

    tid = topics[-1]["id"]
    renamed = client.patch(f"/api/topics/{tid}", json={"name": "Privacy Law"}).json()
    assert renamed[-1]["name"] == "Privacy Law"

    assert client.delete(f"/api/topics/{tid}").status_code == 200
    assert client.delete(f"/api/topics/{tid}").status_code == 404
    assert client.post("/api/topics", json={"name": " "}).status_code == 400


def test_source_crud():
    before = client.get("/api/sources").json()
    after = client.post("/api/sources", json={"domain": "https://www.Example.com/path"}).json()
    assert len(after) == len(before) + 1
    assert after[-1]["domain"] == "example.com"
    assert len(client.post("/api/sources", json={"domain": "example.com"}).json()) == len(after)

    assert client.delete(f"/api/sources/{after[-1]['id']}").status_code == 200
    assert client.delete("/api/sources/nope").status_code == 404


def _item(url="https://a.com/1", title="A"):
    return {"title": title, "url": url, "content": "Body", "score": 0.5,
            "publishedDate": "2026-10-17T09:00:00Z", "source": "a.com", "category": "AI"}


def test_news_items_carry_note_ids():
    body = client.post("/api/news", json={"keywords": ["AI Regulation"]}).json()
    ids = [i["newsId"] for i in body["results"]["AI Regulation"]]
    assert ids[0].startswith("AI Regulation-0-") and ids[2].startswith("AI Regulation-2-")


def test_selection_toggle_and_clear():
    assert client.get("/api/selection").json() == []
    client.post("/api/selection", json=_item())
    sel = client.post("/api/selection", json=_item("https://b.com/2", "B")).json()
    assert [s["id"] for s in sel] == ["https://a.com/1", "https://b.com/2"]

    sel = client.post("/api/selection", json=_item()).json()
    assert [s["id"] for s in sel] == ["https://b.com/2"]
    assert client.get("/api/selection").json()[0]["article"]["title"] == "B"

    assert client.delete("/api/selection").json() == []


def test_newsletter_from_selection():
    assert client.post("/api/selection/newsletter").status_code == 400

    client.post("/api/selection", json=_item(title="Picked Story"))
    r = client.post("/api/selection/newsletter")
    assert r.status_code == 200
    body = r.json()
    assert body["isAI"] is False
    assert "## 1. Picked Story" in body["newsletter"]


def test_insight_lifecycle():
    nid = "AI Regulation-0-aHR0cHM6"
    assert client.get(f"/api/insights/{nid}").status_code == 404

    saved = client.put(f"/api/insights/{nid}", json={"insight": "Watch the EU vote"}).json()
    assert saved["newsId"] == nid and saved["insight"] == "Watch the EU vote"
    assert client.get(f"/api/insights/{nid}").json()["insight"] == "Watch the EU vote"

    assert client.put(f"/api/insights/{nid}", json={}).status_code == 400
    assert client.put(f"/api/insights/{nid}", json={"insight": "  "}).json() is None
    assert client.get(f"/api/insights/{nid}").status_code == 404

    client.put(f"/api/insights/{nid}", json={"insight": "again"})
    assert client.delete(f"/api/insights/{nid}").json() == {"ok": True}
    assert client.get(f"/api/insights/{nid}").status_code == 404


def test_topic_rename_relabels_current_feed():
    client.get("/api/feed")
    client.patch("/api/topics/tech-policy", json={"name": "Tech Law"})
    current = client.get("/api/feed/current").json()
    assert {i["category"] for i in current} == {"AI Regulation", "Tech Law"}
    assert len(client.get("/api/feed/current", params={"category": "Tech Law"}).json()) == 1


def test_topic_delete_drops_its_results_from_current_feed():
    client.get("/api/feed")
    assert client.delete("/api/topics/ai-regulation").status_code == 200
    current = client.get("/api/feed/current").json()
    assert [i["category"] for i in current] == ["Tech Policy"]
