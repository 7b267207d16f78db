import base64, threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .schemas import Article, Insight, SearchResult, SelectedArticle
from .topics import drop_results, relabel_results

# -------- newsletter selection (ordered, keyed by url) --------

def is_selected(selected: List[SelectedArticle], url: str) -> bool:
    return any(s.id == url for s in selected)


def toggle_selection(selected: List[SelectedArticle], result: SearchResult) -> List[SelectedArticle]:
    if is_selected(selected, result.url):
        return [s for s in selected if s.id != result.url]
    return [*selected, SelectedArticle(id=result.url, article=result)]


def clear_selection() -> List[SelectedArticle]:
    return []


def selected_articles(selected: List[SelectedArticle]) -> List[Article]:
    """ Selection -> digest input, in selection order """
    return [
        Article(
            title=s.article.title,
            content=s.article.content,
            source=s.article.source,
            category=s.article.category,
            url=s.article.url,
        )
        for s in selected
    ]


# -------- per-article notes --------

def news_id(keyword: str, index: int, url: str) -> str:
    return f"{keyword}-{index}-{base64.b64encode(url.encode('utf-8')).decode('ascii')[:8]}"


class InsightBook:
    """ Notes held for the session only; nothing is written anywhere """

    def __init__(self):
        self._notes: Dict[str, Insight] = {}

    def get(self, nid: str) -> Optional[Insight]:
        return self._notes.get(nid)

    def save(self, nid: str, text: str) -> Optional[Insight]:
        if not (text or "").strip():
            self._notes.pop(nid, None)
            return None
        note = Insight(news_id=nid, insight=text, updated_at=datetime.now(timezone.utc))
        self._notes[nid] = note
        return note

    def delete(self, nid: str) -> None:
        self._notes.pop(nid, None)

    def __len__(self) -> int:
        return len(self._notes)


class DraftSession:
    """
    What the dashboard holds between refreshes: the last ranked feed, the
    newsletter selection and per-article notes. Process memory only.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.results: List[SearchResult] = []
        self.selected: List[SelectedArticle] = clear_selection()
        self.insights = InsightBook()

    def set_results(self, results: List[SearchResult]) -> None:
        with self._lock:
            self.results = list(results)

    def topic_renamed(self, old_name: str, new_name: str) -> None:
        with self._lock:
            self.results = relabel_results(self.results, old_name, new_name)

    def topic_deleted(self, name: str) -> None:
        with self._lock:
            self.results = drop_results(self.results, name)

    def toggle(self, result: SearchResult) -> List[SelectedArticle]:
        with self._lock:
            self.selected = toggle_selection(self.selected, result)
            return self.selected

    def clear(self) -> None:
        with self._lock:
            self.selected = clear_selection()

    def articles(self) -> List[Article]:
        return selected_articles(self.selected)


def stamp_news_ids(by_keyword: Dict[str, List[SearchResult]]) -> Dict[str, List[SearchResult]]:
    """ Give every result the id its notes are filed under """
    return {
        keyword: [r.model_copy(update={"news_id": news_id(keyword, i, r.url)}) for i, r in enumerate(items)]
        for keyword, items in by_keyword.items()
    }
