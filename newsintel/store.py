import os, json, logging, threading
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ValidationError

from . import sources as source_ops
from . import topics as topic_ops
from .schemas import NewsSource, Topic

log = logging.getLogger("uvicorn.error")

TOPICS_KEY = "tech-law-topics"
SOURCES_KEY = "news-intel-sources"


def _path(data_dir: str, key: str) -> str:
    return os.path.join(data_dir, f"{key}.json")


def _load_list(path: str, model: type, default: Callable[[], List[Any]]) -> List[Any]:
    """ Missing, unparsable, non-list or empty file -> defaults """
    if not os.path.exists(path):
        return default()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list) or not data:
            return default()
        return [model.model_validate(d) for d in data]
    except (OSError, ValueError, ValidationError) as e:
        log.warning(f"{os.path.basename(path)} unreadable, using defaults: {e}")
        return default()


def _save_list(path: str, items: List[BaseModel]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump([i.model_dump(mode="json", by_alias=True) for i in items], f, ensure_ascii=False, indent=2)


class StateStore:
    """
    Topics and sources backed by one JSON array per key under `data_dir`.
    Loaded once on construction; written back only when a mutation changes something.
    Mutations are serialized so concurrent requests cannot drop each other's writes.
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self._lock = threading.Lock()
        os.makedirs(data_dir, exist_ok=True)
        self.topics: List[Topic] = _load_list(_path(data_dir, TOPICS_KEY), Topic, topic_ops.default_topics)
        self.sources: List[NewsSource] = _load_list(
            _path(data_dir, SOURCES_KEY), NewsSource, lambda: list(source_ops.DEFAULT_SOURCES)
        )

    # -------- topics --------
    def _set_topics(self, updated: List[Topic]) -> bool:
        if updated is self.topics:
            return False
        self.topics = updated
        _save_list(_path(self.data_dir, TOPICS_KEY), updated)
        return True

    def get_topic(self, topic_id: str) -> Optional[Topic]:
        return topic_ops.find_topic(self.topics, topic_id)

    def add_topic(self, name: str) -> bool:
        with self._lock:
            return self._set_topics(topic_ops.add_topic(self.topics, name))

    def rename_topic(self, topic_id: str, name: str) -> Optional[Topic]:
        """ Returns the topic as it was before the rename, or None when nothing changed """
        with self._lock:
            old = self.get_topic(topic_id)
            if old is None:
                return None
            return old if self._set_topics(topic_ops.rename_topic(self.topics, topic_id, name)) else None

    def delete_topic(self, topic_id: str) -> Optional[Topic]:
        """ Returns the removed topic, or None for an unknown id """
        with self._lock:
            old = self.get_topic(topic_id)
            if old is None:
                return None
            self._set_topics(topic_ops.delete_topic(self.topics, topic_id))
            return old

    # -------- sources --------
    def _set_sources(self, updated: List[NewsSource]) -> bool:
        if updated is self.sources:
            return False
        self.sources = updated
        _save_list(_path(self.data_dir, SOURCES_KEY), updated)
        return True

    def add_source(self, raw_domain: str) -> bool:
        with self._lock:
            return self._set_sources(source_ops.add_source(self.sources, raw_domain))

    def delete_source(self, source_id: str) -> bool:
        with self._lock:
            if not any(s.id == source_id for s in self.sources):
                return False
            return self._set_sources(source_ops.delete_source(self.sources, source_id))
