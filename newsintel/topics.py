from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from .schemas import SearchResult, Topic

# gradient tokens the dashboard maps to chip colours
COLOR_PRESETS = [
    "from-violet-500 to-purple-600",
    "from-emerald-500 to-teal-600",
    "from-blue-500 to-cyan-600",
    "from-rose-500 to-pink-600",
    "from-amber-500 to-orange-600",
    "from-indigo-500 to-blue-600",
    "from-fuchsia-500 to-pink-600",
    "from-lime-500 to-green-600",
    "from-sky-500 to-blue-600",
    "from-red-500 to-rose-600",
    "from-teal-500 to-emerald-600",
    "from-orange-500 to-amber-600",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def default_topics() -> List[Topic]:
    created = _now()
    return [
        Topic(id="ai-regulation", name="AI Regulation", color=COLOR_PRESETS[0], created_at=created),
        Topic(id="tech-policy", name="Tech Policy", color=COLOR_PRESETS[1], created_at=created),
    ]


def next_color(existing: List[Topic]) -> str:
    used = {t.color for t in existing}
    for c in COLOR_PRESETS:
        if c not in used:
            return c
    return COLOR_PRESETS[len(existing) % len(COLOR_PRESETS)]


def find_topic(topics: List[Topic], topic_id: str) -> Optional[Topic]:
    return next((t for t in topics if t.id == topic_id), None)


def _name_taken(topics: List[Topic], name: str, ignore_id: Optional[str] = None) -> bool:
    lowered = name.lower()
    return any(t.name.lower() == lowered and t.id != ignore_id for t in topics)


def create_topic(name: str, existing: List[Topic]) -> Topic:
    return Topic(
        id=f"topic-{uuid.uuid4().hex[:12]}",
        name=name.strip(),
        color=next_color(existing),
        created_at=_now(),
    )


def add_topic(topics: List[Topic], name: str) -> List[Topic]:
    name = (name or "").strip()
    if not name or _name_taken(topics, name):
        return topics
    return [*topics, create_topic(name, topics)]


def rename_topic(topics: List[Topic], topic_id: str, new_name: str) -> List[Topic]:
    new_name = (new_name or "").strip()
    if not new_name or _name_taken(topics, new_name, ignore_id=topic_id):
        return topics
    return [t.model_copy(update={"name": new_name}) if t.id == topic_id else t for t in topics]


def delete_topic(topics: List[Topic], topic_id: str) -> List[Topic]:
    return [t for t in topics if t.id != topic_id]


# cascades onto results already on screen

def relabel_results(results: List[SearchResult], old_name: str, new_name: str) -> List[SearchResult]:
    return [
        r.model_copy(update={"category": new_name}) if r.category == old_name else r
        for r in results
    ]


def drop_results(results: List[SearchResult], name: str) -> List[SearchResult]:
    return [r for r in results if r.category != name]
