"""Codecs between in-memory store state and persisted JSON documents.

Cache document: a JSON array of entries.
Learning document: a JSON object mapping category -> array of patterns.
A flat array of patterns is also accepted on read.

Decoders raise ValueError, TypeError, KeyError or OverflowError on a document of the
wrong shape; ``PersistedStore`` treats that as an unparsable document.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from answer_cache.entities import DEFAULT_CATEGORY, CacheEntry, LearnedPattern
from answer_cache.normalization import clean_text, normalize_question

CacheState = dict[str, CacheEntry]
LearningState = dict[str, LearnedPattern]


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------
# Response cache
# ---------------------------------------------------------------------
def encode_cache(state: CacheState) -> list[dict[str, Any]]:
    return [
        {
            "key": entry.key,
            "question": entry.question,
            "answer": entry.answer,
            "hits": entry.hits,
            "createdAt": format_timestamp(entry.created_at),
            "lastUsedAt": format_timestamp(entry.last_used_at),
        }
        for entry in state.values()
    ]


def decode_cache(document: Any) -> CacheState:
    if not isinstance(document, list):
        raise TypeError(f"cache document must be a list, got {type(document).__name__}")

    state: CacheState = {}
    for item in document:
        entry = _decode_cache_entry(item)
        # First entry wins on duplicate keys
        state.setdefault(entry.key, entry)
    return state


def _decode_cache_entry(item: Any) -> CacheEntry:
    if not isinstance(item, dict):
        raise TypeError(f"cache entry must be an object, got {type(item).__name__}")

    question = clean_text(item["question"], "question")
    key = normalize_question(item.get("key") or question)
    hits = max(0, int(item.get("hits", 0)))

    # Older documents call it "lastUsed" and set it on creation
    last_used_raw = item.get("lastUsedAt", item.get("lastUsed"))
    last_used_at = parse_timestamp(last_used_raw) if hits and last_used_raw else None

    return CacheEntry(
        key=str(key),
        question=question,
        answer=clean_text(item["answer"], "answer"),
        hits=hits,
        created_at=parse_timestamp(item["createdAt"]),
        last_used_at=last_used_at,
    )


# ---------------------------------------------------------------------
# Pattern learner
# ---------------------------------------------------------------------
def encode_learning(state: LearningState) -> dict[str, list[dict[str, Any]]]:
    document: dict[str, list[dict[str, Any]]] = {}
    for pattern in state.values():
        document.setdefault(pattern.category, []).append(
            {
                "id": pattern.id,
                "question": pattern.question,
                "category": pattern.category,
                "frequency": pattern.frequency,
                "firstAsked": format_timestamp(pattern.first_asked),
                "lastAsked": format_timestamp(pattern.last_asked),
                "addedToTraining": pattern.added_to_training,
                "answer": pattern.answer,
            }
        )
    return document


def decode_learning(document: Any) -> LearningState:
    if isinstance(document, list):
        groups: dict[str, Any] = {DEFAULT_CATEGORY: document}
    elif isinstance(document, dict):
        groups = document
    else:
        raise TypeError(f"learning document must be an object, got {type(document).__name__}")

    state: LearningState = {}
    for group, items in groups.items():
        if not isinstance(items, list):
            raise TypeError(f"category {group!r} must hold a list, got {type(items).__name__}")
        for item in items:
            pattern = _decode_pattern(item, group)
            state.setdefault(pattern.id, pattern)
    return state


def _decode_pattern(item: Any, group: str) -> LearnedPattern:
    if not isinstance(item, dict):
        raise TypeError(f"pattern must be an object, got {type(item).__name__}")

    first_asked = parse_timestamp(item["firstAsked"])
    answer = item.get("answer")

    return LearnedPattern(
        id=str(item.get("id") or uuid.uuid4().hex),
        question=clean_text(item["question"], "question"),
        category=str(item.get("category") or group or DEFAULT_CATEGORY),
        frequency=max(1, int(item.get("frequency", 1))),
        first_asked=first_asked,
        last_asked=parse_timestamp(item["lastAsked"]) if item.get("lastAsked") else first_asked,
        added_to_training=bool(item.get("addedToTraining", False)),
        answer=str(answer) if answer else None,
    )
