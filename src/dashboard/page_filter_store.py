"""Persistent store for page-scoped filters.

All pages share one namespaced key whose value is a JSON blob mapping page id
to a list of filter records. A missing, unreadable, or malformed store reads as
"no page filters"; write failures are logged and never raised.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Protocol

from src.models.filter_state import PageFilter
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)

PAGE_FILTERS_KEY = 'cr360-page-filters'
PAGE_FILTER_STORE_FILENAME = '.cr360_page_filters.json'


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store for tests and sessions without disk access."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Key-value store kept as a single JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open('r', encoding='utf-8') as f:
            raw = json.load(f)
        return raw if isinstance(raw, dict) else {}

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        try:
            payload = self._read_all()
        except (OSError, ValueError):
            payload = {}
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=True)


def serialize_page_filters(page_filters: Mapping[str, tuple[PageFilter, ...]]) -> str:
    payload = {
        str(page): [f.to_dict() for f in filters]
        for page, filters in page_filters.items()
        if filters
    }
    return json.dumps(payload, sort_keys=True)


def parse_page_filters(raw: str | None) -> dict[str, tuple[PageFilter, ...]]:
    """Decode a stored blob. Bad records are skipped, a bad blob reads as empty."""
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except ValueError:
        LOGGER.warning('Page filter store is not valid JSON; starting with no page filters.')
        return {}
    if not isinstance(payload, dict):
        LOGGER.warning('Page filter store has unexpected shape; starting with no page filters.')
        return {}

    out: dict[str, tuple[PageFilter, ...]] = {}
    for page, records in payload.items():
        if not isinstance(records, list):
            continue
        filters: list[PageFilter] = []
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                filters.append(PageFilter.from_dict(record))
            except (KeyError, TypeError, ValueError):
                LOGGER.warning('Skipping malformed page filter on page %s.', page)
        if filters:
            out[str(page)] = tuple(filters)
    return out


def load_page_filters(store: KeyValueStore) -> dict[str, tuple[PageFilter, ...]]:
    try:
        raw = store.get(PAGE_FILTERS_KEY)
    except (OSError, ValueError) as exc:
        LOGGER.warning('Page filter store unavailable (%s); starting with no page filters.', exc)
        return {}
    return parse_page_filters(raw)


def save_page_filters(store: KeyValueStore, page_filters: Mapping[str, tuple[PageFilter, ...]]) -> bool:
    """Persist page filters. Returns False when the store could not be written."""
    try:
        store.set(PAGE_FILTERS_KEY, serialize_page_filters(page_filters))
    except (OSError, TypeError, ValueError) as exc:
        LOGGER.warning('Could not persist page filters (%s); keeping in-memory state.', exc)
        return False
    return True
