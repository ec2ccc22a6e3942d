"""Filter state value and pure transition functions.

Every transition returns a new ``FilterState``; nothing is mutated in place, so
a reader holding a state always sees a complete snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterable, Mapping

GLOBAL_FILTER_COLUMNS = {
    'lob': 'line_of_business',
    'party_type': 'party_type',
    'rating': 'borrower_external_rating',
    'asset_classification': 'asset_class',
}

SORT_DIRECTIONS = ('asc', 'desc')
DEFAULT_SORT_FIELD = 'customer_name'


@dataclass(frozen=True)
class GlobalFilters:
    """Allowed-value sets per global layer. Empty tuple means unrestricted."""

    lob: tuple[str, ...] = ()
    party_type: tuple[str, ...] = ()
    rating: tuple[str, ...] = ()
    asset_classification: tuple[str, ...] = ()


@dataclass(frozen=True)
class DrillDownFilter:
    field: str
    value: str
    label: str = ''
    source: str | None = None


@dataclass(frozen=True)
class PageFilter:
    id: str
    field: str
    value: str
    label: str = ''
    source: str = ''
    timestamp: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'field': self.field,
            'value': self.value,
            'label': self.label,
            'source': self.source,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> 'PageFilter':
        """Build from a persisted record. Raises KeyError/ValueError on bad input."""
        return cls(
            id=str(payload['id']),
            field=str(payload['field']),
            value=str(payload['value']),
            label=str(payload.get('label', '') or ''),
            source=str(payload.get('source', '') or ''),
            timestamp=float(payload.get('timestamp', 0.0) or 0.0),
        )


def _empty_pages() -> Mapping[str, tuple[PageFilter, ...]]:
    return MappingProxyType({})


@dataclass(frozen=True)
class FilterState:
    global_filters: GlobalFilters = field(default_factory=GlobalFilters)
    drill_down: DrillDownFilter | None = None
    page_filters: Mapping[str, tuple[PageFilter, ...]] = field(default_factory=_empty_pages)
    search_term: str = ''
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = 'asc'
    selected_account_id: str | None = None


def _as_values(values: Iterable[Any] | None) -> tuple[str, ...]:
    if values is None:
        return ()
    out: list[str] = []
    for v in values:
        s = str(v)
        if s not in out:
            out.append(s)
    return tuple(out)


def _with_global(state: FilterState, **changes: Any) -> FilterState:
    return replace(state, global_filters=replace(state.global_filters, **changes))


def _with_pages(state: FilterState, pages: dict[str, tuple[PageFilter, ...]]) -> FilterState:
    cleaned = {k: v for k, v in pages.items() if v}
    return replace(state, page_filters=MappingProxyType(cleaned))


def set_lob(state: FilterState, values: Iterable[Any] | None) -> FilterState:
    return _with_global(state, lob=_as_values(values))


def set_party_type(state: FilterState, values: Iterable[Any] | None) -> FilterState:
    return _with_global(state, party_type=_as_values(values))


def set_rating(state: FilterState, values: Iterable[Any] | None) -> FilterState:
    return _with_global(state, rating=_as_values(values))


def set_asset_classification(state: FilterState, values: Iterable[Any] | None) -> FilterState:
    return _with_global(state, asset_classification=_as_values(values))


def clear_global_filters(state: FilterState) -> FilterState:
    return replace(state, global_filters=GlobalFilters())


def has_active_filters(state: FilterState) -> bool:
    """True when any global layer restricts the collection."""
    g = state.global_filters
    return bool(g.lob or g.party_type or g.rating or g.asset_classification)


def global_filter_values(state: FilterState) -> dict[str, tuple[str, ...]]:
    g = state.global_filters
    return {
        'lob': g.lob,
        'party_type': g.party_type,
        'rating': g.rating,
        'asset_classification': g.asset_classification,
    }


def set_drill_down_filter(state: FilterState, drill_down: DrillDownFilter | None) -> FilterState:
    return replace(state, drill_down=drill_down)


def clear_drill_down_filter(state: FilterState) -> FilterState:
    return replace(state, drill_down=None)


def page_filters_for(state: FilterState, page: str | None) -> tuple[PageFilter, ...]:
    if page is None:
        return ()
    return tuple(state.page_filters.get(page, ()))


def make_page_filter(field: str, value: Any, label: str = '', source: str = '') -> PageFilter:
    """Create a page filter with a timestamp-based id."""
    now = datetime.now(timezone.utc).timestamp()
    return PageFilter(
        id=f'{field}-{value}-{int(now * 1000)}',
        field=str(field),
        value=str(value),
        label=label or str(value),
        source=source,
        timestamp=now,
    )


def add_page_filter(state: FilterState, page: str, page_filter: PageFilter) -> FilterState:
    """Append a filter to a page. Same field/value already present is a no-op."""
    current = page_filters_for(state, page)
    for existing in current:
        if existing.field == page_filter.field and existing.value.lower() == page_filter.value.lower():
            return state
    pages = dict(state.page_filters)
    pages[page] = current + (page_filter,)
    return _with_pages(state, pages)


def remove_page_filter(state: FilterState, page: str, filter_id: str) -> FilterState:
    current = page_filters_for(state, page)
    remaining = tuple(f for f in current if f.id != filter_id)
    if len(remaining) == len(current):
        return state
    pages = dict(state.page_filters)
    pages[page] = remaining
    return _with_pages(state, pages)


def clear_page_filters(state: FilterState, page: str) -> FilterState:
    if page not in state.page_filters:
        return state
    pages = dict(state.page_filters)
    pages.pop(page)
    return _with_pages(state, pages)


def replace_page_filters(state: FilterState, pages: Mapping[str, Iterable[PageFilter]]) -> FilterState:
    """Swap in a whole page-filter mapping, e.g. one restored from persistence."""
    return _with_pages(state, {str(k): tuple(v) for k, v in pages.items()})


def set_search_term(state: FilterState, term: str | None) -> FilterState:
    return replace(state, search_term=(term or '').strip())


def set_sort(state: FilterState, sort_field: str, direction: str = 'asc') -> FilterState:
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f'Sort direction must be one of {SORT_DIRECTIONS}, got {direction!r}.')
    return replace(state, sort_field=sort_field, sort_direction=direction)


def toggle_sort(state: FilterState, sort_field: str) -> FilterState:
    """Flip direction on the active field, otherwise sort the new field ascending."""
    if state.sort_field == sort_field:
        direction = 'desc' if state.sort_direction == 'asc' else 'asc'
        return replace(state, sort_direction=direction)
    return replace(state, sort_field=sort_field, sort_direction='asc')


def set_selected_account(state: FilterState, account_id: str | None) -> FilterState:
    return replace(state, selected_account_id=account_id)


def reset(state: FilterState | None = None) -> FilterState:
    """Return the initial state. Page filters survive a reset since they are persisted per page."""
    if state is None:
        return FilterState()
    return FilterState(page_filters=state.page_filters)
