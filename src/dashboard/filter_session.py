"""Session holder that applies filter transitions and persists page filters."""

from __future__ import annotations

from typing import Any, Callable

from src.dashboard.page_filter_store import KeyValueStore, load_page_filters, save_page_filters
from src.models.filter_state import FilterState, replace_page_filters
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)

Transition = Callable[..., FilterState]


class FilterSession:
    """Owns the current ``FilterState`` and its page-filter store."""

    def __init__(self, store: KeyValueStore, state: FilterState | None = None) -> None:
        self.store = store
        self.state = state if state is not None else FilterState()

    @classmethod
    def restore(cls, store: KeyValueStore) -> 'FilterSession':
        """Start a session seeded with persisted page filters."""
        state = replace_page_filters(FilterState(), load_page_filters(store))
        return cls(store, state)

    def dispatch(self, transition: Transition, *args: Any, **kwargs: Any) -> FilterState:
        """Apply ``transition(state, *args)`` and persist page filters if they changed."""
        previous = self.state
        new_state = transition(previous, *args, **kwargs)
        self.state = new_state
        if dict(new_state.page_filters) != dict(previous.page_filters):
            if not save_page_filters(self.store, new_state.page_filters):
                LOGGER.info('Page filters held in memory only for this session.')
        return new_state
