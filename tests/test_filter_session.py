from __future__ import annotations

from src.dashboard.filter_session import FilterSession
from src.dashboard.page_filter_store import MemoryStore, load_page_filters, save_page_filters
from src.models.filter_state import (
    PageFilter,
    add_page_filter,
    page_filters_for,
    remove_page_filter,
    set_lob,
)


class _CountingStore(MemoryStore):
    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        super().set(key, value)


class _ReadOnlyStore(MemoryStore):
    def set(self, key: str, value: str) -> None:
        raise OSError('quota exceeded')


def test_page_filter_transitions_are_persisted() -> None:
    store = _CountingStore()
    session = FilterSession(store)

    session.dispatch(add_page_filter, '/dashboard', PageFilter(id='a', field='region', value='NORTH'))
    assert store.writes == 1
    assert list(load_page_filters(store)) == ['/dashboard']

    session.dispatch(remove_page_filter, '/dashboard', 'a')
    assert store.writes == 2
    assert load_page_filters(store) == {}


def test_global_filter_transitions_do_not_touch_store() -> None:
    store = _CountingStore()
    session = FilterSession(store)
    state = session.dispatch(set_lob, ['LCB'])

    assert store.writes == 0
    assert session.state is state
    assert state.global_filters.lob == ('LCB',)


def test_restore_seeds_page_filters() -> None:
    store = MemoryStore()
    saved = {'/kpi/par': (PageFilter(id='x', field='segment', value='SME'),)}
    save_page_filters(store, saved)

    session = FilterSession.restore(store)
    assert page_filters_for(session.state, '/kpi/par') == saved['/kpi/par']
    assert session.state.global_filters.lob == ()


def test_persistence_failure_keeps_in_memory_state() -> None:
    session = FilterSession(_ReadOnlyStore())
    session.dispatch(add_page_filter, 'p', PageFilter(id='a', field='region', value='WEST'))
    assert [f.id for f in page_filters_for(session.state, 'p')] == ['a']
