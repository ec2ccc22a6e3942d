"""Drill-down banner and page filter chips."""

from __future__ import annotations

import streamlit as st

from src.dashboard.filter_session import FilterSession
from src.models.filter_state import (
    clear_drill_down_filter,
    clear_page_filters,
    page_filters_for,
    remove_page_filter,
)


def render_drill_down_banner(session: FilterSession) -> None:
    drill_down = session.state.drill_down
    if drill_down is None:
        return
    c1, c2 = st.columns([5, 1])
    with c1:
        source = f' (from {drill_down.source})' if drill_down.source else ''
        st.info(f'Drill-down active: {drill_down.label or drill_down.value}{source}')
    with c2:
        if st.button('Clear drill-down', key='drill_down_clear'):
            session.dispatch(clear_drill_down_filter)
            st.rerun()


def render_page_filter_chips(session: FilterSession, page: str) -> None:
    """One removable chip per page filter. Stale chips stay visible so they can be removed."""
    filters = page_filters_for(session.state, page)
    if not filters:
        return
    st.caption('Page filters')
    cols = st.columns(len(filters) + 1)
    for col, page_filter in zip(cols, filters):
        if col.button(f'{page_filter.label or page_filter.value}  x', key=f'page_filter_{page}_{page_filter.id}'):
            session.dispatch(remove_page_filter, page, page_filter.id)
            st.rerun()
    if cols[-1].button('Clear all', key=f'page_filter_{page}_clear'):
        session.dispatch(clear_page_filters, page)
        st.rerun()
