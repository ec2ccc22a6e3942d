"""Sidebar filter controls and state normalization helpers."""

from __future__ import annotations

from typing import Any

import streamlit as st

from src.calculations.breakdowns import Dimension, Metric
from src.dashboard.filter_session import FilterSession
from src.models.filter_state import (
    clear_global_filters,
    global_filter_values,
    set_asset_classification,
    set_lob,
    set_party_type,
    set_rating,
    set_search_term,
)

GLOBAL_FILTER_LABELS = {
    'lob': 'Line of Business',
    'party_type': 'Party Type',
    'rating': 'External Rating',
    'asset_classification': 'Asset Classification',
}

GLOBAL_FILTER_SETTERS = {
    'lob': set_lob,
    'party_type': set_party_type,
    'rating': set_rating,
    'asset_classification': set_asset_classification,
}

CHART_TYPES = ['bar', 'pie']


def coerce_option(current: Any, options: list[Any], default: Any) -> Any:
    """Return a stable option value that is guaranteed to be in options."""
    if not options:
        return default
    if current in options:
        return current
    if default in options:
        return default
    return options[0]


def coerce_selection(current: list[Any] | tuple[Any, ...] | None, options: list[Any]) -> list[Any]:
    """Keep only selected values that are still offered."""
    if not current:
        return []
    allowed = set(options)
    return [v for v in current if v in allowed]


def render_global_filter_controls(session: FilterSession, options: dict[str, list[str]]) -> None:
    """Render the four global multi-selects and the search box into the sidebar."""
    current = global_filter_values(session.state)
    with st.sidebar:
        st.subheader('Filters')
        for key, label in GLOBAL_FILTER_LABELS.items():
            choices = options.get(key, [])
            selected = st.multiselect(
                label,
                options=choices,
                default=coerce_selection(current.get(key), choices),
                key=f'global_filter_{key}',
            )
            if tuple(selected) != tuple(current.get(key, ())):
                session.dispatch(GLOBAL_FILTER_SETTERS[key], selected)

        term = st.text_input('Search name, id, group, industry', value=session.state.search_term, key='global_search')
        if term.strip() != session.state.search_term:
            session.dispatch(set_search_term, term)

        if st.button('Clear global filters', key='global_filter_clear'):
            session.dispatch(clear_global_filters)
            for key in GLOBAL_FILTER_LABELS:
                st.session_state.pop(f'global_filter_{key}', None)
            st.rerun()


def render_slicer_controls(key_prefix: str = 'slicer') -> dict[str, Any]:
    """Dimension, metric, and chart-type pickers for the master slicer."""
    dimensions = list(Dimension)
    metrics = list(Metric)
    c1, c2, c3 = st.columns(3)
    with c1:
        dimension = st.selectbox(
            'Slice by',
            dimensions,
            index=dimensions.index(coerce_option(st.session_state.get(f'{key_prefix}_dimension'), dimensions, Dimension.REGION)),
            format_func=lambda d: d.label,
            key=f'{key_prefix}_dimension',
        )
    with c2:
        metric = st.selectbox(
            'Metric',
            metrics,
            index=metrics.index(coerce_option(st.session_state.get(f'{key_prefix}_metric'), metrics, Metric.EXPOSURE)),
            format_func=lambda m: m.label,
            key=f'{key_prefix}_metric',
        )
    with c3:
        chart_type = st.radio(
            'Chart',
            options=CHART_TYPES,
            index=CHART_TYPES.index(coerce_option(st.session_state.get(f'{key_prefix}_chart'), CHART_TYPES, 'bar')),
            horizontal=True,
            key=f'{key_prefix}_chart',
        )
    return {'dimension': dimension, 'metric': metric, 'chart_type': chart_type}
