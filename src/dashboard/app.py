"""Streamlit app entrypoint for the portfolio risk dashboard."""

from __future__ import annotations

import os
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd
import streamlit as st

from src.calculations.breakdowns import (
    NO_DATA_LABEL,
    Dimension,
    Metric,
    aggregate_by_dimension,
    calculate_breakdowns,
    dimension_filter_label,
)
from src.calculations.delinquency_matrix import build_delinquency_matrix
from src.calculations.filters import apply_filters, sort_accounts, unique_filter_values
from src.calculations.top_exposures import DEFAULT_TOP_N
from src.calculations.trends import SyntheticTrendSource
from src.dashboard.components.controls import coerce_option, render_global_filter_controls, render_slicer_controls
from src.dashboard.components.exposure_tables import render_portfolio_table, render_top_exposure_tables
from src.dashboard.components.filter_chips import render_drill_down_banner, render_page_filter_chips
from src.dashboard.components.summary_cards import advance_kpi_snapshot, render_kpi_cards
from src.dashboard.filter_session import FilterSession
from src.dashboard.page_filter_store import PAGE_FILTER_STORE_FILENAME, JsonFileStore
from src.dashboard.plots.risk_plots import (
    build_delinquency_heatmap,
    build_trend_figure,
    render_breakdown_chart,
)
from src.data.loader import load_accounts
from src.models.filter_state import (
    DrillDownFilter,
    add_page_filter,
    make_page_filter,
    set_drill_down_filter,
    toggle_sort,
)

DEFAULT_INPUT_PATH = PROJECT_ROOT / 'Accounts.xlsx'
STORE_PATH_ENV = 'CR360_PAGE_FILTER_STORE'

PAGE_DASHBOARD = 'dashboard'
PAGE_PORTFOLIO = 'portfolio'
SECTIONS = ['Dashboard', 'Portfolio']


@st.cache_data
def _load(path: str) -> pd.DataFrame:
    return load_accounts(path)


def _store_path() -> Path:
    return Path(os.environ.get(STORE_PATH_ENV, str(PROJECT_ROOT / PAGE_FILTER_STORE_FILENAME)))


def _session() -> FilterSession:
    if 'filter_session' not in st.session_state:
        st.session_state['filter_session'] = FilterSession.restore(JsonFileStore(_store_path()))
    return st.session_state['filter_session']


def _render_slicer_actions(session: FilterSession, entries: list[dict], dimension: Dimension) -> None:
    """Turn a slicer bar into a drill-down (portfolio view) or a page filter."""
    values = [e['label'] for e in entries if e['label'] != NO_DATA_LABEL]
    if not values:
        return
    c1, c2, c3 = st.columns([2, 1, 1])
    with c1:
        picked = st.selectbox('Selected segment', values, key='slicer_action_value')
    label = dimension_filter_label(dimension, picked)
    with c2:
        if st.button('View counterparties', key='slicer_action_drill'):
            session.dispatch(
                set_drill_down_filter,
                DrillDownFilter(field=dimension.column, value=picked, label=label, source='Master Slicer'),
            )
            st.session_state['pending_section'] = 'Portfolio'
            st.rerun()
    with c3:
        if st.button('Apply as filter', key='slicer_action_filter'):
            session.dispatch(
                add_page_filter,
                PAGE_DASHBOARD,
                make_page_filter(dimension.column, picked, label=label, source='Dashboard - Master Slicer'),
            )
            st.rerun()


def _render_dashboard(session: FilterSession, accounts_df: pd.DataFrame) -> None:
    render_drill_down_banner(session)
    render_page_filter_chips(session, PAGE_DASHBOARD)
    filtered = apply_filters(accounts_df, session.state, page=PAGE_DASHBOARD)
    st.caption(f'{len(filtered):,d} of {len(accounts_df):,d} accounts match the current filters.')

    kpis, snapshot = advance_kpi_snapshot(st.session_state.get('kpi_snapshot'), session.state, filtered)
    st.session_state['kpi_snapshot'] = snapshot
    render_kpi_cards(kpis)

    st.subheader('Master Slicer')
    slicer = render_slicer_controls()
    entries = aggregate_by_dimension(filtered, slicer['dimension'], slicer['metric'])
    render_breakdown_chart(entries, slicer['dimension'], slicer['metric'], slicer['chart_type'], key='master_slicer')
    _render_slicer_actions(session, entries, slicer['dimension'])

    breakdowns = calculate_breakdowns(filtered)
    c1, c2 = st.columns(2)
    with c1:
        render_breakdown_chart(breakdowns['region'], Dimension.REGION, Metric.EXPOSURE, 'pie', key='region_breakdown')
    with c2:
        render_breakdown_chart(breakdowns['product'], Dimension.PRODUCT_TYPE, Metric.EXPOSURE, 'bar', key='product_breakdown')

    matrix_options = ['count', 'exposure']
    matrix_value = st.radio(
        'Matrix value',
        options=matrix_options,
        index=matrix_options.index(coerce_option(st.session_state.get('matrix_value'), matrix_options, 'count')),
        horizontal=True,
        key='matrix_value',
    )
    matrix = build_delinquency_matrix(filtered)
    st.plotly_chart(build_delinquency_heatmap(matrix, value=matrix_value), use_container_width=True)

    trend = SyntheticTrendSource(seed=len(filtered)).series(filtered)
    st.plotly_chart(build_trend_figure(trend), use_container_width=True)

    top_n = int(st.number_input('Top N', min_value=1, max_value=200, value=DEFAULT_TOP_N, step=5, key='top_n'))
    render_top_exposure_tables(filtered, limit=top_n)


def _render_portfolio(session: FilterSession, accounts_df: pd.DataFrame) -> None:
    render_drill_down_banner(session)
    render_page_filter_chips(session, PAGE_PORTFOLIO)
    filtered = apply_filters(accounts_df, session.state, page=PAGE_PORTFOLIO)

    sortable = [c for c in accounts_df.columns if c not in ('account_id', 'parent_id')]
    c1, c2 = st.columns([3, 1])
    with c1:
        sort_field = st.selectbox(
            'Sort by',
            sortable,
            index=sortable.index(coerce_option(session.state.sort_field, sortable, sortable[0])),
            key='portfolio_sort_field',
        )
    with c2:
        st.write('')
        if st.button(f'Direction: {session.state.sort_direction}', key='portfolio_sort_toggle'):
            session.dispatch(toggle_sort, session.state.sort_field)
            st.rerun()
    if sort_field != session.state.sort_field:
        session.dispatch(toggle_sort, sort_field)

    render_portfolio_table(sort_accounts(filtered, session.state.sort_field, session.state.sort_direction))


def main() -> None:
    st.set_page_config(page_title='Portfolio Risk Dashboard', layout='wide')
    st.title('Portfolio Risk Dashboard')

    with st.sidebar:
        st.subheader('Data')
        input_path = st.text_input('Workbook path', value=str(DEFAULT_INPUT_PATH), key='global_input_path')
        if st.button('Refresh Cached Data', key='global_refresh_cached_data'):
            st.cache_data.clear()
            st.rerun()

    try:
        accounts_df = _load(input_path)
    except FileNotFoundError:
        st.error(f'Account file not found: `{input_path}`')
        return
    except ValueError as exc:
        st.error(f'Account data failed validation: {exc}')
        return

    session = _session()
    render_global_filter_controls(session, unique_filter_values(accounts_df))

    if 'pending_section' in st.session_state:
        st.session_state['main_section'] = st.session_state.pop('pending_section')
    section = st.radio(
        'Section',
        options=SECTIONS,
        index=SECTIONS.index(coerce_option(st.session_state.get('main_section'), SECTIONS, SECTIONS[0])),
        horizontal=True,
        key='main_section',
    )
    if section == 'Dashboard':
        _render_dashboard(session, accounts_df)
    else:
        _render_portfolio(session, accounts_df)


if __name__ == '__main__':
    main()
