"""Summary card renderer for headline risk KPIs."""

from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st

from src.calculations.kpis import derive_kpis
from src.dashboard.components.formatting import THRESHOLD_COLORS, format_kpi_value
from src.models.filter_state import FilterState

KPI_CARD_LABELS = {
    'total_exposure': 'Total Exposure',
    'npa': 'NPA %',
    'par': 'Portfolio at Risk %',
    'delinquency': 'Delinquency %',
    'utilization': 'Utilization %',
    'raroc': 'RAROC %',
    'lgd': 'LGD %',
    'expected_loss': 'Expected Loss',
}

# Metrics where a rising value is bad render their delta inverted.
_INVERSE_DELTA = {'npa', 'par', 'delinquency', 'lgd', 'expected_loss'}


KpiSnapshot = tuple[FilterState, dict[str, dict[str, Any]], dict[str, dict[str, Any]] | None]


def advance_kpi_snapshot(
    snapshot: KpiSnapshot | None,
    state: FilterState,
    accounts_df: pd.DataFrame,
) -> tuple[dict[str, dict[str, Any]], KpiSnapshot]:
    """Derive KPIs with deltas measured from the last filter change.

    ``snapshot`` is ``(state, kpis, baseline)`` from the previous run. The
    baseline only moves when the filter state changes, so reruns triggered by
    unrelated widgets keep showing the same deltas.
    """
    baseline = None
    if snapshot is not None:
        last_state, last_kpis, last_baseline = snapshot
        baseline = last_baseline if last_state == state else last_kpis
    kpis = derive_kpis(accounts_df, previous=baseline)
    return kpis, (state, kpis, baseline)


def kpi_card_rows(kpis: dict[str, dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten a KPI snapshot into display rows in card order."""
    rows = []
    for key, label in KPI_CARD_LABELS.items():
        kpi = kpis.get(key)
        if kpi is None:
            continue
        threshold = kpi.get('threshold')
        rows.append(
            {
                'key': key,
                'label': label,
                'display': format_kpi_value(kpi),
                'delta': float(kpi.get('change_percent', 0.0)),
                'trend': kpi.get('trend', 'stable'),
                'status': threshold['status'] if threshold else None,
            }
        )
    return rows


def render_kpi_cards(kpis: dict[str, dict[str, Any]], title: str = 'Portfolio KPIs') -> None:
    """Render KPI cards, four per row, with threshold status markers."""
    st.subheader(title)
    rows = kpi_card_rows(kpis)
    for start in range(0, len(rows), 4):
        cols = st.columns(4)
        for col, row in zip(cols, rows[start:start + 4]):
            col.metric(
                row['label'],
                row['display'],
                delta=f'{row["delta"]:+.2f}%' if row['delta'] else None,
                delta_color='inverse' if row['key'] in _INVERSE_DELTA else 'normal',
            )
            if row['status']:
                color = THRESHOLD_COLORS[row['status']]
                col.markdown(
                    f'<span style="color:{color};font-weight:600">{row["status"].upper()}</span>',
                    unsafe_allow_html=True,
                )
