"""Top-N exposure and portfolio table components."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from src.calculations.top_exposures import RankMetric, rank_top_exposures, ranked_to_frame
from src.dashboard.components.formatting import style_numeric_table

RANK_TABLE_TITLES = {
    RankMetric.EXPOSURE: 'Top Exposures',
    RankMetric.NPA: 'Top NPA Accounts',
    RankMetric.DELINQUENT: 'Top Delinquent Accounts',
}

PORTFOLIO_COLUMNS = [
    'customer_name',
    'cust_id',
    'group',
    'industry',
    'line_of_business',
    'party_type',
    'region',
    'product_type',
    'borrower_external_rating',
    'credit_status',
    'credit_limit',
    'credit_exposure',
    'overdues',
]


def _show_table(title: str, df: pd.DataFrame) -> None:
    st.markdown(f'**{title} ({len(df)})**')
    if df.empty:
        st.caption('No rows')
    else:
        st.dataframe(style_numeric_table(df), use_container_width=True)


def render_top_exposure_tables(accounts_df: pd.DataFrame, limit: int) -> None:
    """One tab per rank metric over the filtered subset."""
    tabs = st.tabs([RANK_TABLE_TITLES[m] for m in RankMetric])
    for tab, metric in zip(tabs, RankMetric):
        with tab:
            entries = rank_top_exposures(accounts_df, limit=limit, metric=metric)
            table = ranked_to_frame(entries)
            if 'metric_amount' in table.columns:
                table = table.drop(columns=['metric_amount'])
            _show_table(RANK_TABLE_TITLES[metric], table)


def render_portfolio_table(accounts_df: pd.DataFrame) -> None:
    cols = [c for c in PORTFOLIO_COLUMNS if c in accounts_df.columns]
    _show_table('Portfolio Accounts', accounts_df[cols].reset_index(drop=True))
