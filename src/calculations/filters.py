"""Filter composition over the account collection.

Layers are applied in a fixed order: global -> drill-down -> page -> search.
Within a layer values are OR-ed; layers are AND-ed. Each step returns a copy
with the original row order intact.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from src.models.filter_state import (
    GLOBAL_FILTER_COLUMNS,
    DrillDownFilter,
    FilterState,
    PageFilter,
    global_filter_values,
    page_filters_for,
)
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)

SEARCH_COLUMNS = ['customer_name', 'cust_id', 'group', 'industry']


def _normalized_text(series: pd.Series) -> pd.Series:
    return series.astype(str).str.strip().str.lower()


def _field_mask(accounts_df: pd.DataFrame, field: str, values: Iterable[str]) -> pd.Series:
    """Case-insensitive membership mask. Unknown fields match nothing."""
    if field not in accounts_df.columns:
        LOGGER.debug('Filter references unknown field %r; matching nothing.', field)
        return pd.Series(False, index=accounts_df.index)
    column = accounts_df[field]
    wanted = {str(v).strip().lower() for v in values}
    return column.notna() & _normalized_text(column).isin(wanted)


def apply_global_filters(accounts_df: pd.DataFrame, state: FilterState) -> pd.DataFrame:
    """Narrow by the four multi-select layers; an empty layer passes everything."""
    mask = pd.Series(True, index=accounts_df.index)
    for key, values in global_filter_values(state).items():
        if not values:
            continue
        column = GLOBAL_FILTER_COLUMNS[key]
        if column not in accounts_df.columns:
            mask = pd.Series(False, index=accounts_df.index)
            continue
        mask &= accounts_df[column].astype(str).isin(values)
    return accounts_df.loc[mask].copy()


def apply_drill_down_filter(accounts_df: pd.DataFrame, drill_down: DrillDownFilter | None) -> pd.DataFrame:
    if drill_down is None:
        return accounts_df.copy()
    mask = _field_mask(accounts_df, drill_down.field, [drill_down.value])
    return accounts_df.loc[mask].copy()


def apply_page_filters(accounts_df: pd.DataFrame, page_filters: Iterable[PageFilter]) -> pd.DataFrame:
    """OR within the same field, AND across fields."""
    by_field: dict[str, list[str]] = {}
    for f in page_filters:
        by_field.setdefault(f.field, []).append(f.value)
    if not by_field:
        return accounts_df.copy()
    mask = pd.Series(True, index=accounts_df.index)
    for field, values in by_field.items():
        mask &= _field_mask(accounts_df, field, values)
    return accounts_df.loc[mask].copy()


def apply_search(accounts_df: pd.DataFrame, term: str | None) -> pd.DataFrame:
    """Substring match on name, customer id, group, and industry."""
    query = (term or '').strip().lower()
    if not query:
        return accounts_df.copy()
    mask = pd.Series(False, index=accounts_df.index)
    for col in SEARCH_COLUMNS:
        if col not in accounts_df.columns:
            continue
        text = accounts_df[col].fillna('').astype(str).str.lower()
        mask |= text.str.contains(query, regex=False)
    return accounts_df.loc[mask].copy()


def apply_filters(accounts_df: pd.DataFrame, state: FilterState, page: str | None = None) -> pd.DataFrame:
    """Compose every filter layer into the effective subset for a page."""
    out = apply_global_filters(accounts_df, state)
    out = apply_drill_down_filter(out, state.drill_down)
    out = apply_page_filters(out, page_filters_for(state, page))
    out = apply_search(out, state.search_term)
    LOGGER.debug('Filters narrowed %s accounts to %s (page=%s).', len(accounts_df), len(out), page)
    return out


def sort_accounts(accounts_df: pd.DataFrame, field: str, direction: str = 'asc') -> pd.DataFrame:
    """Display sort for the portfolio table. Unknown fields keep collection order."""
    if field not in accounts_df.columns or accounts_df.empty:
        return accounts_df.copy()
    column = accounts_df[field]
    key = None
    if not pd.api.types.is_numeric_dtype(column):
        key = lambda s: s.astype(str).str.lower()
    return accounts_df.sort_values(
        field,
        ascending=direction != 'desc',
        kind='stable',
        key=key,
    ).copy()


def unique_filter_values(accounts_df: pd.DataFrame) -> dict[str, list[str]]:
    """Sorted distinct options for each global filter layer."""
    out: dict[str, list[str]] = {}
    for key, column in GLOBAL_FILTER_COLUMNS.items():
        if column not in accounts_df.columns:
            out[key] = []
            continue
        values = accounts_df[column].dropna().astype(str)
        out[key] = sorted(set(values.tolist()))
    return out
