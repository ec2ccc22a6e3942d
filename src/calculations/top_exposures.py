"""Ranked top-N exposure lists."""

from __future__ import annotations

from enum import Enum
from typing import Any

import pandas as pd

from src.calculations.kpis import NPA_STATUS, safe_pct
from src.models.account import scaled_exposure

DEFAULT_TOP_N = 20
ACCOUNT_NUMBER_BASE = 1000


class RankMetric(Enum):
    EXPOSURE = 'exposure'
    NPA = 'npa'
    DELINQUENT = 'delinquent'


def account_number(index: int) -> str:
    """Synthetic loan account reference for the entry at ``index``."""
    return f'LA{ACCOUNT_NUMBER_BASE + index:06d}'


def _eligible(accounts_df: pd.DataFrame, metric: RankMetric) -> pd.DataFrame:
    if metric is RankMetric.NPA:
        return accounts_df[accounts_df['credit_status'].astype(str) == NPA_STATUS]
    if metric is RankMetric.DELINQUENT:
        return accounts_df[accounts_df['overdues'].astype(float) > 0]
    return accounts_df


def rank_top_exposures(
    accounts_df: pd.DataFrame,
    limit: int = DEFAULT_TOP_N,
    metric: RankMetric = RankMetric.EXPOSURE,
) -> list[dict[str, Any]]:
    """Rank the subset by exposure (descending, stable) and keep the first ``limit``.

    Percent of portfolio is measured against the whole subset passed in, so it
    stays meaningful under active filters. The NPA and delinquent variants only
    narrow the population; they still rank by exposure, which is the amount at
    risk, rather than by days overdue.
    """
    if accounts_df.empty or limit <= 0:
        return []
    total_exposure = float(scaled_exposure(accounts_df).sum())

    eligible = _eligible(accounts_df, RankMetric(metric)).copy()
    eligible['_amount'] = scaled_exposure(eligible)
    ranked = eligible.sort_values('_amount', ascending=False, kind='stable').head(limit)

    out: list[dict[str, Any]] = []
    for index, (_, row) in enumerate(ranked.iterrows()):
        amount = float(row['_amount'])
        out.append(
            {
                'rank': index + 1,
                'borrower_name': str(row['customer_name']),
                'account_number': account_number(index),
                'exposure_amount': amount,
                'metric_amount': amount,
                'percent_of_portfolio': safe_pct(amount, total_exposure),
                'product_type': str(row['product_type']),
                'region': str(row['region']),
                'risk_grade': str(row['borrower_external_rating']),
                'utilization': safe_pct(float(row['credit_exposure']), float(row['credit_limit'])),
                'overdue_days': float(row['overdues']),
            }
        )
    return out


def ranked_to_frame(entries: list[dict[str, Any]]) -> pd.DataFrame:
    """Table view of ranked entries indexed by rank."""
    if not entries:
        return pd.DataFrame(columns=['rank', 'borrower_name', 'exposure_amount']).set_index('rank')
    return pd.DataFrame(entries).set_index('rank')
