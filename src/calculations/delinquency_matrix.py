"""Region x days-past-due bucket matrix."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from src.models.account import scaled_exposure

MATRIX_REGIONS = ['NORTH', 'SOUTH', 'EAST', 'WEST']
DPD_BUCKETS = ['current', '0-30', '31-60', '61-90', '91-180', '180+']

# Inclusive upper bounds; anything above the last bound is 180+.
_BUCKET_EDGES = [-np.inf, 0, 30, 60, 90, 180, np.inf]


def dpd_bucket(overdue_days: float) -> str:
    """Bucket label for a days-past-due value. Zero or less is current."""
    days = float(overdue_days)
    for label, upper in zip(DPD_BUCKETS, _BUCKET_EDGES[1:]):
        if days <= upper:
            return label
    return DPD_BUCKETS[-1]


def assign_dpd_buckets(overdues: pd.Series) -> pd.Series:
    """Vectorized ``dpd_bucket`` over a series of overdue days."""
    buckets = pd.cut(
        overdues.astype(float),
        bins=_BUCKET_EDGES,
        labels=DPD_BUCKETS,
        right=True,
    )
    return buckets.astype(str)


def _empty_cell() -> dict[str, float | int]:
    return {'count': 0, 'exposure': 0.0}


def build_delinquency_matrix(accounts_df: pd.DataFrame) -> dict[str, Any]:
    """Count and exposure per region and bucket over the fixed 4 x 6 grid."""
    cells: dict[tuple[str, str], dict[str, float | int]] = {}
    if not accounts_df.empty:
        frame = pd.DataFrame(
            {
                'region': accounts_df['region'].astype(str),
                'bucket': assign_dpd_buckets(accounts_df['overdues']),
                'exposure': scaled_exposure(accounts_df),
            }
        )
        frame = frame[frame['region'].isin(MATRIX_REGIONS)]
        grouped = frame.groupby(['region', 'bucket'], sort=False)['exposure'].agg(['count', 'sum'])
        for (region, bucket), row in grouped.iterrows():
            cells[(region, bucket)] = {'count': int(row['count']), 'exposure': float(row['sum'])}

    data: list[dict[str, Any]] = []
    for region in MATRIX_REGIONS:
        row: dict[str, Any] = {'region': region}
        for bucket in DPD_BUCKETS:
            row[bucket] = dict(cells.get((region, bucket), _empty_cell()))
        data.append(row)

    return {'rows': list(MATRIX_REGIONS), 'buckets': list(DPD_BUCKETS), 'data': data}


def matrix_to_frame(matrix: dict[str, Any], value: str = 'count') -> pd.DataFrame:
    """Pivot a matrix into a region x bucket frame of one cell field."""
    if value not in ('count', 'exposure'):
        raise ValueError(f'Matrix value must be count or exposure, got {value!r}.')
    records = {
        row['region']: {bucket: row[bucket][value] for bucket in matrix['buckets']}
        for row in matrix['data']
    }
    out = pd.DataFrame.from_dict(records, orient='index')
    return out.reindex(index=matrix['rows'], columns=matrix['buckets'])
