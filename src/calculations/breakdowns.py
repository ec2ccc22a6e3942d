"""Dimensional breakdowns and the master slicer aggregator.

Dimensions and metrics are closed enumerations. Each dimension knows its
column and each metric knows how to value a single account, so adding a
dimension is a table edit rather than new aggregation code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import numpy as np
import pandas as pd

from src.models.account import scaled_exposure

NO_DATA_LABEL = 'No Data'


@dataclass(frozen=True)
class DimensionSpec:
    column: str
    label: str
    values: tuple[str, ...]
    filter_label: str = '{value}'


class Dimension(Enum):
    REGION = DimensionSpec('region', 'Region', ('NORTH', 'SOUTH', 'EAST', 'WEST'), '{value} Region')
    SEGMENT = DimensionSpec('segment', 'Portfolio Segment', ('RETAIL', 'SME', 'CORPORATE'), '{value} Segment')
    PRODUCT_TYPE = DimensionSpec(
        'product_type',
        'Product Type',
        ('Business Loan', 'Home Loan', 'Personal Loan', 'Auto Loan'),
    )
    PARTY_TYPE = DimensionSpec('party_type', 'Party Type', ('Corporate', 'SME', 'Large Corporate'))
    STATE = DimensionSpec(
        'state',
        'State',
        ('California', 'Texas', 'New York', 'Florida', 'Illinois'),
        '{value} State',
    )
    LINE_OF_BUSINESS = DimensionSpec('line_of_business', 'Line of Business', ('LCB', 'MCB', 'SCB'))
    INDUSTRY = DimensionSpec('industry', 'Industry', ())
    RATING = DimensionSpec('borrower_external_rating', 'External Rating', ('AAA', 'AA', 'A', 'BBB', 'BB', 'B'))
    ASSET_CLASS = DimensionSpec('asset_class', 'Asset Classification', ())

    @property
    def column(self) -> str:
        return self.value.column

    @property
    def label(self) -> str:
        return self.value.label


def _exposure_value(accounts_df: pd.DataFrame) -> pd.Series:
    return scaled_exposure(accounts_df)


def _count_value(accounts_df: pd.DataFrame) -> pd.Series:
    return pd.Series(1.0, index=accounts_df.index)


def _npa_value(accounts_df: pd.DataFrame) -> pd.Series:
    exposure = scaled_exposure(accounts_df)
    return exposure.where(accounts_df['credit_status'].astype(str) == 'Delinquent', 0.0)


def _delinquency_value(accounts_df: pd.DataFrame) -> pd.Series:
    exposure = scaled_exposure(accounts_df)
    return exposure.where(accounts_df['overdues'].astype(float) > 0, 0.0)


@dataclass(frozen=True)
class MetricSpec:
    key: str
    label: str
    value_fn: Callable[[pd.DataFrame], pd.Series]
    is_currency: bool = True


class Metric(Enum):
    EXPOSURE = MetricSpec('exposure', 'Exposure', _exposure_value)
    COUNT = MetricSpec('count', 'Company Count', _count_value, is_currency=False)
    NPA = MetricSpec('npa', 'NPA Amount', _npa_value)
    DELINQUENCY = MetricSpec('delinquency', 'Delinquent Exposure', _delinquency_value)

    @property
    def label(self) -> str:
        return self.value.label

    def values_for(self, accounts_df: pd.DataFrame) -> pd.Series:
        return self.value.value_fn(accounts_df).astype(float)


def no_data_entry() -> list[dict[str, Any]]:
    return [{'label': NO_DATA_LABEL, 'value': 0, 'percentage': 0}]


def normalized_percentages(values: list[float], decimals: int = 1) -> list[float]:
    """Shares of the total rounded so they sum to exactly 100.

    Uses largest-remainder rounding at the requested precision.
    """
    total = float(sum(values))
    if total <= 0:
        return [0.0 for _ in values]
    unit = 10 ** decimals
    raw = np.array(values, dtype=float) / total * 100.0 * unit
    floored = np.floor(raw)
    shortfall = int(round(100 * unit - floored.sum()))
    if shortfall > 0:
        order = np.argsort(-(raw - floored), kind='stable')
        floored[order[:shortfall]] += 1
    return [round(float(v) / unit, decimals) for v in floored]


def aggregate_by_dimension(
    accounts_df: pd.DataFrame,
    dimension: Dimension,
    metric: Metric = Metric.EXPOSURE,
) -> list[dict[str, Any]]:
    """Group by one dimension and reduce one metric into labelled entries.

    Groups come back in first-appearance order; display ordering belongs to
    the caller. Zero-valued groups are dropped. Percentages use
    largest-remainder rounding so they always total 100.0, which can move an
    entry one tenth off its own rounded share: three equal groups come back
    as 33.4, 33.3, 33.3.
    """
    if accounts_df.empty:
        return no_data_entry()
    column = dimension.column
    if column not in accounts_df.columns:
        return no_data_entry()

    frame = pd.DataFrame(
        {
            'label': accounts_df[column].fillna('').astype(str),
            'value': metric.values_for(accounts_df),
        }
    )
    grouped = frame.groupby('label', sort=False)['value'].sum()
    grouped = grouped[grouped > 0]
    if grouped.empty:
        return no_data_entry()

    percentages = normalized_percentages(grouped.tolist())
    return [
        {'label': str(label), 'value': float(value), 'percentage': pct}
        for (label, value), pct in zip(grouped.items(), percentages)
    ]


def calculate_breakdowns(accounts_df: pd.DataFrame) -> dict[str, list[dict[str, Any]]]:
    """Fixed region and product exposure breakdowns for the overview charts."""
    return {
        'region': aggregate_by_dimension(accounts_df, Dimension.REGION, Metric.EXPOSURE),
        'product': aggregate_by_dimension(accounts_df, Dimension.PRODUCT_TYPE, Metric.EXPOSURE),
    }


def unique_dimension_values(accounts_df: pd.DataFrame, dimension: Dimension) -> list[str]:
    if dimension.column not in accounts_df.columns:
        return []
    values = accounts_df[dimension.column].dropna().astype(str)
    return sorted({v for v in values.tolist() if v})


def dimension_filter_label(dimension: Dimension, value: str) -> str:
    return dimension.value.filter_label.format(value=value)


def dimension_from_key(key: str) -> Dimension:
    """Resolve a dimension by column name or enum name."""
    for dim in Dimension:
        if key in (dim.column, dim.name, dim.name.lower()):
            return dim
    raise KeyError(f'Unknown dimension: {key}')


def metric_from_key(key: str) -> Metric:
    for m in Metric:
        if key in (m.value.key, m.name):
            return m
    raise KeyError(f'Unknown metric: {key}')
