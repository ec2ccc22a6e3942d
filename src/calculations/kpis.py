"""Headline risk KPIs derived from a filtered account subset."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from src.models.account import EXPOSURE_SCALE, scaled_exposure

NPA_STATUS = 'Delinquent'
PAR_STATUSES = {'Delinquent', 'Watchlist'}
RAROC_SCORE_CEILING = 850.0
RAROC_SCALE = 25.0

KPI_KEYS = [
    'npa',
    'total_exposure',
    'par',
    'delinquency',
    'utilization',
    'raroc',
    'lgd',
    'expected_loss',
]

KPI_UNITS = {
    'npa': 'percent',
    'total_exposure': 'currency',
    'par': 'percent',
    'delinquency': 'percent',
    'utilization': 'percent',
    'raroc': 'percent',
    'lgd': 'percent',
    'expected_loss': 'currency',
}

# (green, amber, higher_is_better)
KPI_THRESHOLDS: dict[str, tuple[float, float, bool]] = {
    'npa': (3.0, 5.0, False),
    'par': (5.0, 8.0, False),
    'delinquency': (4.0, 7.0, False),
    'utilization': (80.0, 90.0, False),
    'raroc': (15.0, 10.0, True),
}

# (down_below, up_above); values in between are stable
KPI_TREND_BANDS: dict[str, tuple[float, float]] = {
    'npa': (2.5, 3.0),
    'par': (4.0, 5.0),
    'delinquency': (3.5, 4.5),
}

KPI_FIXED_TRENDS = {
    'total_exposure': 'up',
    'utilization': 'up',
    'raroc': 'up',
    'lgd': 'stable',
    'expected_loss': 'down',
}


def safe_pct(numerator: float, denominator: float) -> float:
    """Percentage with zero-denominator guard."""
    if not denominator:
        return 0.0
    return float(numerator) / float(denominator) * 100.0


def threshold_status(key: str, value: float) -> str:
    green, amber, higher_is_better = KPI_THRESHOLDS[key]
    if higher_is_better:
        if value >= green:
            return 'green'
        return 'amber' if value >= amber else 'red'
    if value <= green:
        return 'green'
    return 'amber' if value <= amber else 'red'


def _trend(key: str, value: float) -> str:
    if key in KPI_TREND_BANDS:
        down_below, up_above = KPI_TREND_BANDS[key]
        if value < down_below:
            return 'down'
        if value > up_above:
            return 'up'
        return 'stable'
    return KPI_FIXED_TRENDS[key]


def _metric(key: str, value: float, previous: dict[str, Any] | None) -> dict[str, Any]:
    change = 0.0
    if previous and key in previous:
        before = float(previous[key].get('value', 0.0))
        change = safe_pct(float(value) - before, abs(before))
    out: dict[str, Any] = {
        'value': float(value),
        'unit': KPI_UNITS[key],
        'trend': _trend(key, value),
        'change_percent': change,
    }
    if key in KPI_THRESHOLDS:
        green, amber, _ = KPI_THRESHOLDS[key]
        out['threshold'] = {
            'green': green,
            'amber': amber,
            'status': threshold_status(key, value),
        }
    return out


def empty_kpis() -> dict[str, dict[str, Any]]:
    """Zero-valued snapshot: stable trend, no threshold."""
    return {
        key: {'value': 0.0, 'unit': KPI_UNITS[key], 'trend': 'stable', 'change_percent': 0.0}
        for key in KPI_KEYS
    }


def kpi_components(accounts_df: pd.DataFrame) -> dict[str, float]:
    """Raw exposure and count aggregates the KPI ratios are built from."""
    exposure = scaled_exposure(accounts_df)
    status = accounts_df['credit_status'].astype(str)
    overdue = accounts_df['overdues'].astype(float) > 0

    npa_mask = status == NPA_STATUS
    par_mask = overdue | status.isin(PAR_STATUSES)
    return {
        'account_count': float(len(accounts_df)),
        'total_exposure': float(exposure.sum()),
        'total_credit_limit': float(accounts_df['credit_limit'].astype(float).sum() * EXPOSURE_SCALE),
        'total_security_value': float(accounts_df['security_value'].astype(float).sum() * EXPOSURE_SCALE),
        'npa_exposure': float(exposure[npa_mask].sum()),
        'par_exposure': float(exposure[par_mask].sum()),
        'overdue_count': float(overdue.sum()),
        'mean_credit_score': float(accounts_df['borrower_credit_score'].astype(float).mean()),
    }


def derive_kpis(accounts_df: pd.DataFrame, previous: dict[str, Any] | None = None) -> dict[str, dict[str, Any]]:
    """Compute NPA, PAR, delinquency, utilization, RAROC, LGD, and expected loss.

    ``previous`` is an earlier snapshot from this function; when given,
    ``change_percent`` is the relative change in value against it, in
    percent; 0 when the earlier value was 0.
    """
    if accounts_df.empty:
        return empty_kpis()

    c = kpi_components(accounts_df)
    total = c['total_exposure']

    npa = safe_pct(c['npa_exposure'], total)
    par = safe_pct(c['par_exposure'], total)
    delinquency = safe_pct(c['overdue_count'], c['account_count'])
    utilization = safe_pct(total, c['total_credit_limit'])
    # Placeholder proxy, not a finance-grade RAROC.
    raroc = c['mean_credit_score'] / RAROC_SCORE_CEILING * RAROC_SCALE
    if np.isnan(raroc):
        raroc = 0.0
    lgd = float(np.clip(safe_pct(total - c['total_security_value'], total), 0.0, 100.0))
    expected_loss = c['npa_exposure'] * lgd / 100.0

    values = {
        'npa': npa,
        'total_exposure': total,
        'par': par,
        'delinquency': delinquency,
        'utilization': utilization,
        'raroc': raroc,
        'lgd': lgd,
        'expected_loss': expected_loss,
    }
    return {key: _metric(key, values[key], previous) for key in KPI_KEYS}
