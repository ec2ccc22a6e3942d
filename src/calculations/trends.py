"""Twelve-month trend series for the overview charts.

The synthetic source below perturbs the current KPI snapshot with bounded
noise. It stands in for a historical feed; a real source only needs to
satisfy ``TrendSource``.
"""

from __future__ import annotations

import calendar
from typing import Any, Protocol

import numpy as np
import pandas as pd

from src.calculations.kpis import derive_kpis

TREND_POINTS = 12
NOISE_HALF_WIDTH = 0.25
PAR_NOISE_FACTOR = 1.5
EXPOSURE_START_FACTOR = 0.85


class TrendSource(Protocol):
    def series(self, accounts_df: pd.DataFrame) -> list[dict[str, Any]]:
        ...


def month_labels(count: int = TREND_POINTS) -> list[str]:
    return [calendar.month_abbr[(i % 12) + 1] for i in range(count)]


def synthesize_trend(
    accounts_df: pd.DataFrame,
    rng: np.random.Generator | None = None,
) -> list[dict[str, Any]]:
    """Return 12 monthly points of npa, par, and exposure."""
    rng = rng if rng is not None else np.random.default_rng()
    kpis = derive_kpis(accounts_df)
    npa = kpis['npa']['value']
    par = kpis['par']['value']
    total_exposure = kpis['total_exposure']['value']

    noise = rng.uniform(-NOISE_HALF_WIDTH, NOISE_HALF_WIDTH, size=TREND_POINTS)
    growth = EXPOSURE_START_FACTOR + np.arange(TREND_POINTS) / (TREND_POINTS - 1) * (1 - EXPOSURE_START_FACTOR)

    points: list[dict[str, Any]] = []
    for month, variance, factor in zip(month_labels(), noise, growth):
        points.append(
            {
                'month': month,
                'npa': max(0.0, round(npa + float(variance), 2)),
                'par': max(0.0, round(par + float(variance) * PAR_NOISE_FACTOR, 2)),
                'exposure': round(total_exposure * float(factor), 2),
            }
        )
    return points


class SyntheticTrendSource:
    """TrendSource backed by ``synthesize_trend`` with an optional fixed seed."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed

    def series(self, accounts_df: pd.DataFrame) -> list[dict[str, Any]]:
        return synthesize_trend(accounts_df, rng=np.random.default_rng(self.seed))


def trend_to_frame(points: list[dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(points, columns=['month', 'npa', 'par', 'exposure'])
