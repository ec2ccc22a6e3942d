"""Shared dashboard formatting helpers."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

THRESHOLD_COLORS = {
    'green': '#22C55E',
    'amber': '#F59E0B',
    'red': '#EF4444',
}


def format_currency(value: float) -> str:
    """Compact currency label in K/M/B."""
    v = float(value)
    sign = '-' if v < 0 else ''
    v = abs(v)
    if v >= 1_000_000_000:
        return f'{sign}${v / 1_000_000_000:.1f}B'
    if v >= 1_000_000:
        return f'{sign}${v / 1_000_000:.1f}M'
    return f'{sign}${v / 1_000:.0f}K'


def format_metric_value(value: float, metric_key: str) -> str:
    """Display text for a master slicer value."""
    if metric_key in ('exposure', 'npa', 'delinquency'):
        return format_currency(value)
    if metric_key == 'count':
        return f'{int(value):d}'
    return f'{float(value):.2f}'


def format_kpi_value(kpi: dict) -> str:
    if kpi.get('unit') == 'currency':
        return format_currency(kpi.get('value', 0.0))
    return f'{float(kpi.get("value", 0.0)):.2f}%'


def style_numeric_table(
    df: pd.DataFrame,
    *,
    percent_cols: set[str] | None = None,
) -> pd.io.formats.style.Styler | pd.DataFrame:
    """Apply consistent numeric formatting across dashboard tables."""
    if df.empty:
        return df
    percent_cols = percent_cols or set()
    formats: dict[str, str] = {}
    for col in df.columns:
        if not pd.api.types.is_numeric_dtype(df[col]):
            continue
        name = str(col).lower()
        if col in percent_cols or 'percent' in name or 'utilization' in name:
            formats[col] = '{:,.2f}%'
        elif 'count' in name or name in ('rank', 'overdue_days'):
            formats[col] = '{:,.0f}'
        else:
            formats[col] = '{:,.2f}'
    if not formats:
        return df
    return df.style.format(formats, na_rep='-')


def plot_axis_number_format(fig: go.Figure, *, y_axes: list[str]) -> go.Figure:
    """Apply thousand separators and consistent tick formatting to selected y-axes."""
    layout = fig.layout
    for axis_name in y_axes:
        axis = getattr(layout, axis_name, None)
        if axis is None:
            continue
        axis.separatethousands = True
    return apply_plot_layout_hygiene(fig)


def apply_plot_layout_hygiene(fig: go.Figure) -> go.Figure:
    """Apply consistent spacing so legends and axis titles do not overlap."""
    fig.update_layout(
        margin=dict(t=72, r=48, b=96, l=72),
        legend=dict(
            orientation='h',
            yanchor='top',
            y=-0.2,
            xanchor='left',
            x=0.0,
            bgcolor='rgba(0,0,0,0)',
        ),
    )
    fig.update_xaxes(automargin=True, title_standoff=14)
    fig.update_yaxes(automargin=True, title_standoff=12)
    return fig
