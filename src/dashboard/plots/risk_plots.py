"""Plotly figure builders for breakdowns, the delinquency matrix, and trends."""

from __future__ import annotations

from typing import Any

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from src.calculations.breakdowns import NO_DATA_LABEL, Dimension, Metric
from src.calculations.delinquency_matrix import matrix_to_frame
from src.calculations.trends import trend_to_frame
from src.dashboard.components.formatting import format_metric_value, plot_axis_number_format


def _is_no_data(entries: list[dict[str, Any]]) -> bool:
    return len(entries) == 1 and entries[0]['label'] == NO_DATA_LABEL


def build_breakdown_figure(
    entries: list[dict[str, Any]],
    dimension: Dimension,
    metric: Metric,
    chart_type: str = 'bar',
) -> go.Figure:
    """Bar or pie chart for one breakdown; entries are shown largest first."""
    title = f'{metric.label} by {dimension.label}'
    df = pd.DataFrame(entries, columns=['label', 'value', 'percentage'])
    df = df.sort_values('value', ascending=False, kind='stable')
    df['text'] = [format_metric_value(v, metric.value.key) for v in df['value']]

    if chart_type == 'pie':
        fig = go.Figure(
            go.Pie(
                labels=df['label'],
                values=df['value'] if not _is_no_data(entries) else [1],
                text=df['text'],
                textinfo='label+percent' if not _is_no_data(entries) else 'label',
                hole=0.35,
            )
        )
        fig.update_layout(title=title)
        return fig

    fig = go.Figure(
        go.Bar(
            x=df['label'],
            y=df['value'],
            text=[f'{t} ({p:.1f}%)' for t, p in zip(df['text'], df['percentage'])],
            textposition='auto',
        )
    )
    fig.update_layout(title=title, xaxis=dict(title=dimension.label), yaxis=dict(title=metric.label))
    return plot_axis_number_format(fig, y_axes=['yaxis'])


def build_delinquency_heatmap(matrix: dict[str, Any], value: str = 'count') -> go.Figure:
    grid = matrix_to_frame(matrix, value=value)
    fig = px.imshow(
        grid,
        x=list(grid.columns),
        y=list(grid.index),
        color_continuous_scale='YlOrRd',
        text_auto=True if value == 'count' else '.2s',
        aspect='auto',
        title=f'Delinquency Matrix ({value.title()})',
    )
    fig.update_layout(xaxis=dict(title='Days Past Due'), yaxis=dict(title='Region'))
    return fig


def build_trend_figure(points: list[dict[str, Any]]) -> go.Figure:
    """NPA/PAR lines on the left axis, exposure bars on the right."""
    df = trend_to_frame(points)
    fig = go.Figure()
    fig.add_bar(x=df['month'], y=df['exposure'], name='Exposure', yaxis='y2', opacity=0.35)
    fig.add_scatter(x=df['month'], y=df['npa'], name='NPA %', mode='lines+markers')
    fig.add_scatter(x=df['month'], y=df['par'], name='PAR %', mode='lines+markers')
    fig.update_layout(
        title='12-Month Risk Trend',
        yaxis=dict(title='Percent'),
        yaxis2=dict(title='Exposure', overlaying='y', side='right'),
    )
    return plot_axis_number_format(fig, y_axes=['yaxis2'])


def render_breakdown_chart(
    entries: list[dict[str, Any]],
    dimension: Dimension,
    metric: Metric,
    chart_type: str = 'bar',
    key: str | None = None,
) -> None:
    if _is_no_data(entries):
        st.info('No data for the current filters.')
    st.plotly_chart(build_breakdown_figure(entries, dimension, metric, chart_type), use_container_width=True, key=key)
