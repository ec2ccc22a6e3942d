import numpy as np
import plotly.graph_objects as go

from src.calculations.breakdowns import Dimension, Metric, aggregate_by_dimension, no_data_entry
from src.calculations.delinquency_matrix import build_delinquency_matrix
from src.calculations.trends import synthesize_trend
from src.dashboard.plots.risk_plots import build_breakdown_figure, build_delinquency_heatmap, build_trend_figure


def test_breakdown_bar_sorted_largest_first(companies) -> None:
    entries = aggregate_by_dimension(companies, Dimension.REGION)
    fig = build_breakdown_figure(entries, Dimension.REGION, Metric.EXPOSURE, 'bar')
    assert isinstance(fig, go.Figure)
    assert fig.data[0].type == 'bar'
    assert list(fig.data[0].x) == ['NORTH', 'EAST', 'WEST', 'SOUTH']
    assert fig.layout.title.text == 'Exposure by Region'


def test_breakdown_pie_and_no_data_placeholder(companies) -> None:
    entries = aggregate_by_dimension(companies, Dimension.SEGMENT, Metric.COUNT)
    pie = build_breakdown_figure(entries, Dimension.SEGMENT, Metric.COUNT, 'pie')
    assert pie.data[0].type == 'pie'

    empty = build_breakdown_figure(no_data_entry(), Dimension.REGION, Metric.EXPOSURE, 'pie')
    assert list(empty.data[0].labels) == ['No Data']


def test_heatmap_covers_fixed_grid(companies) -> None:
    fig = build_delinquency_heatmap(build_delinquency_matrix(companies), value='count')
    trace = fig.data[0]
    assert trace.type == 'heatmap'
    assert list(trace.y) == ['NORTH', 'SOUTH', 'EAST', 'WEST']
    assert list(trace.x) == ['current', '0-30', '31-60', '61-90', '91-180', '180+']


def test_trend_figure_has_exposure_bars_and_rate_lines(companies) -> None:
    fig = build_trend_figure(synthesize_trend(companies, rng=np.random.default_rng(1)))
    assert [t.name for t in fig.data] == ['Exposure', 'NPA %', 'PAR %']
    assert len(fig.data[0].x) == 12
    assert bool(fig.layout.yaxis2.separatethousands)
