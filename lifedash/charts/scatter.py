import logging
from typing import Optional

import pandas as pd
import plotly.graph_objects as go

from .. import config
from ..selection import Brush, IntervalBrush, PointsBrush, SelectionSet, make_selection
from .bars import continent_colors
from .base import Chart, ChartFrame, base_layout, figure_trace, placeholder, trace_values

logger = logging.getLogger(__name__)


class ScatterPlot(Chart):
    """Energy consumption (x) against life expectancy (y), one point per country."""

    kind = "scatter"
    brushable = True
    required_fields = (config.LIFE, config.ENERGY)
    style_table = config.POINT_STYLE_CLASSES

    def __init__(self, chart_id, title="Life Expectancy vs Energy Consumption by Country",
                 domain_policy="year", x_domain=None, y_domain=None):
        super().__init__(chart_id, title)
        self.domain_policy = domain_policy
        self.global_x = x_domain
        self.global_y = y_domain
        self._points = []

    def _domain(self, values: pd.Series, global_domain):
        if self.domain_policy == "global" and global_domain:
            return [0, global_domain[1]]
        top = values.max() if not values.empty else None
        return [0, float(top) if top else 100]

    def draw(self, rows: pd.DataFrame, shown=None) -> ChartFrame:
        countries = rows["country"].tolist()
        xs = rows[config.ENERGY].astype(float).tolist()
        ys = rows[config.LIFE].astype(float).tolist()
        continents = rows["continent"].tolist()
        join = self._commit(countries, shown=shown)
        self._points = list(zip(countries, xs, ys))

        fig = go.Figure(go.Scatter(
            x=xs, y=ys, mode="markers", ids=countries, customdata=countries,
            text=continents,
            marker=dict(size=10, color=continent_colors(continents)),
            hovertemplate=(
                "<b>%{customdata}</b><br>%{text}<br>"
                "Life Expectancy: %{y:.1f}<br>Energy: %{x:.2f}<extra></extra>"
            ),
        ))
        base_layout(
            fig, self.chart_id,
            title=dict(text=self.title, x=0.5),
            height=config.CHART_HEIGHT, margin=config.SCATTER_MARGIN,
            dragmode="select",
        )
        fig.update_xaxes(title_text="Energy Consumption (per-capita)",
                         range=self._domain(rows[config.ENERGY], self.global_x), nticks=8)
        fig.update_yaxes(title_text="Life Expectancy (years)",
                         range=self._domain(rows[config.LIFE], self.global_y), nticks=6)
        if not countries:
            placeholder(fig)

        logger.info("%s: %d points (%s)", self.chart_id, len(countries), join)
        return ChartFrame(self.chart_id, fig, countries, join)

    def points_on(self, figure=None):
        """(country, x, y) per point, in trace order."""
        if figure is None:
            return list(self._points)
        trace = figure_trace(figure)
        return list(zip(trace_values(trace, "customdata"), trace_values(trace, "x"), trace_values(trace, "y")))

    def selection_from_brush(self, brush: Optional[Brush], figure=None) -> SelectionSet:
        if brush is None:
            return None
        points = self.points_on(figure)
        if isinstance(brush, PointsBrush):
            return make_selection(c for c, _, _ in points if c in brush.keys)
        if isinstance(brush, IntervalBrush):
            return make_selection(c for c, x, _ in points if brush.contains(x))
        return make_selection(c for c, x, y in points if brush.contains(x, y))
