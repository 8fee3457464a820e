import logging
from typing import Optional

import pandas as pd
import plotly.graph_objects as go

from .. import config
from ..selection import Brush, IntervalBrush, PointsBrush, RectBrush, SelectionSet, make_selection
from .base import Chart, ChartFrame, base_layout, placeholder

logger = logging.getLogger(__name__)


def inner_width(n: int) -> int:
    """One column per country; past the minimum width the container scrolls."""
    return max(config.MIN_INNER_WIDTH, n * config.BAR_STEP)


def continent_colors(continents) -> list:
    unknown = config.CONTINENT_COLORS[config.UNKNOWN_CONTINENT]
    return [config.CONTINENT_COLORS.get(c, unknown) for c in continents]


class BarChart(Chart):
    """Per-country bars for one value column, largest first."""

    kind = "bar"
    brushable = True
    style_table = config.BAR_STYLE_CLASSES

    def __init__(self, chart_id, value_field, title, value_label,
                 domain_policy="year", global_domain=None):
        super().__init__(chart_id, title)
        self.value_field = value_field
        self.value_label = value_label
        self.required_fields = (value_field,)
        self.sort_by = value_field
        self.domain_policy = domain_policy
        self.global_domain = global_domain

    def value_domain(self, rows: pd.DataFrame):
        if self.domain_policy == "global" and self.global_domain:
            return [0, self.global_domain[1]]
        top = rows[self.value_field].max() if not rows.empty else None
        return [0, float(top) if top else 1]

    def draw(self, rows: pd.DataFrame, shown=None) -> ChartFrame:
        countries = rows["country"].tolist()
        values = rows[self.value_field].astype(float).tolist()
        continents = rows["continent"].tolist()
        join = self._commit(countries, shown=shown)

        width_px = inner_width(len(countries))
        m = config.CHART_MARGIN
        total_width = width_px + m["l"] + m["r"]

        fig = go.Figure(go.Bar(
            x=countries, y=values, ids=countries, customdata=countries,
            text=continents, textposition="none",
            marker=dict(color=continent_colors(continents)),
            hovertemplate=f"<b>%{{x}}</b><br>%{{text}}<br>{self.value_label}: %{{y:,.2f}}<extra></extra>",
        ))
        base_layout(
            fig, self.chart_id,
            title=dict(text=self.title, x=0.5),
            width=total_width, height=config.CHART_HEIGHT, margin=m,
            bargap=config.BAR_PADDING,
            dragmode="select", selectdirection="h",
        )
        fig.update_xaxes(title_text="Country", tickangle=-45, type="category",
                         categoryorder="array", categoryarray=countries, fixedrange=True)
        fig.update_yaxes(title_text=self.value_label, range=self.value_domain(rows), fixedrange=True)
        if not countries:
            placeholder(fig)

        logger.info("%s: %d bars (%s)", self.chart_id, len(countries), join)
        style = {"height": f"{config.CHART_HEIGHT}px", "width": f"{total_width}px", "minWidth": f"{total_width}px"}
        return ChartFrame(self.chart_id, fig, countries, join, style=style)

    def _position(self, value, keys) -> Optional[float]:
        # Plotly reports category axes either by index or by label
        if isinstance(value, str):
            return float(keys.index(value)) if value in keys else None
        return float(value)

    def selection_from_brush(self, brush: Optional[Brush], figure=None) -> SelectionSet:
        """Countries whose bar centre falls inside the dragged range."""
        if brush is None:
            return None
        keys = self.keys_on(figure)
        if isinstance(brush, PointsBrush):
            return make_selection(k for k in keys if k in brush.keys)
        if isinstance(brush, RectBrush):
            brush = IntervalBrush(brush.x0, brush.x1)
        ends = [self._position(brush.x0, keys), self._position(brush.x1, keys)]
        if None in ends:
            return None
        interval = IntervalBrush(*ends)
        # bar i is centred on axis position i
        return make_selection(c for i, c in enumerate(keys) if interval.contains(i))
