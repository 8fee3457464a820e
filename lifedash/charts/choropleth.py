import logging
import math
from typing import List, Optional

import pandas as pd
import plotly.graph_objects as go
from dash import html

from .. import config
from ..geo import join_features
from .base import Chart, ChartFrame, base_layout, figure_trace, placeholder, trace_values

logger = logging.getLogger(__name__)


def feature_key(feature: dict) -> str:
    fid = feature.get("id")
    if fid is not None:
        return str(fid)
    return (feature.get("properties") or {}).get("name") or ""


def legend_value(value: float) -> str:
    # halves round up, so 70.25 reads 70.3
    return f"{math.floor(value * 10 + 0.5) / 10:g}"


def collection(features: List[dict]) -> dict:
    return {
        "type": "FeatureCollection",
        "features": [dict(f, id=feature_key(f)) for f in features],
    }


class ChoroplethMap(Chart):
    """World map coloured by one numeric property of the joined year rows."""

    kind = "choropleth"
    style_table = config.MAP_STYLE_CLASSES

    def __init__(self, chart_id, base_features, data_property, legend_id, legend_title,
                 color_range=None, width=config.MAP_WIDTH, height=config.MAP_HEIGHT):
        super().__init__(chart_id, legend_title)
        self.base_features = base_features
        self.data_property = data_property
        self.legend_id = legend_id
        self.legend_title = legend_title
        self.color_range = color_range or config.LIFE_COLOR_RANGE
        self.width = width
        self.height = height

    def draw(self, rows: pd.DataFrame, shown=None) -> ChartFrame:
        # The join is redone from the base geometry on every draw
        return self.render(join_features(self.base_features, rows), shown=shown)

    def join_keys_on(self, figure=None) -> List[str]:
        if figure is None:
            return list(self._join_keys)
        return [str(k) for k in trace_values(figure_trace(figure), "locations")]

    def domain(self, features: List[dict]):
        values = [f["properties"][self.data_property] for f in features
                  if f["properties"].get(self.data_property) is not None]
        if not values:
            return None
        return min(values), max(values)

    def render(self, features: List[dict], shown=None) -> ChartFrame:
        prop = self.data_property
        present = [f for f in features if f["properties"].get(prop) is not None]
        missing = [f for f in features if f["properties"].get(prop) is None]
        dom = self.domain(features)

        fig = go.Figure()
        fig.add_trace(go.Choropleth(
            geojson=collection(present), featureidkey="id",
            locations=[feature_key(f) for f in present],
            z=[f["properties"][prop] for f in present],
            zmin=dom[0] if dom else None, zmax=dom[1] if dom else None,
            colorscale=[[0, self.color_range[0]], [1, self.color_range[1]]],
            showscale=False,
            customdata=[f["properties"]["country"] for f in present],
            hovertemplate=f"<b>%{{customdata}}</b><br>{self.legend_title}: <b>%{{z:.1f}}</b><extra></extra>",
        ))
        fig.add_trace(go.Choropleth(
            geojson=collection(missing), featureidkey="id",
            locations=[feature_key(f) for f in missing],
            z=[0] * len(missing),
            colorscale=[[0, config.NEUTRAL_FILL], [1, config.NEUTRAL_FILL]],
            showscale=False,
            text=[f["properties"]["country"] or f["properties"]["name"] or "Unknown" for f in missing],
            marker_line_width=0.5, marker_line_color="#333",
            hovertemplate="<b>%{text}</b><br>No data available<extra></extra>",
        ))
        base_layout(fig, self.chart_id, width=self.width, height=self.height,
                    margin=dict(l=10, r=10, t=10, b=10), geo_bgcolor="rgba(0,0,0,0)")
        # refit the projection to whatever features are drawn now
        fig.update_geos(fitbounds="locations", visible=False, projection_type="mercator")
        if not features:
            placeholder(fig, "Map data unavailable")

        join = self._commit([feature_key(f) for f in present],
                            style_keys=[f["properties"]["country"] for f in present], shown=shown)
        logger.info("%s: matched %d countries with %s data", self.chart_id, len(present), prop)
        return ChartFrame(self.chart_id, fig, self.keys, join, legend=self.legend(dom))

    # -----------------------------
    # LEGEND
    # -----------------------------
    def legend(self, domain: Optional[tuple]) -> html.Div:
        """Gradient bar with rounded end labels, rebuilt on every render."""
        title = html.Div(f"{self.legend_title}:", style={"fontWeight": 700, "minWidth": "150px"})
        item_style = {"display": "flex", "alignItems": "center", "gap": "10px", "fontSize": "12px"}
        if domain is None:
            return html.Div([title, html.Span("No data", style={"color": config.TEXT_DIM})], style=item_style)

        lo, hi = self.color_range
        return html.Div(style=item_style, children=[
            title,
            html.Div(style={"width": f"{config.LEGEND_RECT_WIDTH}px"}, children=[
                html.Div(id=f"legend-gradient-{self.legend_id}", style={
                    "height": "12px", "borderRadius": "2px",
                    "background": f"linear-gradient(to right, {lo} 0%, {hi} 100%)",
                }),
                html.Div(style={"display": "flex", "justifyContent": "space-between", "fontSize": "11px"}, children=[
                    html.Span(legend_value(domain[0])),
                    html.Span(legend_value(domain[1])),
                ]),
            ]),
        ])
