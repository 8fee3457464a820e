# =============================================================================
# Chart component contract shared by bars, scatter and choropleth
# =============================================================================
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .. import config
from ..dataset import Dataset
from ..filters import filter_for_year
from ..reconcile import JoinResult, reconcile
from ..selection import Brush, SelectionSet, style_classes

logger = logging.getLogger(__name__)

# trace index -> marker properties for that trace
Styles = Dict[int, dict]


@dataclass
class ChartFrame:
    """Result of one draw: the figure plus what changed since the last one."""
    chart_id: str
    figure: go.Figure
    keys: List[str]
    join: JoinResult
    style: Optional[dict] = None      # graph container style (bar charts resize)
    legend: Any = None                # legend children (choropleths)


def marker_styles(classes: List[str], table: Dict[str, dict]) -> dict:
    return {
        "opacity": [table[c]["opacity"] for c in classes],
        "line": {
            "color": [table[c]["line_color"] for c in classes],
            "width": [table[c]["line_width"] for c in classes],
        },
    }


def placeholder(fig: go.Figure, text: str = config.NO_DATA_TEXT) -> go.Figure:
    fig.add_annotation(
        text=text, x=0.5, y=0.5, xref="paper", yref="paper", showarrow=False,
        font=dict(color=config.PLACEHOLDER, size=14),
    )
    return fig


def base_layout(fig: go.Figure, chart_id: str, **kw) -> go.Figure:
    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=config.TEXT, family=config.FONT_FAMILY),
        showlegend=False,
        # keep the user's brush box across redraws
        uirevision=chart_id,
        transition=dict(duration=config.TRANSITION_MS, easing="cubic-in-out"),
        **kw,
    )
    return fig


# -----------------------------
# FIGURES ON SCREEN
# -----------------------------
def figure_trace(figure, idx: int = 0) -> dict:
    """Trace ``idx`` of a figure, either a go.Figure or the JSON a browser sent back."""
    if figure is None:
        return {}
    if isinstance(figure, go.Figure):
        figure = figure.to_plotly_json()
    data = figure.get("data") or []
    return data[idx] if len(data) > idx else {}


def trace_values(trace: dict, name: str) -> list:
    """A trace array, decoding Plotly's base64 typed-array form."""
    value = trace.get(name)
    if value is None:
        return []
    if isinstance(value, dict) and "bdata" in value:
        raw = base64.b64decode(value["bdata"])
        return np.frombuffer(raw, dtype=value.get("dtype", "f8")).tolist()
    return list(value)


class Chart:
    """A registered view. Subclasses implement draw / selection_from_brush.

    Methods that take ``figure`` read their keys from that figure, which is
    what a browser session has on screen. Without one they fall back to the
    keys of this process's last draw.
    """

    kind = "chart"
    brushable = False
    required_fields = ()
    sort_by = None
    style_table = config.BAR_STYLE_CLASSES

    def __init__(self, chart_id: str, title: str = ""):
        self.chart_id = chart_id
        self.title = title
        self._join_keys: List[str] = []
        self._style_keys: List[Optional[str]] = []

    def __repr__(self):
        return f"{type(self).__name__}({self.chart_id!r})"

    @property
    def keys(self) -> List[Optional[str]]:
        return list(self._style_keys)

    def keys_on(self, figure=None) -> List[Optional[str]]:
        """Country per element, in trace order."""
        if figure is None:
            return list(self._style_keys)
        return trace_values(figure_trace(figure), "customdata")

    def join_keys_on(self, figure=None) -> List[str]:
        if figure is None:
            return list(self._join_keys)
        return self.keys_on(figure)

    def rows_for(self, dataset: Dataset, year: int, continents) -> pd.DataFrame:
        return filter_for_year(dataset, year, continents, self.required_fields, self.sort_by)

    def draw(self, rows: pd.DataFrame, shown=None) -> ChartFrame:
        raise NotImplementedError

    def selection_from_brush(self, brush: Optional[Brush], figure=None) -> SelectionSet:
        raise NotImplementedError(f"{self.chart_id} does not support brushing")

    def _commit(self, join_keys, style_keys=None, shown=None) -> JoinResult:
        join = reconcile(self.join_keys_on(shown), join_keys)
        self._join_keys = list(join_keys)
        self._style_keys = list(join_keys if style_keys is None else style_keys)
        logger.debug("%s: %s", self.chart_id, join)
        return join

    # -----------------------------
    # SELECTION STYLING
    # -----------------------------
    def restyle(self, selection: SelectionSet, figure=None) -> Styles:
        """Marker styles for the elements on screen; never touches the data."""
        classes = style_classes(self.keys_on(figure), selection)
        return {0: marker_styles(classes, self.style_table)}

    def apply_styles(self, fig: go.Figure, selection: SelectionSet) -> go.Figure:
        for idx, marker in self.restyle(selection, fig).items():
            fig.data[idx].update(marker=marker)
        return fig
