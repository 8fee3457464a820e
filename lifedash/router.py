# =============================================================================
# Event router: year / continent changes redraw, brushes restyle
# =============================================================================
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from . import config
from .charts import BarChart, Chart, ChartFrame, ChoroplethMap, ScatterPlot
from .dataset import Dataset
from .selection import Brush, SelectionSet
from .state import DashboardState

logger = logging.getLogger(__name__)

LIFE_BARS = "life-bars"
ENERGY_BARS = "energy-bars"
SCATTER = "scatter"
LIFE_MAP = "life-map"
ENERGY_MAP = "energy-map"


class EventRouter:
    """Holds the registered charts and drives them from dashboard state."""

    def __init__(self, dataset: Dataset):
        self.dataset = dataset
        self.charts: "OrderedDict[str, Chart]" = OrderedDict()

    def register(self, chart: Chart) -> Chart:
        if chart.chart_id in self.charts:
            raise ValueError(f"Chart {chart.chart_id!r} is already registered")
        self.charts[chart.chart_id] = chart
        return chart

    def chart(self, chart_id: str) -> Chart:
        return self.charts[chart_id]

    @property
    def brushable(self) -> List[Chart]:
        return [c for c in self.charts.values() if c.brushable]

    def initial_state(self) -> DashboardState:
        year = self.dataset.latest_year or self.dataset.year_bounds[1]
        return DashboardState(year=year)

    # -----------------------------
    # REDRAW
    # -----------------------------
    def redraw(self, state: DashboardState, shown: Optional[Dict[str, dict]] = None) -> Dict[str, ChartFrame]:
        """Filter, draw every chart, then apply the current selection.

        ``shown`` maps chart ids to the figures the caller has on screen; the
        keyed diff of each frame is taken against them.
        """
        shown = shown or {}
        frames = OrderedDict()
        for chart_id, chart in self.charts.items():
            rows = chart.rows_for(self.dataset, state.year, state.continents)
            frame = chart.draw(rows, shown=shown.get(chart_id))
            chart.apply_styles(frame.figure, state.selection)
            frames[chart_id] = frame
        logger.info("Year %s: redrew %d charts for %d continents", state.year, len(frames), len(state.continents))
        return frames

    def on_year_change(self, state: DashboardState, year: int) -> Tuple[DashboardState, Dict[str, ChartFrame]]:
        state = state.with_year(year)
        return state, self.redraw(state)

    def on_continent_toggle(self, state: DashboardState, name: str) -> Tuple[DashboardState, Dict[str, ChartFrame]]:
        state = state.toggle_continent(name)
        return state, self.redraw(state)

    # -----------------------------
    # SELECTION
    # -----------------------------
    def selection_for(self, chart_id: str, brush: Optional[Brush], figure=None) -> SelectionSet:
        selection = self.chart(chart_id).selection_from_brush(brush, figure)
        logger.info("Brush on %s: %s", chart_id, "cleared" if selection is None else f"{len(selection)} countries")
        return selection

    def brush_end(self, state: DashboardState, chart_id: str, brush: Optional[Brush], figure=None) -> DashboardState:
        """Replace the selection from one chart's brush; None or empty clears it."""
        return state.select(self.selection_for(chart_id, brush, figure))

    def restyle(self, selection: SelectionSet, figures: Optional[Dict[str, dict]] = None) -> Dict[str, dict]:
        figures = figures or {}
        return OrderedDict(
            (cid, chart.restyle(selection, figures.get(cid))) for cid, chart in self.charts.items()
        )


def build_router(dataset: Dataset, features: Optional[list] = None, domain_policy: str = "year") -> EventRouter:
    """The five dashboard charts, registered in page order."""
    features = features or []
    router = EventRouter(dataset)
    router.register(BarChart(
        LIFE_BARS, config.LIFE, "Life Expectancy by Country (selected year)", "Life Expectancy (years)",
        domain_policy=domain_policy, global_domain=dataset.global_life_domain,
    ))
    router.register(BarChart(
        ENERGY_BARS, config.ENERGY, "Per-Capita Energy Consumption by Country", "Energy Consumption (per-capita)",
        domain_policy=domain_policy, global_domain=dataset.global_energy_domain,
    ))
    router.register(ScatterPlot(
        SCATTER, domain_policy=domain_policy,
        x_domain=dataset.global_energy_domain, y_domain=dataset.global_life_domain,
    ))
    router.register(ChoroplethMap(
        LIFE_MAP, features, config.LIFE, "choropleth-legend", "Life Expectancy (years)",
        color_range=config.LIFE_COLOR_RANGE,
    ))
    router.register(ChoroplethMap(
        ENERGY_MAP, features, config.ENERGY, "choropleth-energy-legend", "Energy Consumption (TWh)",
        color_range=config.ENERGY_COLOR_RANGE,
    ))
    return router
