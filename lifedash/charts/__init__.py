from .bars import BarChart
from .base import Chart, ChartFrame
from .choropleth import ChoroplethMap
from .scatter import ScatterPlot

__all__ = ["BarChart", "Chart", "ChartFrame", "ChoroplethMap", "ScatterPlot"]
