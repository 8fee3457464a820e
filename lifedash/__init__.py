"""Interactive life expectancy / energy consumption dashboard.

Five linked views (two per-country bar charts, a scatterplot and two
choropleths) driven by a year slider, a continent legend and cross-chart
brushing.
"""
from .dataset import Dataset, load_dataset
from .filters import filter_for_year
from .router import EventRouter, build_router
from .state import DashboardState

__version__ = "0.1.0"

__all__ = ["Dataset", "DashboardState", "EventRouter", "build_router", "filter_for_year", "load_dataset"]
