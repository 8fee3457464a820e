# =============================================================================
# Dashboard configuration
# =============================================================================
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# -----------------------------
# DATA SOURCES
# -----------------------------
DATA_PATH = os.environ.get("LIFEDASH_DATA", str(BASE_DIR / "data" / "life-expectancy.csv"))
# Append ?t=<ms> to URL sources so every page session fetches a fresh copy
CACHE_BUST = os.environ.get("LIFEDASH_CACHE_BUST", "1") not in ("0", "false", "False", "")

GEO_URL = os.environ.get(
    "LIFEDASH_GEO_URL",
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/master/geojson/"
    "ne_110m_admin_0_countries.geojson",
)
GEO_CACHE = Path(os.environ.get("LIFEDASH_GEO_CACHE", str(BASE_DIR / "data" / "ne_110m_admin_0_countries.geojson")))
GEO_TIMEOUT = 60

LOG_LEVEL = os.environ.get("LIFEDASH_LOG_LEVEL", "INFO")

REQUIRED_COLUMNS = ["country", "code", "continent", "year", "life_expectancy", "energy_consumption"]
LIFE = "life_expectancy"
ENERGY = "energy_consumption"

# Slider always covers at least this span
SLIDER_MIN_YEAR = 1950
SLIDER_MAX_YEAR = 2023

# -----------------------------
# THEME CONSTANTS
# -----------------------------
BG          = "#0a0b0d"
PANEL       = "#12141a"
PANEL_DARK  = "#0d0e12"
BORDER      = "rgba(255,255,255,0.06)"
TEXT        = "#f4f4f5"
TEXT_DIM    = "#71717a"
TEXT_BRIGHT = "#fafafa"

ACCENT        = "#10b981"
HILITE        = "#ef4444"          # map outline for selected countries
HILITE_BRIGHT = "#ff0000"          # bar/point outline for selected countries
NEUTRAL_FILL  = "#e0e0e0"          # regions without a value
PLACEHOLDER   = "#666"

FONT_FAMILY = "'Inter', system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif"

CONTINENT_COLORS = {
    "Asia": "#E74C3C",
    "Africa": "#F39C12",
    "Europe": "#3498DB",
    "North America": "#f6ff00",
    "South America": "#9B59B6",
    "Oceania": "#02c21f",
    "Unknown": "#95A5A6",
}
UNKNOWN_CONTINENT = "Unknown"

# -----------------------------
# CHART GEOMETRY
# -----------------------------
CHART_MARGIN = dict(t=30, r=30, b=120, l=60)
SCATTER_MARGIN = dict(t=30, r=30, b=60, l=60)
CHART_WIDTH = 800
CHART_HEIGHT = 500
# Pixel width per country column, shared by both bar charts
BAR_STEP = 36
MIN_INNER_WIDTH = CHART_WIDTH - CHART_MARGIN["l"] - CHART_MARGIN["r"]
BAR_PADDING = 0.05

MAP_WIDTH = 600
MAP_HEIGHT = 450
LEGEND_RECT_WIDTH = 150

TRANSITION_MS = 300

# Marker styling per selection class
BAR_STYLE_CLASSES = {
    "normal":   {"opacity": 1.0,  "line_color": "#333", "line_width": 0.5},
    "selected": {"opacity": 1.0,  "line_color": HILITE_BRIGHT, "line_width": 2.0},
    "dimmed":   {"opacity": 0.2,  "line_color": "#333", "line_width": 0.3},
}
POINT_STYLE_CLASSES = {
    "normal":   {"opacity": 0.85, "line_color": "#333", "line_width": 0.5},
    "selected": {"opacity": 1.0,  "line_color": HILITE_BRIGHT, "line_width": 2.0},
    "dimmed":   {"opacity": 0.2,  "line_color": "#333", "line_width": 0.5},
}
MAP_STYLE_CLASSES = {
    "normal":   {"opacity": 1.0,  "line_color": "#333", "line_width": 0.5},
    "selected": {"opacity": 1.0,  "line_color": HILITE, "line_width": 2.5},
    "dimmed":   {"opacity": 0.35, "line_color": "#333", "line_width": 0.5},
}

LIFE_COLOR_RANGE = ["#cfe2f2", "#0d306b"]
ENERGY_COLOR_RANGE = ["#fff5e6", "#cc8800"]

NO_DATA_TEXT = "No data for selected year"
