# =============================================================================
# Page layout: header, year slider, continent legend, chart panels
# =============================================================================
from dash import dcc, html

from . import config
from .config import BG, BORDER, FONT_FAMILY, PANEL, PANEL_DARK, TEXT, TEXT_BRIGHT, TEXT_DIM
from .router import ENERGY_BARS, ENERGY_MAP, LIFE_BARS, LIFE_MAP, SCATTER

INDEX_STRING = """
<!DOCTYPE html>
<html>
<head>
    {%metas%}
    <title>{%title%}</title>
    {%css%}
    <style>
    * { box-sizing: border-box; }
    body { margin: 0; padding: 0; background: #0a0b0d; }

    /* Slider theming */
    .rc-slider-track { background-color: #10b981 !important; }
    .rc-slider-handle { border-color: #10b981 !important; background: #15171c !important; }
    .rc-slider-rail { background-color: rgba(255,255,255,0.12) !important; }
    .rc-slider-mark-text { color: #71717a !important; }

    /* Continent legend */
    .continent-item { transition: opacity 0.15s ease; }
    .continent-item:hover { filter: brightness(1.15); }

    /* Panel animations */
    .panel-hover { transition: all 0.3s cubic-bezier(0.4, 0, 0.2, 1); }
    .fade-in { animation: fadeIn 0.5s ease forwards; }
    @keyframes fadeIn {
        from { opacity: 0; transform: translateY(8px); }
        to { opacity: 1; transform: translateY(0); }
    }

    /* Scrollbar styling */
    ::-webkit-scrollbar { width: 12px; height: 12px; }
    ::-webkit-scrollbar-track { background: #0a0b0d; }
    ::-webkit-scrollbar-thumb { background: rgba(16, 185, 129, 0.4); border-radius: 6px; }
    ::-webkit-scrollbar-thumb:hover { background: rgba(16, 185, 129, 0.7); }
    </style>
    {%favicon%}
</head>
<body>
    {%app_entry%}
    <footer>
        {%config%}
        {%scripts%}
        {%renderer%}
    </footer>
</body>
</html>
"""

NAV_STYLE = {
    "height": "70px", "display": "flex", "alignItems": "center",
    "justifyContent": "center", "padding": "0 32px",
    "background": f"linear-gradient(180deg, {PANEL} 0%, {PANEL_DARK} 100%)",
    "borderBottom": f"1px solid {BORDER}",
    "position": "sticky", "top": 0, "zIndex": 100,
}
PANEL_STYLE = {
    "background": PANEL, "border": f"1px solid {BORDER}", "borderRadius": "14px",
    "padding": "18px", "marginBottom": "28px", "boxShadow": "0 6px 20px rgba(0,0,0,0.25)",
}
LABEL_STYLE = {
    "fontSize": "11px", "color": TEXT_DIM, "textTransform": "uppercase",
    "letterSpacing": "0.5px", "marginBottom": "8px", "display": "block", "fontWeight": 600,
}
# Horizontal scroll when a bar chart is wider than its panel
SCROLL_STYLE = {
    "overflowX": "auto", "overflowY": "hidden", "whiteSpace": "nowrap",
    "border": f"1px solid {BORDER}", "borderRadius": "12px", "padding": "6px", "width": "100%",
}
GRAPH_CONFIG = {"displayModeBar": False}


def continent_item_style(enabled: bool) -> dict:
    return {
        "display": "flex", "alignItems": "center", "gap": "8px",
        "cursor": "pointer", "userSelect": "none",
        "opacity": 1 if enabled else 0.35,
    }


def continent_legend(enabled) -> html.Div:
    items = []
    for name, color in config.CONTINENT_COLORS.items():
        items.append(html.Div(
            id={"type": "continent-item", "index": name}, className="continent-item",
            n_clicks=0, style=continent_item_style(name in enabled),
            children=[
                html.Div(style={"width": "14px", "height": "14px", "borderRadius": "3px", "background": color}),
                html.Span(name, style={"fontSize": "13px"}),
            ],
        ))
    return html.Div(id="legend", children=[
        html.Label("Continents (click to toggle)", style=LABEL_STYLE),
        html.Div(items, style={"display": "grid", "gridTemplateColumns": "repeat(4, auto)", "gap": "8px 20px"}),
    ])


def year_marks(lo: int, hi: int) -> dict:
    marks = {y: str(y) for y in range(lo - lo % 10, hi + 1, 10) if y >= lo}
    marks[hi] = str(hi)
    return marks


def panel(title, *children, note=None):
    head = [html.H3(title, style={"margin": "0 0 4px 0", "fontSize": "18px", "opacity": 0.85})]
    if note:
        head.append(html.P(note, style={"fontSize": "12px", "color": TEXT_DIM, "margin": "0 0 16px 0"}))
    return html.Div(className="panel-hover fade-in", style=PANEL_STYLE, children=head + list(children))


def bar_panel(title, graph_id):
    return panel(
        title,
        html.Div(style=SCROLL_STYLE, id=f"{graph_id}-container", children=[
            dcc.Graph(id=graph_id, config=GRAPH_CONFIG,
                      style={"height": f"{config.CHART_HEIGHT}px", "width": "100%"}),
        ]),
        note="Drag across bars to select countries • Double-click to clear",
    )


def map_panel(title, graph_id, legend_id):
    return panel(
        title,
        dcc.Graph(id=graph_id, config=GRAPH_CONFIG, style={"height": f"{config.MAP_HEIGHT}px"}),
        html.Div(id=legend_id, style={"padding": "8px 4px 0", "color": TEXT}),
    )


def build_layout(router, state, load_error=None) -> html.Div:
    lo, hi = router.dataset.year_bounds
    banner = []
    if load_error:
        banner.append(html.Div(load_error, id="load-error", style={
            "margin": "20px 32px 0", "padding": "12px 16px", "borderRadius": "10px",
            "border": f"1px solid {config.HILITE}", "color": config.HILITE, "fontSize": "13px",
        }))

    return html.Div(style={"background": BG, "color": TEXT, "minHeight": "100vh", "fontFamily": FONT_FAMILY}, children=[
        dcc.Store(id="continent-store", data=sorted(state.continents)),
        dcc.Store(id="selection-store", data=None),

        html.Div(style=NAV_STYLE, children=[
            html.Div(style={"textAlign": "center"}, children=[
                html.Div("Life Expectancy & Energy", style={"fontWeight": 700, "fontSize": "28px", "color": TEXT_BRIGHT, "letterSpacing": "-0.5px"}),
                html.Div("Country-level trends by year", style={"fontSize": "13px", "color": TEXT_DIM}),
            ]),
        ]),
        *banner,

        # Control bar
        html.Div(style={
            "display": "grid", "gridTemplateColumns": "2fr 1fr", "gap": "32px", "padding": "20px 32px",
            "background": f"linear-gradient(180deg, {PANEL_DARK} 0%, {BG} 100%)",
            "borderBottom": f"1px solid {BORDER}",
        }, children=[
            html.Div(children=[
                html.Label(["Year: ", html.Span(str(state.year), id="year-label", style={"color": TEXT_BRIGHT})], style=LABEL_STYLE),
                dcc.Slider(id="year-slider", min=lo, max=hi, step=1, value=state.year,
                           marks=year_marks(lo, hi), updatemode="drag"),
            ]),
            continent_legend(state.continents),
        ]),

        html.Div(style={"padding": "24px 32px"}, children=[
            bar_panel("Life Expectancy by Country", LIFE_BARS),
            bar_panel("Energy Consumption by Country", ENERGY_BARS),
            panel(
                "Life Expectancy vs Energy Consumption",
                dcc.Graph(id=SCATTER, config=GRAPH_CONFIG, style={"height": f"{config.CHART_HEIGHT}px"}),
                note="Drag a rectangle to select countries • Double-click to clear",
            ),
            html.Div(style={"display": "grid", "gridTemplateColumns": "1fr 1fr", "gap": "20px"}, children=[
                map_panel("Life Expectancy", LIFE_MAP, router.chart(LIFE_MAP).legend_id),
                map_panel("Energy Consumption", ENERGY_MAP, router.chart(ENERGY_MAP).legend_id),
            ]),
        ]),
    ])
