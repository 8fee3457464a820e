# =============================================================================
# Dash application: wires slider, legend and brushes to the event router
# =============================================================================
import logging
from typing import Optional

from dash import ALL, Dash, Input, Output, Patch, State, ctx, no_update

from . import config
from .dataset import Dataset, load_dataset
from .errors import DatasetLoadError, GeoLoadError
from .geo import load_base_features
from .layout import INDEX_STRING, build_layout, continent_item_style
from .router import ENERGY_BARS, ENERGY_MAP, LIFE_BARS, LIFE_MAP, SCATTER, EventRouter, build_router
from .selection import brush_from_selected_data, make_selection
from .state import DashboardState

logger = logging.getLogger(__name__)

EXTERNAL_CSS = ["https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700;800&display=swap"]
CHART_IDS = [LIFE_BARS, ENERGY_BARS, SCATTER, LIFE_MAP, ENERGY_MAP]
BAR_IDS = [LIFE_BARS, ENERGY_BARS]
MAP_IDS = [LIFE_MAP, ENERGY_MAP]
BRUSH_IDS = [LIFE_BARS, ENERGY_BARS, SCATTER]


def styles_to_patch(styles: dict) -> Patch:
    """Marker-only update for a figure already on screen."""
    patch = Patch()
    for idx, marker in styles.items():
        patch["data"][idx]["marker"]["opacity"] = marker["opacity"]
        patch["data"][idx]["marker"]["line"]["color"] = marker["line"]["color"]
        patch["data"][idx]["marker"]["line"]["width"] = marker["line"]["width"]
        # Plotly's own deselect dimming would stack on the style classes
        patch["data"][idx]["selectedpoints"] = None
    return patch


def clear_brush_patch() -> Patch:
    """Drop the selection box left on a chart that was not brushed last."""
    patch = Patch()
    patch["layout"]["selections"] = []
    patch["data"][0]["selectedpoints"] = None
    return patch


def stored_selection(router: EventRouter, chart_id: str, selected_data, figure) -> Optional[list]:
    """Selection store value for a brush on ``chart_id``, resolved against its figure."""
    brush = brush_from_selected_data(selected_data, rect=router.chart(chart_id).kind == "scatter")
    selection = router.selection_for(chart_id, brush, figure or {})
    return sorted(selection) if selection else None


def restyle_patches(router: EventRouter, selection, figures: dict) -> tuple:
    figures = {cid: fig or {} for cid, fig in figures.items()}
    styles = router.restyle(make_selection(selection), figures)
    return tuple(styles_to_patch(styles[cid]) for cid in CHART_IDS)


def register_callbacks(app: Dash, router: EventRouter) -> None:

    # -----------------------------
    # YEAR / CONTINENT -> REDRAW ALL
    # -----------------------------
    @app.callback(
        Output("year-label", "children"),
        *[Output(cid, "figure") for cid in CHART_IDS],
        *[Output(cid, "style") for cid in BAR_IDS],
        *[Output(router.chart(cid).legend_id, "children") for cid in MAP_IDS],
        Input("year-slider", "value"),
        Input("continent-store", "data"),
        State("selection-store", "data"),
        *[State(cid, "figure") for cid in CHART_IDS],
    )
    def redraw_charts(year, continents, selection, *shown):
        state = DashboardState.from_store(year, continents, selection)
        frames = router.redraw(state, shown={cid: fig or {} for cid, fig in zip(CHART_IDS, shown)})
        figures = [frames[cid].figure for cid in CHART_IDS]
        styles = [frames[cid].style for cid in BAR_IDS]
        legends = [frames[cid].legend for cid in MAP_IDS]
        return (str(state.year), *figures, *styles, *legends)

    # -----------------------------
    # CONTINENT LEGEND TOGGLE
    # -----------------------------
    @app.callback(
        Output("continent-store", "data"),
        Output({"type": "continent-item", "index": ALL}, "style"),
        Input({"type": "continent-item", "index": ALL}, "n_clicks"),
        State("continent-store", "data"),
        State("year-slider", "value"),
        prevent_initial_call=True,
    )
    def toggle_continent(n_clicks, continents, year):
        trigger = ctx.triggered_id
        if not trigger or not any(n_clicks or []):
            return no_update, no_update
        state = DashboardState.from_store(year, continents).toggle_continent(trigger["index"])
        logger.info("Continent %s toggled; %d enabled", trigger["index"], len(state.continents))
        names = [o["id"]["index"] for o in ctx.outputs_list[1]]
        return sorted(state.continents), [continent_item_style(n in state.continents) for n in names]

    # -----------------------------
    # BRUSH END -> SELECTION
    # -----------------------------
    @app.callback(
        Output("selection-store", "data"),
        *[Output(cid, "selectedData") for cid in BRUSH_IDS],
        *[Output(cid, "figure", allow_duplicate=True) for cid in BRUSH_IDS],
        *[Input(cid, "selectedData") for cid in BRUSH_IDS],
        *[State(cid, "figure") for cid in BRUSH_IDS],
        prevent_initial_call=True,
    )
    def brush_ended(*args):
        n = len(BRUSH_IDS)
        selected = dict(zip(BRUSH_IDS, args[:n]))
        figures = dict(zip(BRUSH_IDS, args[n:]))
        trigger = ctx.triggered_id
        if trigger not in BRUSH_IDS:
            return (no_update,) * (1 + 2 * n)
        # one brush at a time: the other charts lose their boxes
        others = [cid != trigger for cid in BRUSH_IDS]
        return (
            stored_selection(router, trigger, selected[trigger], figures[trigger]),
            *[None if other else no_update for other in others],
            *[clear_brush_patch() if other else no_update for other in others],
        )

    # -----------------------------
    # SELECTION -> RESTYLE ALL (no redraw)
    # -----------------------------
    @app.callback(
        *[Output(cid, "figure", allow_duplicate=True) for cid in CHART_IDS],
        Input("selection-store", "data"),
        *[State(cid, "figure") for cid in CHART_IDS],
        prevent_initial_call=True,
    )
    def restyle_charts(selection, *figures):
        return restyle_patches(router, selection, dict(zip(CHART_IDS, figures)))


def create_app(dataset: Dataset = None, features: list = None, load_error: str = None,
               domain_policy: str = "year") -> Dash:
    dataset = dataset if dataset is not None else Dataset.empty()
    router = build_router(dataset, features, domain_policy=domain_policy)

    app = Dash(__name__, external_stylesheets=EXTERNAL_CSS)
    app.title = "Life Expectancy & Energy Dashboard"
    app.index_string = INDEX_STRING
    app.layout = build_layout(router, router.initial_state(), load_error=load_error)
    register_callbacks(app, router)
    app.event_router = router
    return app


def build_app(data_path=None, geo_url=None, geo_cache=None) -> Dash:
    """Load data and geometry, then build the app.

    A failed load is logged and produces an inert dashboard rather than an
    exception.
    """
    errors = []
    try:
        dataset = load_dataset(data_path or config.DATA_PATH)
    except DatasetLoadError as e:
        logger.error("Error loading dataset: %s", e)
        errors.append(str(e))
        dataset = Dataset.empty()

    try:
        features = load_base_features(geo_url, geo_cache)
    except GeoLoadError as e:
        logger.error("Error loading country geometry: %s", e)
        errors.append(str(e))
        features = []

    return create_app(dataset, features, load_error=" | ".join(errors) or None)
