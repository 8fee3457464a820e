import json

from lifedash import config
from lifedash.app import (
    CHART_IDS, build_app, clear_brush_patch, create_app, restyle_patches, stored_selection, styles_to_patch,
)
from lifedash.router import ENERGY_BARS, LIFE_BARS, LIFE_MAP, SCATTER
from lifedash.state import DashboardState

CSV = """country,code,continent,year,life_expectancy,energy_consumption
A,FRA,Europe,2020,80,50
B,KEN,Africa,2020,60,10
B,KEN,Africa,2021,61,11
"""


def test_create_app_builds_layout(dataset, features):
    app = create_app(dataset, features)
    slider = app.layout["year-slider"]
    assert (slider.min, slider.max) == (config.SLIDER_MIN_YEAR, config.SLIDER_MAX_YEAR)
    assert slider.value == 2021
    for cid in CHART_IDS:
        assert app.layout[cid] is not None
    assert app.layout[app.event_router.chart(LIFE_MAP).legend_id] is not None


def test_callbacks_registered(dataset, features):
    app = create_app(dataset, features)
    keys = list(app.callback_map)
    assert any("selection-store.data" in k for k in keys)
    assert any("continent-store.data" in k for k in keys)
    assert any("year-label.children" in k for k in keys)


def test_load_error_banner(dataset):
    app = create_app(dataset, [], load_error="boom")
    assert app.layout["load-error"].children == "boom"


def test_build_app_from_files(tmp_path, features):
    data = tmp_path / "life.csv"
    data.write_text(CSV, encoding="utf-8")
    geo = tmp_path / "countries.geojson"
    geo.write_text(json.dumps({"type": "FeatureCollection", "features": features}), encoding="utf-8")

    app = build_app(data_path=str(data), geo_cache=geo)
    router = app.event_router
    assert len(router.dataset) == 3
    assert len(router.chart(LIFE_MAP).base_features) == 4
    frames = router.redraw(router.initial_state())
    assert frames[SCATTER].keys == ["B"]


def test_build_app_with_bad_inputs_is_inert(tmp_path):
    geo = tmp_path / "countries.geojson"
    geo.write_text("not json", encoding="utf-8")

    app = build_app(data_path=str(tmp_path / "missing.csv"), geo_cache=geo)
    banner = app.layout["load-error"].children
    assert "Dataset not found" in banner
    assert "not valid JSON" in banner
    assert app.event_router.dataset.is_empty
    frames = app.event_router.redraw(app.event_router.initial_state())
    assert all(frame.keys == [] for frame in frames.values())


def assigned(patch):
    ops = patch.to_plotly_json()["operations"]
    return {tuple(op["location"]): op["params"]["value"] for op in ops if op["operation"] == "Assign"}


def shown_figures(app, year):
    frames = app.event_router.redraw(DashboardState(year=year))
    return {cid: frame.figure.to_dict() for cid, frame in frames.items()}


def test_styles_to_patch_only_touches_markers():
    marker = {"opacity": [1.0, 0.2], "line": {"color": ["#ff0000", "#333"], "width": [2.0, 0.3]}}
    ops = assigned(styles_to_patch({0: marker}))
    assert ops[("data", 0, "marker", "opacity")] == [1.0, 0.2]
    assert ops[("data", 0, "marker", "line", "color")] == ["#ff0000", "#333"]
    assert ops[("data", 0, "marker", "line", "width")] == [2.0, 0.3]
    assert ops[("data", 0, "selectedpoints")] is None
    assert all(loc[0] == "data" for loc in ops)


def test_clear_brush_patch_drops_box():
    ops = assigned(clear_brush_patch())
    assert ops[("layout", "selections")] == []
    assert ops[("data", 0, "selectedpoints")] is None


def test_bar_drag_payload_to_store(dataset, features):
    app = create_app(dataset, features)
    figures = shown_figures(app, 2020)
    payload = {"points": [{"x": "A", "customdata": "A"}], "range": {"x": [-0.5, 0.5], "y": [0, 90]}}
    assert stored_selection(app.event_router, LIFE_BARS, payload, figures[LIFE_BARS]) == ["A"]
    payload = {"points": [], "range": {"x": [0.6, 2.4]}}
    assert stored_selection(app.event_router, LIFE_BARS, payload, figures[LIFE_BARS]) == ["B", "C"]


def test_scatter_drag_payload_to_store(dataset, features):
    app = create_app(dataset, features)
    figures = shown_figures(app, 2020)
    payload = {"points": [{"customdata": "A"}], "range": {"x": [45, 55], "y": [75, 85]}}
    assert stored_selection(app.event_router, SCATTER, payload, figures[SCATTER]) == ["A"]


def test_empty_drag_clears_store(dataset, features):
    app = create_app(dataset, features)
    figures = shown_figures(app, 2020)
    empty = {"points": [], "range": {"x": [20, 30], "y": [20, 30]}}
    assert stored_selection(app.event_router, SCATTER, empty, figures[SCATTER]) is None
    assert stored_selection(app.event_router, ENERGY_BARS, None, figures[ENERGY_BARS]) is None
    assert stored_selection(app.event_router, ENERGY_BARS, {"points": []}, figures[ENERGY_BARS]) is None


def test_restyle_patches_follow_the_figures_on_screen(dataset, features):
    app = create_app(dataset, features)
    tab1 = shown_figures(app, 2020)
    shown_figures(app, 2021)

    patches = restyle_patches(app.event_router, ["A"], tab1)
    assert len(patches) == len(CHART_IDS)
    bars = assigned(patches[CHART_IDS.index(LIFE_BARS)])
    assert bars[("data", 0, "marker", "opacity")] == [1.0, 0.2, 0.2]

    cleared = restyle_patches(app.event_router, None, tab1)
    assert assigned(cleared[CHART_IDS.index(LIFE_BARS)])[("data", 0, "marker", "opacity")] == [1.0, 1.0, 1.0]
