import pandas as pd

from lifedash import config
from lifedash.charts import BarChart, ScatterPlot
from lifedash.charts.bars import inner_width
from lifedash.filters import filter_for_year
from lifedash.selection import IntervalBrush, PointsBrush, RectBrush
from lifedash.state import DEFAULT_CONTINENTS


def life_chart(**kw):
    return BarChart("life-bars", "life_expectancy", "Life", "Life Expectancy (years)", **kw)


def rows_for(chart, dataset, year=2020, continents=DEFAULT_CONTINENTS):
    return chart.rows_for(dataset, year, continents)


def test_inner_width_grows_with_row_count():
    assert inner_width(0) == config.MIN_INNER_WIDTH
    assert inner_width(3) == config.MIN_INNER_WIDTH
    assert inner_width(190) == 190 * config.BAR_STEP


def test_bar_draw_orders_and_scales(dataset):
    chart = life_chart()
    frame = chart.draw(rows_for(chart, dataset))
    bar = frame.figure.data[0]
    assert list(bar.x) == ["A", "C", "B"]
    assert list(bar.ids) == ["A", "C", "B"]
    assert list(frame.figure.layout.yaxis.range) == [0, 80.0]
    assert frame.style["width"] == f"{config.MIN_INNER_WIDTH + 90}px"
    assert frame.join.entered == ("A", "C", "B")


def test_bar_global_domain_policy(dataset):
    chart = life_chart(domain_policy="global", global_domain=dataset.global_life_domain)
    frame = chart.draw(rows_for(chart, dataset, year=2021))
    assert list(frame.figure.layout.yaxis.range) == [0, 80.0]


def test_bar_redraw_is_keyed(dataset):
    chart = life_chart()
    chart.draw(rows_for(chart, dataset, 2020))
    frame = chart.draw(rows_for(chart, dataset, 2021))
    assert frame.join.exited == ("A",)
    assert set(frame.join.updated) == {"B", "C"}
    assert frame.join.entered == ()


def test_energy_bars_skip_missing_values(dataset):
    chart = BarChart("energy-bars", "energy_consumption", "Energy", "Energy")
    frame = chart.draw(rows_for(chart, dataset))
    assert list(frame.figure.data[0].x) == ["A", "B"]


def test_bar_empty_rows_show_placeholder(dataset):
    chart = life_chart()
    frame = chart.draw(rows_for(chart, dataset, year=1990))
    assert frame.keys == []
    assert frame.figure.layout.annotations[0].text == config.NO_DATA_TEXT
    assert list(frame.figure.layout.yaxis.range) == [0, 1]


def test_bar_brush_selects_by_bar_centre(dataset):
    chart = life_chart()
    chart.draw(rows_for(chart, dataset))
    # bars are centred on 0 (A), 1 (C), 2 (B)
    assert chart.selection_from_brush(IntervalBrush(-0.4, 1.2)) == frozenset({"A", "C"})
    assert chart.selection_from_brush(IntervalBrush(1.6, 2.4)) == frozenset({"B"})
    assert chart.selection_from_brush(IntervalBrush("C", "B")) == frozenset({"C", "B"})


def test_bar_empty_brush_clears(dataset):
    chart = life_chart()
    chart.draw(rows_for(chart, dataset))
    assert chart.selection_from_brush(IntervalBrush(0.2, 0.8)) is None
    assert chart.selection_from_brush(None) is None
    assert chart.selection_from_brush(PointsBrush(frozenset())) is None


def test_bar_restyle(dataset):
    chart = life_chart()
    chart.draw(rows_for(chart, dataset))
    marker = chart.restyle(frozenset({"C"}))[0]
    table = config.BAR_STYLE_CLASSES
    assert marker["opacity"] == [table["dimmed"]["opacity"], table["selected"]["opacity"], table["dimmed"]["opacity"]]
    assert marker["line"]["width"][1] == table["selected"]["line_width"]

    plain = chart.restyle(None)[0]
    assert set(plain["opacity"]) == {table["normal"]["opacity"]}


def test_restyle_is_idempotent(dataset):
    chart = life_chart()
    frame = chart.draw(rows_for(chart, dataset))
    chart.apply_styles(frame.figure, frozenset({"A"}))
    once = frame.figure.to_dict()
    chart.apply_styles(frame.figure, frozenset({"A"}))
    assert frame.figure.to_dict() == once
    assert chart.restyle(frozenset({"A"})) == chart.restyle(frozenset({"A"}))


def test_restyle_keeps_continent_colors(dataset):
    chart = life_chart()
    frame = chart.draw(rows_for(chart, dataset))
    chart.apply_styles(frame.figure, frozenset({"A"}))
    assert frame.figure.data[0].marker.color[0] == config.CONTINENT_COLORS["Europe"]


def test_scatter_draw(dataset):
    chart = ScatterPlot("scatter")
    frame = chart.draw(rows_for(chart, dataset))
    trace = frame.figure.data[0]
    assert list(trace.customdata) == ["A", "B"]
    assert list(trace.x) == [50.0, 10.0]
    assert list(trace.y) == [80.0, 60.0]
    assert list(frame.figure.layout.xaxis.range) == [0, 50.0]
    assert list(frame.figure.layout.yaxis.range) == [0, 80.0]


def test_scatter_rect_brush(dataset):
    chart = ScatterPlot("scatter")
    chart.draw(rows_for(chart, dataset))
    assert chart.selection_from_brush(RectBrush(40, 60, 75, 85)) == frozenset({"A"})
    assert chart.selection_from_brush(RectBrush(0, 60, 0, 100)) == frozenset({"A", "B"})
    assert chart.selection_from_brush(RectBrush(20, 30, 0, 100)) is None


def test_scatter_empty_rows(dataset):
    chart = ScatterPlot("scatter")
    frame = chart.draw(rows_for(chart, dataset, year=1990))
    assert frame.figure.layout.annotations[0].text == config.NO_DATA_TEXT
    assert list(frame.figure.layout.xaxis.range) == [0, 100]


def test_chart_tolerates_null_energy_rows():
    rows = pd.DataFrame({
        "country": ["A"], "code": ["FRA"], "continent": ["Mars"], "year": [2020],
        "life_expectancy": [80.0], "energy_consumption": [float("nan")],
    })
    frame = life_chart().draw(rows)
    assert frame.figure.data[0].marker.color[0] == config.CONTINENT_COLORS["Unknown"]
