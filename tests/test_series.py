import pytest

from analysis.charts import ChartKind, ChartSpec, plan
from analysis.dataset import Dataset
from analysis.series import build_series, comparison_series, line_series
from analysis.statistics import profile_dataset


def _spec(kind, *columns):
    return ChartSpec(kind=kind, columns=columns, title="t", description="d")


def test_pie_and_bar_limits():
    ds = Dataset.from_records([{"c": f"v{i}"} for i in range(12)])

    assert len(build_series(_spec(ChartKind.PIE, "c"), ds).points) == 8
    assert len(build_series(_spec(ChartKind.BAR, "c"), ds).points) == 10


def test_frequency_series_matches_projection(salary_dataset):
    series = build_series(_spec(ChartKind.PIE, "dept"), salary_dataset)

    assert [p.to_dict() for p in series.points] == [
        {"label": "eng", "value": 2, "percentage": 66.7},
        {"label": "sales", "value": 1, "percentage": 33.3},
    ]


def test_line_points_are_sparse_and_one_based():
    ds = Dataset.from_records(
        [
            {"a": 1, "b": "2.5"},
            {"a": None, "b": 4},
            {"a": "oops", "b": ""},
            {"a": "7", "b": 8},
        ],
        columns=["a", "b"],
    )

    assert line_series(ds, ("a", "b")) == [
        {"index": 1, "a": 1.0, "b": 2.5},
        {"index": 2, "b": 4.0},
        {"index": 3},
        {"index": 4, "a": 7.0, "b": 8.0},
    ]


def test_line_series_stops_at_fifty_rows():
    ds = Dataset.from_records([{"a": i, "b": i * 2} for i in range(80)])
    points = build_series(_spec(ChartKind.LINE, "a", "b"), ds).points

    assert len(points) == 50
    assert points[-1] == {"index": 50, "a": 49.0, "b": 98.0}


def test_comparison_drops_incomplete_rows_and_renumbers():
    ds = Dataset.from_records(
        [
            {"x": 1, "y": 10},
            {"x": None, "y": 20},
            {"x": "3", "y": "abc"},
            {"x": 4, "y": "40"},
        ],
        columns=["x", "y"],
    )

    assert comparison_series(ds, "x", "y") == [
        {"index": 1, "x": 1.0, "y": 10.0},
        {"index": 2, "x": 4.0, "y": 40.0},
    ]


def test_comparison_considers_first_hundred_rows_only():
    rows = [{"x": i, "y": None if i % 10 == 0 else i} for i in range(150)]
    ds = Dataset.from_records(rows, columns=["x", "y"])
    points = build_series(_spec(ChartKind.COMPARISON, "x", "y"), ds).points

    assert len(points) == 90
    assert len(points) <= min(100, ds.row_count)
    assert all(p["x"] is not None and p["y"] is not None for p in points)
    assert [p["index"] for p in points] == list(range(1, 91))


def test_unknown_column_is_rejected(salary_dataset):
    with pytest.raises(KeyError):
        build_series(_spec(ChartKind.BAR, "nope"), salary_dataset)


def test_every_planned_chart_builds(mixed_dataset):
    charts = plan(profile_dataset(mixed_dataset))
    payloads = [build_series(spec, mixed_dataset).to_dict() for spec in charts]

    assert [p["type"] for p in payloads] == ["pie", "bar", "bar", "line", "comparison"]
    assert all(p["data"] for p in payloads)
    assert payloads[3]["data"][0] == {"index": 1, "units": 0.0, "price": 10.0, "cost": 5.0}


def test_column_named_index_keeps_row_positions():
    ds = Dataset.from_records([{"index": 10 + i, "b": i} for i in range(3)], columns=["index", "b"])

    points = line_series(ds, ("index", "b"))

    assert [p["index"] for p in points] == [1, 2, 3]
    assert [p["b"] for p in points] == [0.0, 1.0, 2.0]


def test_comparison_rejects_column_named_index():
    ds = Dataset.from_records([{"index": 1, "b": 2}], columns=["index", "b"])

    with pytest.raises(ValueError, match="index"):
        comparison_series(ds, "index", "b")
