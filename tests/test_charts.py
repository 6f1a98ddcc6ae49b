from types import MappingProxyType

from analysis.charts import CHART_RULES, MAX_CHARTS, ChartKind, ChartSpec, plan
from analysis.statistics import (
    EMPTY_PROFILE,
    CategoricalProfile,
    DatasetProfile,
    NumericProfile,
    profile_dataset,
)


def _cat(unique, total=None):
    total = total if total is not None else unique
    return CategoricalProfile(
        unique_count=unique,
        most_common=("v0", 1) if unique else None,
        distribution=MappingProxyType({f"v{i}": 1 for i in range(unique)}),
        total=total,
    )


def _num():
    return NumericProfile(mean=1.0, median=1.0, min=0.0, max=2.0, sum=3.0, count=3)


def _profile(**columns):
    return DatasetProfile(total_rows=10, total_columns=len(columns), columns=columns)


def test_salary_dataset_gets_pie_and_bar_only(salary_dataset):
    charts = plan(profile_dataset(salary_dataset))

    assert [c.kind for c in charts] == [ChartKind.PIE, ChartKind.BAR]
    assert charts[0] == ChartSpec(
        kind=ChartKind.PIE,
        columns=("dept",),
        title="dept Distribution",
        description="Shows the breakdown of 3 records across 2 categories",
    )
    assert charts[1].title == "dept Frequency"
    assert charts[1].description == "Count of occurrences for each dept"


def test_construction_order(mixed_dataset):
    charts = plan(profile_dataset(mixed_dataset))

    assert [(c.kind, c.columns) for c in charts] == [
        (ChartKind.PIE, ("region",)),
        (ChartKind.BAR, ("region",)),
        (ChartKind.BAR, ("store",)),
        (ChartKind.LINE, ("units", "price", "cost")),
        (ChartKind.COMPARISON, ("units", "price")),
    ]
    assert charts[3].title == "Numeric Trends: units, price, cost"
    assert charts[4].title == "units vs price"


def test_unique_count_boundaries():
    profile = _profile(one=_cat(1), two=_cat(2), fifteen=_cat(15), sixteen=_cat(16),
                       twenty=_cat(20), many=_cat(21))
    charts = plan(profile)

    pies = [c.column for c in charts if c.kind is ChartKind.PIE]
    bars = [c.column for c in charts if c.kind is ChartKind.BAR]
    assert pies == ["two", "fifteen"]
    assert bars == ["two", "fifteen", "sixteen", "twenty"]


def test_capped_at_six_in_construction_order():
    profile = _profile(a=_cat(3), b=_cat(3), c=_cat(3), d=_cat(3), e=_cat(3), x=_num(), y=_num())
    charts = plan(profile)

    assert len(charts) == MAX_CHARTS
    assert [c.kind for c in charts] == [ChartKind.PIE] * 5 + [ChartKind.BAR]
    assert charts[-1].column == "a"


def test_no_numeric_charts_with_single_numeric_column():
    charts = plan(_profile(only=_num(), cat=_cat(30)))
    assert charts == []


def test_line_tracks_at_most_three_numeric_columns():
    charts = plan(_profile(a=_num(), b=_num(), c=_num(), d=_num()))

    assert [c.kind for c in charts] == [ChartKind.LINE, ChartKind.COMPARISON]
    assert charts[0].columns == ("a", "b", "c")
    assert charts[1].columns == ("a", "b")


def test_empty_profile_plans_nothing():
    assert plan(EMPTY_PROFILE) == []


def test_rules_are_independently_usable():
    line_rule = next(r for r in CHART_RULES if r.name == "line")
    profile = _profile(a=_num(), b=_num(), cat=_cat(3))

    assert [r.name for r in CHART_RULES] == ["pie", "bar", "line", "comparison"]
    assert line_rule.applies(profile)
    assert [c.kind for c in plan(profile, rules=[line_rule])] == [ChartKind.LINE]
    assert not line_rule.applies(_profile(a=_num()))


def test_spec_to_dict():
    pie, bar, line, comparison = plan(_profile(cat=_cat(4), a=_num(), b=_num()))

    assert pie.to_dict() == {
        "type": "pie",
        "column": "cat",
        "title": "cat Distribution",
        "description": "Shows the breakdown of 4 records across 4 categories",
    }
    assert comparison.to_dict()["columns"] == ["a", "b"]
    assert line.to_dict()["type"] == "line"
    assert bar.to_dict()["type"] == "bar"
