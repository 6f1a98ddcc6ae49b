import itertools

import pytest

from analysis.classifier import ColumnKind, classify
from analysis.errors import MalformedColumnError


@pytest.mark.parametrize(
    "values, expected",
    [
        # 2 of 3 numeric is above half
        (["42abc", "7", "9"], ColumnKind.NUMERIC),
        # exactly half is not enough
        (["42abc", "7"], ColumnKind.CATEGORICAL),
        (["5", 5, "5.0"], ColumnKind.NUMERIC),
        ([1, 2, None, "", None], ColumnKind.NUMERIC),
        (["a", "b", 1], ColumnKind.CATEGORICAL),
        (["inf", "nan", "1_000"], ColumnKind.CATEGORICAL),
        ([True, False, 1], ColumnKind.CATEGORICAL),
        ([" 3 ", "2e3", 1.5], ColumnKind.NUMERIC),
        ([], ColumnKind.CATEGORICAL),
        ([None, "", None], ColumnKind.CATEGORICAL),
    ],
)
def test_classify(values, expected):
    assert classify(values) is expected


def test_classify_ignores_value_order():
    values = ["x", "1", 2, None, "3.5", "y"]
    outcomes = {classify(list(p)) for p in itertools.permutations(values)}
    assert outcomes == {ColumnKind.NUMERIC}

    values = ["x", "1", "y", 2]
    outcomes = {classify(list(p)) for p in itertools.permutations(values)}
    assert outcomes == {ColumnKind.CATEGORICAL}


def test_classify_rejects_unsupported_cells():
    with pytest.raises(MalformedColumnError) as excinfo:
        classify([[1, 2], {"a": 1}, "x"], column="payload")

    assert excinfo.value.column == "payload"
    assert excinfo.value.bad_cells == 2
