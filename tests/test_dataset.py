import numpy as np
import pytest

from analysis.dataset import (
    Dataset,
    coerce_number,
    is_blank_row,
    is_empty_cell,
    stringify_cell,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, 5.0),
        (2.5, 2.5),
        (np.int64(7), 7.0),
        ("42", 42.0),
        (" 3.25 ", 3.25),
        ("-1e3", -1000.0),
        (".5", 0.5),
        ("+4.", 4.0),
        ("42abc", None),
        ("abc", None),
        ("inf", None),
        ("nan", None),
        ("1_000", None),
        ("0x1A", None),
        ("1e999", None),
        (float("inf"), None),
        (True, None),
        (None, None),
        ("", None),
    ],
)
def test_coerce_number_requires_whole_string_match(value, expected):
    assert coerce_number(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, "5"),
        (5.0, "5"),
        ("5", "5"),
        ("5.0", "5.0"),
        (2.5, "2.5"),
        (np.float64(3.0), "3"),
        (True, "true"),
        ("eng", "eng"),
    ],
)
def test_stringify_cell_normalizes_numbers(value, expected):
    assert stringify_cell(value) == expected


def test_empty_cells():
    assert is_empty_cell(None)
    assert is_empty_cell("")
    assert is_empty_cell(float("nan"))
    assert not is_empty_cell(" ")
    assert not is_empty_cell(0)
    assert is_blank_row({"a": None, "b": ""})
    assert not is_blank_row({"a": None, "b": 0})


def test_from_records_fills_missing_keys_and_drops_unknown():
    ds = Dataset.from_records([{"a": 1}, {"b": "x", "zzz": 9}], columns=["a", "b"])

    assert ds.columns == ("a", "b")
    assert [dict(r) for r in ds.rows] == [{"a": 1, "b": None}, {"a": None, "b": "x"}]
    assert ds.row_count == 2
    assert ds.column_count == 2


def test_from_records_infers_columns_in_first_seen_order():
    ds = Dataset.from_records([{"b": 1, "a": 2}, {"c": 3}])

    assert ds.columns == ("b", "a", "c")
    assert ds.column_values("c") == [None, 3]


def test_dataset_is_read_only():
    ds = Dataset.from_records([{"a": 1}])

    with pytest.raises(TypeError):
        ds.rows[0]["a"] = 2
    with pytest.raises(AttributeError):
        ds.columns = ("b",)


def test_unknown_column_raises():
    ds = Dataset.from_records([{"a": 1}])
    with pytest.raises(KeyError):
        ds.column_values("missing")


def test_head_returns_plain_dicts():
    ds = Dataset.from_records([{"a": i} for i in range(10)])
    head = ds.head(3)

    assert head == [{"a": 0}, {"a": 1}, {"a": 2}]
    assert all(type(r) is dict for r in head)
    assert Dataset.empty().head() == []
