from analysis.frequency import FrequencyPoint, project, tally


def test_ranked_with_stable_ties():
    points = project(["b", "a", "a", "b", "c"])

    assert points == [
        FrequencyPoint(label="b", value=2, percentage=40.0),
        FrequencyPoint(label="a", value=2, percentage=40.0),
        FrequencyPoint(label="c", value=1, percentage=20.0),
    ]


def test_percentages_use_whole_column_after_truncation():
    points = project(list("aaabbc"), limit=1)
    assert points == [FrequencyPoint(label="a", value=3, percentage=50.0)]


def test_empty_cells_are_not_counted():
    counts, total = tally(["x", None, "", "x", float("nan")])
    assert counts == {"x": 2}
    assert total == 2
    assert project([None, ""]) == []


def test_default_limit_is_ten():
    values = [f"v{i}" for i in range(15)]
    assert len(project(values)) == 10
    assert len(project(values, limit=None)) == 15


def test_long_labels_are_truncated_for_display_only():
    first = "x" * 20 + "A"
    second = "x" * 20 + "B"
    points = project([second, first, first, "short"])

    assert [p.label for p in points] == ["x" * 20 + "...", "x" * 20 + "...", "short"]
    assert [p.value for p in points] == [2, 1, 1]
    assert points[0].percentage == 50.0


def test_label_of_exactly_twenty_chars_is_kept():
    label = "y" * 20
    assert project([label])[0].label == label


def test_untruncated_percentages_sum_to_hundred():
    for values in (list("abcabcabd"), list("aab"), [str(i % 7) for i in range(101)]):
        points = project(values, limit=None)
        assert abs(sum(p.percentage for p in points) - 100) <= 0.05 * len(points)


def test_numbers_and_strings_collapse_to_one_label():
    points = project([1, "1", 1.0, 2])

    assert points[0] == FrequencyPoint(label="1", value=3, percentage=75.0)
    assert points[0].to_dict() == {"label": "1", "value": 3, "percentage": 75.0}
