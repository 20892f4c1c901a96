import math

import pytest

from osmgraph.core.utils import distance, haversine_distance_m, parse_int, parse_max_speed


def test_distance_one_degree_of_longitude_on_equator():
    d = distance(0.0, 0.0, 0.0, 1.0)

    assert d == pytest.approx(111194.93, abs=0.01)
    assert f"{d:.1f}" == "111194.9"


def test_distance_is_symmetric_and_zero_for_same_point():
    a = (52.2297, 21.0122)
    b = (50.0647, 19.9450)

    assert haversine_distance_m(a, b) == haversine_distance_m(b, a)
    assert haversine_distance_m(a, a) == 0.0


def test_distance_custom_radius():
    d = distance(0.0, 0.0, 0.0, 90.0, radius_m=1.0)
    assert d == pytest.approx(math.pi / 2)


def test_distance_nan_propagates():
    assert math.isnan(distance(float("nan"), 0.0, 0.0, 1.0))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("90", 90),
        (" 50 ", 50),
        (None, 150),
        ("walk", 150),
        ("50 mph", 150),
        ("", 150),
        ("--50", 150),
        ("5²", 150),
        ("1_000", 150),
        ("+5", 150),
        ("-10", -10),
    ],
)
def test_parse_max_speed(value, expected):
    assert parse_max_speed(value, 150) == expected


def test_parse_int_is_strict():
    assert parse_int("42") == 42
    assert parse_int(" -7 ") == -7
    assert parse_int("--2") is None
    assert parse_int("4²") is None
    assert parse_int("٣") is None
    assert parse_int("1_0") is None
    assert parse_int("") is None
    assert parse_int(None) is None
