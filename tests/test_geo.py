import pytest

from pharmtalk.core import geo


def test_distance_to_self_is_zero():
    assert geo.haversine_meters(37.5665, 126.978, 37.5665, 126.978) == 0.0


def test_distance_is_symmetric_and_non_negative():
    seoul = (37.5665, 126.978)
    busan = (35.1796, 129.0756)

    forward = geo.haversine_meters(*seoul, *busan)
    backward = geo.haversine_meters(*busan, *seoul)

    assert forward > 0
    assert forward == pytest.approx(backward)
    # Seoul City Hall to Busan City Hall is roughly 325 km.
    assert 320_000 < forward < 330_000


def test_one_degree_of_longitude_on_equator():
    assert geo.haversine_meters(0.0, 0.0, 0.0, 1.0) == pytest.approx(111_195, rel=1e-3)


def test_from_projected_scales_down():
    assert geo.from_projected("1269780000") == pytest.approx(126.978)
    assert geo.from_projected("375665000") == pytest.approx(37.5665)
    assert geo.from_projected("") is None
    assert geo.from_projected(None) is None
    assert geo.from_projected("abc") is None


def test_from_projected_truncates_decimal_strings():
    assert geo.from_projected("1269780000.0") == pytest.approx(126.978)
    assert geo.from_projected("375665000.9") == pytest.approx(37.5665)
    assert geo.from_projected(1269780000) == pytest.approx(126.978)
    assert geo.from_projected("inf") is None
    assert geo.from_projected("NaN") is None


def test_is_valid_coordinate():
    assert geo.is_valid_coordinate(37.5, 127.0)
    assert not geo.is_valid_coordinate(91.0, 127.0)
    assert not geo.is_valid_coordinate(37.5, 181.0)
    assert not geo.is_valid_coordinate(float("nan"), 127.0)
