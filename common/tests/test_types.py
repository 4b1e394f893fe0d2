import numpy as np
import pytest

from ..types import ForwardResult, GeographicPoint, PlanarPoint, ReverseResult


def test_geographic_point_validates_latitude():
    with pytest.raises(ValueError):
        GeographicPoint(lat=91.0, lon=0.0)
    assert np.isnan(GeographicPoint(lat=np.nan, lon=0.0).lat)


def test_geographic_point_normalized():
    assert GeographicPoint(lat=10.0, lon=370.0).normalized().lon == 10.0
    assert GeographicPoint(lat=10.0, lon=180.0).normalized().lon == -180.0
    lat, lon = GeographicPoint(lat=1.0, lon=2.0)
    assert (lat, lon) == (1.0, 2.0)


def test_planar_point_polar_form():
    point = PlanarPoint(x=3.0, y=4.0)
    assert point.radius == 5.0
    assert PlanarPoint(x=1.0, y=0.0).azimuth == 90.0
    assert PlanarPoint(x=0.0, y=-1.0).azimuth == 180.0


def test_forward_result_unpacks_and_validates():
    result = ForwardResult(x=1.0, y=2.0, azi=30.0, rk=0.9)
    x, y, azi, rk = result
    assert (x, y, azi, rk) == (1.0, 2.0, 30.0, 0.9)
    assert result.is_valid
    assert result.point == PlanarPoint(1.0, 2.0)

    outside = ForwardResult(x=np.nan, y=np.nan, azi=120.0, rk=-0.2)
    assert not outside.is_valid


def test_reverse_result_nan():
    result = ReverseResult.nan()
    assert not result.is_valid
    assert all(np.isnan(value) for value in result)
    assert ReverseResult(lat=10.0, lon=20.0, azi=0.0, rk=1.0).point == GeographicPoint(10.0, 20.0)
    assert not ForwardResult.nan().is_valid
