import numpy as np
import numpy.testing as npt
import pytest

from ..ellipsoid import EllipsoidParameters
from ..gnomonic import GnomonicProjection


def test_aux_equals_exact_on_sphere(sphere_projection):
    for lat, lon in [(10.0, 20.0), (-35.0, 60.0), (50.0, -5.0)]:
        exact = sphere_projection.forward(15.0, 25.0, lat, lon)
        aux = sphere_projection.forward_aux(15.0, 25.0, lat, lon)
        npt.assert_allclose([aux.x, aux.y], [exact.x, exact.y], rtol=1e-10, atol=1e-6)
        npt.assert_allclose(aux.rk, exact.rk, rtol=1e-10)


def test_aux_close_to_exact_near_center(wgs84_projection):
    engine = wgs84_projection.engine
    for azimuth in [0.0, 60.0, 135.0, -100.0]:
        for distance in [1e5, 2e5]:
            pos = engine.direct(40.0, -3.0, azimuth, distance)
            exact = wgs84_projection.forward(40.0, -3.0, pos.lat, pos.lon)
            aux = wgs84_projection.forward_aux(40.0, -3.0, pos.lat, pos.lon)
            npt.assert_allclose(
                np.hypot(aux.x, aux.y), np.hypot(exact.x, exact.y), rtol=1e-3
            )


@pytest.mark.parametrize("lat0, lon0", [(0.0, 0.0), (40.0, -3.0), (-65.0, 120.0)])
def test_reverse_aux_inverts_forward_aux(wgs84_projection, lat0, lon0):
    for lat, lon in [(lat0 + 5.0, lon0 + 5.0), (lat0 - 10.0, lon0 - 20.0)]:
        x, y, _, rk = wgs84_projection.forward_aux(lat0, lon0, lat, lon)
        rlat, rlon, _, rrk = wgs84_projection.reverse_aux(lat0, lon0, x, y)
        npt.assert_allclose(rlat, lat, atol=1e-8)
        npt.assert_allclose(rlon, lon, atol=1e-8)
        npt.assert_allclose(rrk, rk, rtol=1e-10)


def test_aux_center(wgs84_projection):
    x, y, _, rk = wgs84_projection.forward_aux(40.0, -3.0, 40.0, -3.0)
    npt.assert_allclose([x, y], [0.0, 0.0], atol=1e-9)
    npt.assert_allclose(rk, 1.0)


def test_aux_beyond_horizon(wgs84_projection):
    result = wgs84_projection.forward_aux(0.0, 0.0, 0.0, 120.0)
    assert np.isnan(result.x)
    assert result.rk < 0


def test_aux_prolate():
    projection = GnomonicProjection(EllipsoidParameters(a=6.4e6, f=-1 / 150))
    x, y, _, _ = projection.forward_aux(20.0, 10.0, 25.0, 14.0)
    lat, lon, _, _ = projection.reverse_aux(20.0, 10.0, x, y)
    npt.assert_allclose([lat, lon], [25.0, 14.0], atol=1e-8)
