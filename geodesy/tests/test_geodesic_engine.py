import numpy as np
import numpy.testing as npt

from ..ellipsoid import EllipsoidParameters, WGS84Ellipsoid
from ..geodesic_engine import GeodesicEngine

SPHERE_RADIUS = 6371000.0


def test_inverse_coincident_points():
    engine = GeodesicEngine(WGS84Ellipsoid)
    sol = engine.inverse(10.0, 20.0, 10.0, 20.0)
    assert sol.arc == 0.0
    assert sol.distance == 0.0
    npt.assert_allclose(sol.reduced_length, 0.0, atol=1e-9)
    npt.assert_allclose(sol.scale12, 1.0, atol=1e-15)
    npt.assert_allclose(sol.scale21, 1.0, atol=1e-15)


def test_inverse_sphere_closed_forms():
    engine = GeodesicEngine(EllipsoidParameters.sphere(SPHERE_RADIUS))
    sol = engine.inverse(0.0, 0.0, 0.0, 30.0)
    sigma = np.radians(30.0)
    npt.assert_allclose(sol.arc, 30.0, rtol=1e-14)
    npt.assert_allclose(sol.distance, SPHERE_RADIUS * sigma, rtol=1e-14)
    npt.assert_allclose(sol.azimuth1, 90.0, rtol=1e-14)
    npt.assert_allclose(sol.reduced_length, SPHERE_RADIUS * np.sin(sigma), rtol=1e-13)
    npt.assert_allclose(sol.scale12, np.cos(sigma), rtol=1e-13)


def test_direct_then_inverse():
    engine = GeodesicEngine(WGS84Ellipsoid)
    pos = engine.direct(-33.9, 18.4, 247.0, 2.5e6)
    sol = engine.inverse(-33.9, 18.4, pos.lat, pos.lon)
    npt.assert_allclose(sol.distance, 2.5e6, rtol=1e-12)
    npt.assert_allclose(sol.azimuth1, 247.0 - 360.0, atol=1e-9)
    npt.assert_allclose(sol.reduced_length, pos.reduced_length, rtol=1e-9)


def test_direct_arc_mode():
    engine = GeodesicEngine(WGS84Ellipsoid)
    by_arc = engine.direct(45.0, 45.0, 30.0, 40.0, arc_mode=True)
    assert by_arc.arc == 40.0
    by_distance = engine.direct(45.0, 45.0, 30.0, by_arc.distance)
    npt.assert_allclose(by_distance.arc, 40.0, rtol=1e-12)
    npt.assert_allclose(by_distance.lat, by_arc.lat, atol=1e-12)
    npt.assert_allclose(by_distance.lon, by_arc.lon, atol=1e-12)


def test_ray_position_by_arc_and_distance_agree():
    engine = GeodesicEngine(WGS84Ellipsoid)
    ray = engine.line(45.0, 45.0, 30.0)
    assert ray.lat0 == 45.0
    assert ray.azimuth0 == 30.0

    by_arc = ray.position(60.0, arc_mode=True)
    by_distance = ray.position(by_arc.distance)
    npt.assert_allclose(by_distance.arc, 60.0, rtol=1e-12)
    npt.assert_allclose(by_distance.lat, by_arc.lat, atol=1e-12)
    npt.assert_allclose(by_distance.lon, by_arc.lon, atol=1e-12)
    npt.assert_allclose(by_distance.azimuth, by_arc.azimuth, atol=1e-12)
    npt.assert_allclose(by_distance.reduced_length, by_arc.reduced_length, rtol=1e-12)


def test_ray_scale_matches_inverse():
    engine = GeodesicEngine(WGS84Ellipsoid)
    sol = engine.inverse(45.0, 45.0, 10.0, 100.0)
    ray = engine.line(45.0, 45.0, sol.azimuth1)
    M12, M21 = ray.scale(sol.arc)
    npt.assert_allclose(M12, sol.scale12, atol=1e-12)
    npt.assert_allclose(M21, sol.scale21, atol=1e-12)


def test_ray_scale_at_origin():
    engine = GeodesicEngine(WGS84Ellipsoid)
    M12, M21 = engine.line(0.0, 0.0, 45.0).scale(0.0)
    npt.assert_allclose(M12, 1.0, atol=1e-15)
    npt.assert_allclose(M21, 1.0, atol=1e-15)


def test_scale_decreases_along_ray():
    engine = GeodesicEngine(WGS84Ellipsoid)
    ray = engine.line(45.0, 45.0, 30.0)
    scales = [ray.scale(arc)[0] for arc in np.linspace(0.0, 120.0, 25)]
    assert np.all(np.diff(scales) < 0)
    assert scales[0] > 0
    assert scales[-1] < 0


def test_distance():
    engine = GeodesicEngine(EllipsoidParameters.sphere(SPHERE_RADIUS))
    npt.assert_allclose(
        engine.distance(0.0, 0.0, 90.0, 0.0),
        SPHERE_RADIUS * np.pi / 2,
        rtol=1e-14
    )
