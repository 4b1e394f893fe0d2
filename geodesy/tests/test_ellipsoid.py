import numpy as np
import numpy.testing as npt
import pytest

from common.constants import GeodeticConstants
from ..ellipsoid import (
    EllipsoidParameters,
    MeanEarthSphere,
    WGS84Ellipsoid,
    conformal_latitude,
    geographic_latitude,
    radius_of_curvature_prime_vertical,
)


def test_wgs84_derived_parameters():
    npt.assert_allclose(
        WGS84Ellipsoid.e2,
        GeodeticConstants.EARTH_ECCENTRICITY_SQUARED.value,
        rtol=1e-10
    )
    npt.assert_allclose(WGS84Ellipsoid.b, 6356752.314245, rtol=1e-10)
    assert WGS84Ellipsoid.es > 0
    assert not WGS84Ellipsoid.is_sphere


def test_sphere_and_prolate_eccentricity():
    sphere = EllipsoidParameters.sphere(1.0)
    assert sphere.is_sphere
    assert sphere.e2 == 0
    assert sphere.es == 0

    prolate = EllipsoidParameters(a=1.0, f=-0.01)
    assert prolate.e2 < 0
    assert prolate.es < 0
    npt.assert_allclose(prolate.es**2, -prolate.e2)


def test_from_name_matches_wgs84():
    ellipsoid = EllipsoidParameters.from_name("WGS84")
    npt.assert_allclose(ellipsoid.a, WGS84Ellipsoid.a)
    npt.assert_allclose(ellipsoid.f, WGS84Ellipsoid.f, rtol=1e-12)
    assert ellipsoid.name == "WGS84"


def test_from_name_grs80():
    ellipsoid = EllipsoidParameters.from_name("GRS80")
    assert ellipsoid.a == 6378137.0
    npt.assert_allclose(1 / ellipsoid.f, 298.257222101, rtol=1e-9)


def test_from_name_unknown_raises():
    with pytest.raises(ValueError):
        EllipsoidParameters.from_name("not_an_ellipsoid")


@pytest.mark.parametrize("a, f", [
    (0.0, 0.0),
    (-1.0, 0.0),
    (np.inf, 0.0),
    (1.0, 1.0),
    (1.0, np.nan),
])
def test_invalid_parameters_raise(a, f):
    with pytest.raises(ValueError):
        EllipsoidParameters(a=a, f=f)


def test_prime_vertical_radius():
    npt.assert_allclose(
        radius_of_curvature_prime_vertical(0.0, WGS84Ellipsoid),
        WGS84Ellipsoid.a
    )
    # N at the pole is a^2 / b
    npt.assert_allclose(
        radius_of_curvature_prime_vertical(np.pi / 2, WGS84Ellipsoid),
        WGS84Ellipsoid.a**2 / WGS84Ellipsoid.b,
        rtol=1e-12
    )


def test_conformal_latitude_fixes_reference_latitude():
    for lat0 in [-60.0, 0.0, 12.5, 45.0, 89.0]:
        npt.assert_allclose(conformal_latitude(lat0, lat0), lat0, atol=1e-12)


def test_conformal_latitude_identity_on_sphere():
    sphere = EllipsoidParameters.sphere(1.0)
    for lat in [-75.0, -10.0, 0.0, 33.0, 80.0]:
        npt.assert_allclose(conformal_latitude(lat, 20.0, sphere), lat, atol=1e-12)


@pytest.mark.parametrize("ellipsoid", [
    WGS84Ellipsoid,
    EllipsoidParameters(a=6.4e6, f=1 / 50),
    EllipsoidParameters(a=6.4e6, f=-1 / 150),
])
def test_geographic_latitude_inverts_conformal_latitude(ellipsoid):
    for lat0 in [-40.0, 0.0, 45.0]:
        for lat in np.linspace(-80.0, 80.0, 17):
            conflat = conformal_latitude(lat, lat0, ellipsoid)
            npt.assert_allclose(
                geographic_latitude(conflat, lat0, ellipsoid), lat, atol=1e-9
            )


def test_geographic_latitude_single_step_returns_estimate():
    conflat = conformal_latitude(60.0, 0.0)
    lat = geographic_latitude(conflat, 0.0, max_iterations=1)
    assert np.isfinite(lat)
    assert abs(lat - 60.0) < abs(conflat - 60.0)


def test_mean_earth_sphere():
    assert MeanEarthSphere.is_sphere
    assert MeanEarthSphere.a == 6371008.8
    assert MeanEarthSphere.as_sphere().a == MeanEarthSphere.a
