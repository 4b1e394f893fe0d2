import pytest

from geodesy.ellipsoid import EllipsoidParameters, WGS84Ellipsoid
from geodesy.gnomonic import GnomonicProjection

SPHERE_RADIUS = 6371000.0


@pytest.fixture
def sphere() -> EllipsoidParameters:
    return EllipsoidParameters.sphere(SPHERE_RADIUS)


@pytest.fixture
def sphere_projection(sphere) -> GnomonicProjection:
    return GnomonicProjection(sphere)


@pytest.fixture
def wgs84_projection() -> GnomonicProjection:
    return GnomonicProjection(WGS84Ellipsoid)
