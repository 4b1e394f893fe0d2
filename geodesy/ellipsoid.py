"""
Ellipsoid Models for Gnomonic Projection.

This module defines the planet model used by the projection: a reference
ellipsoid of revolution given by its equatorial radius and flattening.
Oblate (f > 0), spherical (f = 0) and prolate (f < 0) models are all
supported.

Scientific Context
------------------
Domain: Geodesy, Earth geometry
Model: Ellipsoid of revolution

Conformal Latitude
------------------
The auxiliary-sphere form of the gnomonic projection maps geographic
latitude to a conformal latitude before working on a sphere. The
conformal latitude used here is taken RELATIVE to the projection center:
the center latitude maps to itself, so the sphere touches the ellipsoid
there.

References
----------
- NIMA TR8350.2: WGS84 parameters
- Karney, C.F.F. (2011). Transverse Mercator with an accuracy of a few
  nanometers. J. Geodesy 85, 475-485. (tau/tau' formulation)
"""

from dataclasses import dataclass
from typing import Dict, Any

import numpy as np
from pyproj import Geod
from pyproj.exceptions import GeodError

from common.constants import GeodeticConstants, NumericalConstants


@dataclass(frozen=True)
class EllipsoidParameters:
    """Parameters defining a reference ellipsoid.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    f : float
        Flattening: f = (a - b) / a. Negative for a prolate ellipsoid.
    name : str
        Identifier for the ellipsoid.

    Derived Parameters
    ------------------
    b : float
        Semi-minor axis (polar radius) in meters.
    e2 : float
        First eccentricity squared: e² = f(2 - f)
    ep2 : float
        Second eccentricity squared: e'² = e² / (1 - e²)
    es : float
        Signed eccentricity: sign(e²) sqrt(|e²|)

    Raises
    ------
    ValueError
        If ``a`` is not a positive finite number or ``f`` is not finite
        and below 1.
    """
    a: float
    f: float
    name: str = "custom"

    def __post_init__(self):
        """Validate ellipsoid parameters."""
        if not (np.isfinite(self.a) and self.a > 0):
            raise ValueError(f"Equatorial radius must be positive, got a={self.a}")
        if not (np.isfinite(self.f) and self.f < 1):
            raise ValueError(f"Flattening must be finite and below 1, got f={self.f}")

    @property
    def b(self) -> float:
        """Semi-minor axis in meters."""
        return self.a * (1 - self.f)

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2 - self.f)

    @property
    def ep2(self) -> float:
        """Second eccentricity squared."""
        return self.e2 / (1 - self.e2)

    @property
    def es(self) -> float:
        """Signed eccentricity, negative for prolate ellipsoids."""
        return float(np.sign(self.e2) * np.sqrt(np.abs(self.e2)))

    @property
    def is_sphere(self) -> bool:
        return self.f == 0

    def as_sphere(self) -> 'EllipsoidParameters':
        """Sphere with the same equatorial radius."""
        return EllipsoidParameters.sphere(self.a, name=f"{self.name} sphere")

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "a": self.a, "f": self.f}

    @classmethod
    def sphere(cls, radius: float, name: str = "sphere") -> 'EllipsoidParameters':
        """Create a spherical planet model.

        Parameters
        ----------
        radius : float
            Sphere radius in meters.
        name : str
            Identifier for the model.
        """
        return cls(a=radius, f=0.0, name=name)

    @classmethod
    def from_name(cls, name: str) -> 'EllipsoidParameters':
        """Look up a named ellipsoid in the PROJ catalogue.

        Parameters
        ----------
        name : str
            PROJ ellipsoid identifier, e.g. 'WGS84', 'GRS80', 'clrk66'.

        Returns
        -------
        EllipsoidParameters
            The ellipsoid's equatorial radius and flattening.

        Raises
        ------
        ValueError
            If PROJ does not know the ellipsoid.
        """
        try:
            geod = Geod(ellps=name)
        except (KeyError, GeodError) as err:
            raise ValueError(f"Unknown ellipsoid name {name!r}") from err
        return cls(a=float(geod.a), f=float(geod.f), name=name)


# WGS84 ellipsoid - the default planet model
WGS84Ellipsoid = EllipsoidParameters(
    a=GeodeticConstants.EARTH_SEMI_MAJOR_AXIS.value,
    f=GeodeticConstants.EARTH_FLATTENING.value,
    name="WGS84"
)

# Sphere with the IUGG mean Earth radius
MeanEarthSphere = EllipsoidParameters.sphere(
    GeodeticConstants.EARTH_MEAN_RADIUS.value,
    name="mean Earth sphere"
)


def radius_of_curvature_prime_vertical(
    latitude_rad: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Compute the radius of curvature in the prime vertical.

    Parameters
    ----------
    latitude_rad : float
        Geodetic latitude in radians.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature N in meters.

    Notes
    -----
    N = a / (1 - e² sin²φ)^(1/2)

    This is the radius of the sphere used by the conformal variant of the
    gnomonic projection.
    """
    sin_lat = np.sin(latitude_rad)
    denominator = np.sqrt(1 - ellipsoid.e2 * sin_lat**2)
    return ellipsoid.a / denominator


def eatanhe(x: float, es: float) -> float:
    """Evaluate es * atanh(es * x), continued to prolate ellipsoids.

    For es < 0 the function is -es * atan(es * x); for a sphere it is 0.
    """
    if es > 0:
        return es * np.arctanh(es * x)
    return -es * np.arctan(es * x)


def conformal_latitude(
    lat: float,
    lat0: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Conformal latitude relative to a reference latitude.

    Parameters
    ----------
    lat : float
        Geographic latitude in degrees.
    lat0 : float
        Reference (projection center) latitude in degrees, which maps to
        itself.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid.

    Returns
    -------
    float
        Conformal latitude in degrees.
    """
    es = ellipsoid.es
    phi = np.radians(lat)
    phi0 = np.radians(lat0)
    tau = np.tan(phi)
    sig = np.sinh(eatanhe(np.sin(phi), es) - eatanhe(np.sin(phi0), es))
    taup = np.hypot(1.0, sig) * tau - sig * np.hypot(1.0, tau)
    return float(np.degrees(np.arctan(taup)))


def geographic_latitude(
    conflat: float,
    lat0: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid,
    max_iterations: int = NumericalConstants.CONFORMAL_LATITUDE_ITERATIONS
) -> float:
    """Inverse of :func:`conformal_latitude`.

    Newton's method on tau = tan(latitude), started from the conformal
    value. The iteration count is fixed; when it runs out the current
    estimate is returned.

    Parameters
    ----------
    conflat : float
        Conformal latitude in degrees.
    lat0 : float
        Reference latitude in degrees.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid.
    max_iterations : int
        Maximum number of Newton steps.

    Returns
    -------
    float
        Geographic latitude in degrees.
    """
    es = ellipsoid.es
    e2m = 1 - ellipsoid.e2
    tol = 0.1 * np.sqrt(NumericalConstants.MACHINE_EPSILON.value)
    taup = np.tan(np.radians(conflat))
    tau = taup
    de = eatanhe(np.sin(np.radians(lat0)), es)

    for _ in range(max_iterations):
        tau1 = np.hypot(1.0, tau)
        sig = np.sinh(eatanhe(tau / tau1, es) - de)
        sig1 = np.hypot(1.0, sig)
        dtau = -(sig1 * tau - sig * tau1 - taup) * (1 + e2m * tau**2) / (
            (sig1 * tau1 - sig * tau) * e2m * tau1
        )
        tau += dtau
        if np.abs(dtau) < tol * max(1.0, np.abs(tau)):
            break

    return float(np.degrees(np.arctan(tau)))
