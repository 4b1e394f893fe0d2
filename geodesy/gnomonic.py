"""
Ellipsoidal Gnomonic Projection.

This module implements the gnomonic projection of an ellipsoid about an
arbitrary center point, and its inverse. Geodesics through the center
project to straight lines through the origin, which makes the projection
useful for route planning: a straight line on the chart is (to a very good
approximation) a geodesic on the ellipsoid.

Scientific Context
------------------
Domain: Cartography, geodesy
Model: Karney (2013) ellipsoidal generalization of the gnomonic projection

Formulation
-----------
A point at distance s along the geodesic from the center with azimuth
azi0 projects to

    rho = m(s) / M(s),   x = rho sin(azi0),   y = rho cos(azi0)

where m is the reduced length and M the geodesic scale. The projection
exists only while M > 0, i.e. within (roughly) a quarter meridian of
the center. On a sphere it reduces to the classical rho = R tan(sigma).

Out-of-domain points and solver failures are reported as NaN results;
this module never raises on numerical input.

References
----------
- Karney, C.F.F. (2013). Algorithms for geodesics. J. Geodesy 87, 43-55, §8.
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple, Optional
import numpy as np
from numpy.typing import ArrayLike

from common.constants import NumericalConstants
from common.logging_config import get_logger
from common.types import ForwardResult, ReverseResult, BatchResult
from geodesy.ellipsoid import (
    EllipsoidParameters,
    WGS84Ellipsoid,
    radius_of_curvature_prime_vertical,
    conformal_latitude,
    geographic_latitude,
)
from geodesy.geodesic_engine import GeodesicEngine

logger = get_logger(__name__)


@dataclass(frozen=True)
class SolverSettings:
    """Iteration budget and tolerance of the Reverse solver.

    Attributes
    ----------
    max_iterations : int
        Maximum number of iterations in each of the two solver phases.
    tolerance_factor : float
        Convergence is declared once a Newton step is below
        ``tolerance_factor * sqrt(eps0) * a``.
    conformal_iterations : int
        Maximum Newton steps when inverting the conformal latitude.
    """
    max_iterations: int = NumericalConstants.MAX_SOLVER_ITERATIONS
    tolerance_factor: float = NumericalConstants.RELATIVE_TOLERANCE_FACTOR.value
    conformal_iterations: int = NumericalConstants.CONFORMAL_LATITUDE_ITERATIONS

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if self.conformal_iterations < 1:
            raise ValueError(
                f"conformal_iterations must be at least 1, got {self.conformal_iterations}"
            )
        if not self.tolerance_factor > 0:
            raise ValueError(f"tolerance_factor must be positive, got {self.tolerance_factor}")

    @property
    def eps0(self) -> float:
        """Machine epsilon."""
        return NumericalConstants.MACHINE_EPSILON.value

    @property
    def eps(self) -> float:
        """Relative convergence tolerance."""
        return NumericalConstants.convergence_tolerance(self.tolerance_factor)


@dataclass
class TissotIndicatrix:
    """Local distortion of the gnomonic projection at a point.

    Attributes
    ----------
    semi_major : float
        Scale along the radial direction (toward the center), 1/rk².
    semi_minor : float
        Scale perpendicular to the radial direction, 1/rk.
    area_scale : float
        Area distortion factor, 1/rk³.
    angular_distortion_rad : float
        Maximum angular distortion in radians.

    Notes
    -----
    Both scales equal 1 at the center and grow without bound toward the
    horizon, where rk goes to zero.
    """
    semi_major: float
    semi_minor: float
    area_scale: float
    angular_distortion_rad: float

    @property
    def is_conformal(self) -> bool:
        """Check if projection is locally conformal (true only at the center)."""
        return np.abs(self.semi_major - self.semi_minor) < 1e-6


class GnomonicProjection:
    """Gnomonic projection of an ellipsoid.

    The projection center is passed to every call; an instance only holds
    the planet model and the solver settings, so one instance can serve any
    number of centers and threads.

    Parameters
    ----------
    ellipsoid : EllipsoidParameters
        Planet model (default: WGS84).
    settings : SolverSettings, optional
        Reverse solver configuration.

    Examples
    --------
    >>> proj = GnomonicProjection()
    >>> x, y, azi, rk = proj.forward(48.86, 2.35, 51.51, -0.13)
    >>> lat, lon, azi, rk = proj.reverse(48.86, 2.35, x, y)
    """

    def __init__(
        self,
        ellipsoid: EllipsoidParameters = WGS84Ellipsoid,
        settings: Optional[SolverSettings] = None
    ):
        self.ellipsoid = ellipsoid
        self.settings = settings or SolverSettings()
        self._earth = GeodesicEngine(ellipsoid)
        self._sphere = GeodesicEngine(ellipsoid.as_sphere())

    @property
    def a(self) -> float:
        return self.ellipsoid.a

    @property
    def f(self) -> float:
        return self.ellipsoid.f

    @property
    def engine(self) -> GeodesicEngine:
        """Ellipsoidal geodesic engine used by the projection."""
        return self._earth

    @property
    def tolerance(self) -> float:
        """Linear tolerance eps * a of the Reverse solver."""
        return self.settings.eps * self.a

    @property
    def _max_radius(self) -> float:
        # Clamp on the planar radius so the bootstrap never overflows
        return self.a / (2 * self.settings.eps0)

    def forward(self, lat0: float, lon0: float, lat: float, lon: float) -> ForwardResult:
        """Project a geographic point onto the plane.

        Parameters
        ----------
        lat0, lon0 : float
            Projection center in degrees.
        lat, lon : float
            Point to project in degrees.

        Returns
        -------
        ForwardResult
            (x, y, azi, rk). x and y are NaN when the point lies beyond
            the projection horizon (rk <= 0).
        """
        sol = self._earth.inverse(lat0, lon0, lat, lon)
        line = self._earth.line(lat0, lon0, sol.azimuth1)
        M, _ = line.scale(sol.arc)

        if M <= 0:
            logger.debug(
                f"Point ({lat}, {lon}) beyond horizon of ({lat0}, {lon0}): M={M:.3e}"
            )
            return ForwardResult(x=np.nan, y=np.nan, azi=sol.azimuth2, rk=M)

        rho = sol.reduced_length / M
        azi0 = np.radians(sol.azimuth1)
        return ForwardResult(
            x=rho * np.sin(azi0),
            y=rho * np.cos(azi0),
            azi=sol.azimuth2,
            rk=M,
        )

    def reverse(self, lat0: float, lon0: float, x: float, y: float) -> ReverseResult:
        """Find the geographic point that projects to (x, y).

        The point lies on the geodesic leaving the center with azimuth
        atan2(x, y), at the distance s where m(s)/M(s) equals the planar
        radius. That equation is solved in two bounded phases:

        1. Bootstrap. For moderate radii the spherical estimate
           s = a atan(rho/a) is used. For radii near the horizon the arc
           length is stepped from 90 degrees assuming dM/dsigma = -1, and the
           search continues for ``trip`` further steps after M first turns
           positive, so that it does not stop on the wrong side of the
           horizon.
        2. Newton refinement on s. A small step sets a flag and one more
           evaluation confirms it before the point is accepted.

        Parameters
        ----------
        lat0, lon0 : float
            Projection center in degrees.
        x, y : float
            Planar coordinates.

        Returns
        -------
        ReverseResult
            (lat, lon, azi, rk), or all NaN if no point with positive
            geodesic scale was found within the iteration budget.
        """
        a, f = self.a, self.f
        numit = self.settings.max_iterations
        azi0 = np.degrees(np.arctan2(x, y))
        rho = min(np.hypot(x, y), self._max_radius)

        if np.isnan(rho):
            logger.debug(f"Reverse called with non-numeric input ({x}, {y})")
            return ReverseResult.nan()

        line = self._earth.line(lat0, lon0, azi0)
        converged = False
        usable = True

        if rho * f < a / 2:
            s = a * np.arctan(rho / a)
        else:
            usable = False
            ang = 90.0
            trip = 1 if f == 0 else max(1, int(-np.log(rho / a) / np.log(f) + 0.5))
            for _ in range(numit):
                pos = line.position(ang, arc_mode=True)
                s, m = pos.distance, pos.reduced_length
                M, _ = line.scale(ang)
                if trip < 0 and M > 0:
                    usable = True
                    break
                ang += np.degrees(M - m / rho)
                if M > 0:
                    trip -= 1
            if usable:
                s -= (m / M - rho) * M * M

        if usable:
            trip = 0
            for _ in range(numit):
                pos = line.position(s)
                M, _ = line.scale(pos.arc)
                if trip:
                    converged = True
                    break
                if M <= 0:
                    break
                ds = (pos.reduced_length / M - rho) * M * M
                s -= ds
                if np.abs(ds) < self.tolerance:
                    trip += 1

        if not converged:
            logger.debug(
                f"Reverse solve failed for ({x}, {y}) about ({lat0}, {lon0})"
            )
            return ReverseResult.nan()

        return ReverseResult(lat=pos.lat, lon=pos.lon, azi=pos.azimuth, rk=M)

    def conformal_latitude(self, lat: float, lat0: float) -> float:
        """Conformal latitude of ``lat`` relative to the center latitude."""
        return conformal_latitude(lat, lat0, self.ellipsoid)

    def geographic_latitude(self, conflat: float, lat0: float) -> float:
        """Geographic latitude for a conformal latitude relative to ``lat0``."""
        return geographic_latitude(
            conflat, lat0, self.ellipsoid,
            max_iterations=self.settings.conformal_iterations
        )

    def forward_aux(self, lat0: float, lon0: float, lat: float, lon: float) -> ForwardResult:
        """Project through the conformal sphere tangent at the center.

        The point's latitude is replaced by its conformal latitude and the
        spherical gnomonic projection is applied on a sphere whose radius is
        the prime-vertical radius of curvature at the center. Agrees with
        :meth:`forward` exactly on a sphere and approximately near the
        center of an ellipsoid.
        """
        clat = self.conformal_latitude(lat, lat0)
        n = radius_of_curvature_prime_vertical(np.radians(lat0), self.ellipsoid)
        sol = self._sphere.inverse(lat0, lon0, clat, lon)
        sig = np.radians(sol.arc)
        rk = np.cos(sig)

        if rk <= 0:
            return ForwardResult(x=np.nan, y=np.nan, azi=sol.azimuth2, rk=rk)

        rho = n * np.tan(sig)
        azi0 = np.radians(sol.azimuth1)
        return ForwardResult(
            x=rho * np.sin(azi0),
            y=rho * np.cos(azi0),
            azi=sol.azimuth2,
            rk=rk,
        )

    def reverse_aux(self, lat0: float, lon0: float, x: float, y: float) -> ReverseResult:
        """Inverse of :meth:`forward_aux`. No iteration beyond the conformal latitude inverse."""
        azi0 = np.degrees(np.arctan2(x, y))
        rho = min(np.hypot(x, y), self._max_radius)
        n = radius_of_curvature_prime_vertical(np.radians(lat0), self.ellipsoid)
        sig = np.degrees(np.arctan(rho / n))
        pos = self._sphere.direct(lat0, lon0, azi0, sig, arc_mode=True)
        lat = self.geographic_latitude(pos.lat, lat0)
        return ReverseResult(
            lat=lat,
            lon=pos.lon,
            azi=pos.azimuth,
            rk=np.cos(np.radians(sig)),
        )

    @staticmethod
    def scale_factors(rk: float) -> TissotIndicatrix:
        """Distortion of the projection at a point with geodesic scale ``rk``.

        Parameters
        ----------
        rk : float
            Geodesic scale reported by :meth:`forward` or :meth:`reverse`.

        Returns
        -------
        TissotIndicatrix
            Radial scale 1/rk², azimuthal scale 1/rk; NaN for rk <= 0.
        """
        if not rk > 0:
            return TissotIndicatrix(
                semi_major=np.nan,
                semi_minor=np.nan,
                area_scale=np.nan,
                angular_distortion_rad=np.nan
            )
        h = 1.0 / rk**2
        k = 1.0 / rk
        return TissotIndicatrix(
            semi_major=h,
            semi_minor=k,
            area_scale=h * k,
            angular_distortion_rad=2 * np.arcsin(np.abs(h - k) / (h + k))
        )


def forward_batch(
    projection: GnomonicProjection,
    lat0: float,
    lon0: float,
    lats: ArrayLike,
    lons: ArrayLike
) -> BatchResult:
    """Project arrays of geographic points.

    Parameters
    ----------
    projection : GnomonicProjection
        Projection to use.
    lat0, lon0 : float
        Projection center in degrees.
    lats, lons : array_like
        Points in degrees; broadcast against each other.

    Returns
    -------
    Tuple[ndarray, ndarray, ndarray, ndarray]
        (x, y, azi, rk) arrays with the broadcast shape.
    """
    lats, lons = np.broadcast_arrays(
        np.asarray(lats, dtype=np.float64), np.asarray(lons, dtype=np.float64)
    )
    out = np.full((4,) + lats.shape, np.nan, dtype=np.float64)

    for idx in np.ndindex(lats.shape):
        out[(slice(None),) + idx] = tuple(
            projection.forward(lat0, lon0, lats[idx], lons[idx])
        )

    return out[0], out[1], out[2], out[3]


def reverse_batch(
    projection: GnomonicProjection,
    lat0: float,
    lon0: float,
    xs: ArrayLike,
    ys: ArrayLike
) -> BatchResult:
    """Invert arrays of planar points.

    Returns
    -------
    Tuple[ndarray, ndarray, ndarray, ndarray]
        (lat, lon, azi, rk) arrays with the broadcast shape of xs and ys.
        Entries the solver could not invert are NaN.
    """
    xs, ys = np.broadcast_arrays(
        np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)
    )
    out = np.full((4,) + xs.shape, np.nan, dtype=np.float64)

    for idx in np.ndindex(xs.shape):
        out[(slice(None),) + idx] = tuple(
            projection.reverse(lat0, lon0, xs[idx], ys[idx])
        )

    return out[0], out[1], out[2], out[3]


class ProjectionAdapter(ABC):
    """Abstract base class for projections bound to a fixed center.

    Angles are in degrees; planar coordinates in the ellipsoid's linear
    unit.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the projection."""
        pass

    @property
    @abstractmethod
    def proj4_string(self) -> str:
        """PROJ.4 definition string."""
        pass

    @abstractmethod
    def to_projected(self, lat: float, lon: float) -> Tuple[float, float]:
        """Transform geographic coordinates to (x, y)."""
        pass

    @abstractmethod
    def to_geodetic(self, x: float, y: float) -> Tuple[float, float]:
        """Transform (x, y) to geographic (lat, lon)."""
        pass

    @abstractmethod
    def compute_distortion(self, lat: float, lon: float) -> TissotIndicatrix:
        """Compute local distortion at a point."""
        pass


class GnomonicChart(ProjectionAdapter):
    """Gnomonic projection with a fixed center, for chart-style use.

    Parameters
    ----------
    center_lat, center_lon : float
        Projection center in degrees.
    ellipsoid : EllipsoidParameters
        Planet model (default: WGS84).
    settings : SolverSettings, optional
        Reverse solver configuration.

    Notes
    -----
    Straight lines through the chart origin are geodesics. Other straight
    lines are geodesics only to within the (small) error of the
    ellipsoidal gnomonic projection.
    """

    def __init__(
        self,
        center_lat: float,
        center_lon: float,
        ellipsoid: EllipsoidParameters = WGS84Ellipsoid,
        settings: Optional[SolverSettings] = None
    ):
        self._center_lat = center_lat
        self._center_lon = center_lon
        self._projection = GnomonicProjection(ellipsoid, settings)

        if ellipsoid.is_sphere:
            shape = f"+R={ellipsoid.a}"
        else:
            shape = f"+a={ellipsoid.a} +rf={1 / ellipsoid.f}"
        self._proj4 = (
            f"+proj=gnom +lat_0={center_lat} +lon_0={center_lon} "
            f"{shape} +units=m +no_defs"
        )

    @property
    def name(self) -> str:
        return f"Gnomonic ({self._center_lat}°, {self._center_lon}°)"

    @property
    def proj4_string(self) -> str:
        return self._proj4

    @property
    def projection(self) -> GnomonicProjection:
        return self._projection

    def to_projected(self, lat: float, lon: float) -> Tuple[float, float]:
        result = self._projection.forward(self._center_lat, self._center_lon, lat, lon)
        return float(result.x), float(result.y)

    def to_geodetic(self, x: float, y: float) -> Tuple[float, float]:
        result = self._projection.reverse(self._center_lat, self._center_lon, x, y)
        return float(result.lat), float(result.lon)

    def compute_distortion(self, lat: float, lon: float) -> TissotIndicatrix:
        result = self._projection.forward(self._center_lat, self._center_lon, lat, lon)
        return GnomonicProjection.scale_factors(result.rk)
