"""
Geodesic Engine Adapter.

This module adapts the `geographiclib` solution of the direct and inverse
geodesic problems to the small interface the gnomonic projection needs:
an inverse solution that includes the reduced length, and geodesic rays
that can be evaluated by distance or by arc length together with their
geodesic scale.

Scientific Context
------------------
Domain: Geodesy, differential geometry on curved surfaces
Model: Geodesic (shortest path) on an ellipsoid of revolution

Why geographiclib
-----------------
`pyproj.Geod` wraps the same GeographicLib C code but exposes only
distances and azimuths. The gnomonic projection is built from the
reduced length m12 and the geodesic scale M12, which only the
geographiclib package exposes.

References
----------
- Karney, C.F.F. (2013). Algorithms for geodesics. Journal of Geodesy, 87(1), 43-55.
- GeographicLib: https://geographiclib.sourceforge.io/
"""

from dataclasses import dataclass
from typing import Tuple

from geographiclib.geodesic import Geodesic

from geodesy.ellipsoid import EllipsoidParameters, WGS84Ellipsoid


# Everything the projection reads from a geodesic
_OUTMASK = (
    Geodesic.STANDARD
    | Geodesic.REDUCEDLENGTH
    | Geodesic.GEODESICSCALE
)
_LINE_CAPS = _OUTMASK | Geodesic.DISTANCE_IN


@dataclass(frozen=True)
class InverseSolution:
    """Solution of the inverse geodesic problem.

    Attributes
    ----------
    arc : float
        Arc length on the auxiliary sphere in degrees.
    distance : float
        Geodesic distance in meters.
    azimuth1 : float
        Azimuth at the first point in degrees, clockwise from north.
    azimuth2 : float
        Forward azimuth at the second point in degrees.
    reduced_length : float
        Reduced length m12 in meters.
    scale12 : float
        Geodesic scale M12 of point 2 relative to point 1.
    scale21 : float
        Geodesic scale M21 of point 1 relative to point 2.
    """
    arc: float
    distance: float
    azimuth1: float
    azimuth2: float
    reduced_length: float
    scale12: float
    scale21: float


@dataclass(frozen=True)
class RayPosition:
    """A point along a geodesic ray.

    Attributes
    ----------
    lat, lon : float
        Position in degrees.
    azimuth : float
        Forward azimuth at the position in degrees.
    reduced_length : float
        Reduced length m12 from the ray origin in meters.
    distance : float
        Distance from the ray origin in meters.
    arc : float
        Arc length from the ray origin in degrees.
    """
    lat: float
    lon: float
    azimuth: float
    reduced_length: float
    distance: float
    arc: float


class GeodesicRay:
    """A geodesic starting at a point with a given azimuth.

    Created by :meth:`GeodesicEngine.line`. A ray can be evaluated either
    by distance or by arc length.
    """

    def __init__(self, line):
        self._line = line

    @property
    def lat0(self) -> float:
        return self._line.lat1

    @property
    def lon0(self) -> float:
        return self._line.lon1

    @property
    def azimuth0(self) -> float:
        return self._line.azi1

    def position(self, value: float, arc_mode: bool = False) -> RayPosition:
        """Evaluate the ray at a distance or an arc length.

        Parameters
        ----------
        value : float
            Distance in meters, or arc length in degrees if ``arc_mode``.
        arc_mode : bool
            Interpret ``value`` as an arc length.

        Returns
        -------
        RayPosition
            Position, azimuth, reduced length, distance and arc length.
        """
        if arc_mode:
            result = self._line.ArcPosition(value, _OUTMASK)
        else:
            result = self._line.Position(value, _OUTMASK)
        return RayPosition(
            lat=result['lat2'],
            lon=result['lon2'],
            azimuth=result['azi2'],
            reduced_length=result['m12'],
            distance=result['s12'],
            arc=result['a12'],
        )

    def scale(self, arc: float) -> Tuple[float, float]:
        """Geodesic scales at an arc length along the ray.

        Parameters
        ----------
        arc : float
            Arc length from the ray origin in degrees.

        Returns
        -------
        Tuple[float, float]
            (M12, M21): scale of the point relative to the origin, and of
            the origin relative to the point.
        """
        result = self._line.ArcPosition(arc, Geodesic.GEODESICSCALE)
        return result['M12'], result['M21']


class GeodesicEngine:
    """Direct and inverse geodesic problems on one ellipsoid.

    Parameters
    ----------
    ellipsoid : EllipsoidParameters
        Planet model (default: WGS84).

    Notes
    -----
    Instances hold no mutable state and can be shared between threads.
    """

    def __init__(self, ellipsoid: EllipsoidParameters = WGS84Ellipsoid):
        self.ellipsoid = ellipsoid
        self._geodesic = Geodesic(ellipsoid.a, ellipsoid.f)

    def inverse(
        self,
        lat1: float,
        lon1: float,
        lat2: float,
        lon2: float
    ) -> InverseSolution:
        """Solve the inverse geodesic problem.

        Given two points in degrees, find the geodesic between them.

        Examples
        --------
        >>> engine = GeodesicEngine()
        >>> sol = engine.inverse(40.7128, -74.0060, 51.5074, -0.1278)
        >>> print(f"Distance: {sol.distance / 1000:.1f} km")
        Distance: 5570.2 km
        """
        result = self._geodesic.Inverse(lat1, lon1, lat2, lon2, _OUTMASK)
        return InverseSolution(
            arc=result['a12'],
            distance=result['s12'],
            azimuth1=result['azi1'],
            azimuth2=result['azi2'],
            reduced_length=result['m12'],
            scale12=result['M12'],
            scale21=result['M21'],
        )

    def direct(
        self,
        lat1: float,
        lon1: float,
        azimuth: float,
        value: float,
        arc_mode: bool = False
    ) -> RayPosition:
        """Solve the direct geodesic problem.

        Parameters
        ----------
        lat1, lon1 : float
            Starting point in degrees.
        azimuth : float
            Initial azimuth in degrees.
        value : float
            Distance in meters, or arc length in degrees if ``arc_mode``.
        arc_mode : bool
            Interpret ``value`` as an arc length.
        """
        if arc_mode:
            result = self._geodesic.ArcDirect(lat1, lon1, azimuth, value, _OUTMASK)
        else:
            result = self._geodesic.Direct(lat1, lon1, azimuth, value, _OUTMASK)
        return RayPosition(
            lat=result['lat2'],
            lon=result['lon2'],
            azimuth=result['azi2'],
            reduced_length=result['m12'],
            distance=result['s12'],
            arc=result['a12'],
        )

    def line(self, lat1: float, lon1: float, azimuth: float) -> GeodesicRay:
        """Construct the geodesic ray leaving (lat1, lon1) at ``azimuth``."""
        return GeodesicRay(self._geodesic.Line(lat1, lon1, azimuth, _LINE_CAPS))

    def distance(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Geodesic distance in meters between two points in degrees."""
        result = self._geodesic.Inverse(lat1, lon1, lat2, lon2, Geodesic.DISTANCE)
        return result['s12']
