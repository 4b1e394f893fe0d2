"""
Type Definitions for Gnomonic Projection Inputs and Outputs.

This module defines the dataclasses exchanged between the projection,
the validation tools and callers. Angles are in DEGREES and planar
coordinates are in the linear unit of the ellipsoid's equatorial radius
(meters for all built-in ellipsoids).

Out-of-Domain Results
---------------------
The projection never raises for points outside its domain. Instead it
returns a result whose coordinates are NaN. Use the ``is_valid`` property
rather than comparing against NaN directly.
"""

from dataclasses import dataclass, astuple
from typing import Iterator, Tuple
import numpy as np


@dataclass(frozen=True)
class GeographicPoint:
    """A geographic position on the ellipsoid.

    Attributes
    ----------
    lat : float
        Geodetic latitude in DEGREES. Range: [-90, 90].
    lon : float
        Longitude in DEGREES. Any value; longitudes are periodic.

    Examples
    --------
    >>> p = GeographicPoint(lat=10.0, lon=370.0)
    >>> p.normalized().lon
    10.0
    """
    lat: float
    lon: float

    def __post_init__(self):
        """Validate latitude range. NaN marks an undefined point."""
        if not (np.isnan(self.lat) or -90.0 <= self.lat <= 90.0):
            raise ValueError(
                f"Latitude {self.lat} deg out of range [-90, 90]. "
                f"Did you swap latitude and longitude?"
            )

    def normalized(self) -> 'GeographicPoint':
        """Return the same point with longitude reduced to [-180, 180)."""
        lon = (self.lon + 180.0) % 360.0 - 180.0
        return GeographicPoint(lat=self.lat, lon=lon)

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))


@dataclass(frozen=True)
class PlanarPoint:
    """A point in the projection plane.

    Attributes
    ----------
    x : float
        Easting-like offset from the projection origin.
    y : float
        Northing-like offset from the projection origin.
    """
    x: float
    y: float

    @property
    def radius(self) -> float:
        """Distance from the projection origin."""
        return float(np.hypot(self.x, self.y))

    @property
    def azimuth(self) -> float:
        """Direction from the origin in degrees, clockwise from +y."""
        return float(np.degrees(np.arctan2(self.x, self.y)))

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))


@dataclass(frozen=True)
class ForwardResult:
    """Result of a geographic to planar projection.

    Attributes
    ----------
    x, y : float
        Planar coordinates. NaN if the point is beyond the projection
        horizon.
    azi : float
        Azimuth in degrees of the geodesic from the center, evaluated at
        the projected point.
    rk : float
        Geodesic scale at the point. ``rk <= 0`` means the projection is
        undefined there.

    Notes
    -----
    Supports tuple unpacking in field order: ``x, y, azi, rk = result``.
    """
    x: float
    y: float
    azi: float
    rk: float

    @property
    def is_valid(self) -> bool:
        """True when both planar coordinates are finite."""
        return bool(np.isfinite(self.x) and np.isfinite(self.y))

    @property
    def point(self) -> PlanarPoint:
        return PlanarPoint(x=self.x, y=self.y)

    @classmethod
    def nan(cls) -> 'ForwardResult':
        """All-NaN result for an undefined projection."""
        return cls(x=np.nan, y=np.nan, azi=np.nan, rk=np.nan)

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))


@dataclass(frozen=True)
class ReverseResult:
    """Result of a planar to geographic projection.

    Attributes
    ----------
    lat, lon : float
        Geographic coordinates in degrees. NaN if no valid point exists.
    azi : float
        Azimuth in degrees of the geodesic from the center, evaluated at
        the recovered point.
    rk : float
        Geodesic scale at the recovered point.

    Notes
    -----
    Supports tuple unpacking in field order: ``lat, lon, azi, rk = result``.
    """
    lat: float
    lon: float
    azi: float
    rk: float

    @property
    def is_valid(self) -> bool:
        """True when both geographic coordinates are finite."""
        return bool(np.isfinite(self.lat) and np.isfinite(self.lon))

    @property
    def point(self) -> GeographicPoint:
        return GeographicPoint(lat=self.lat, lon=self.lon)

    @classmethod
    def nan(cls) -> 'ReverseResult':
        """All-NaN result signalling that the solve failed."""
        return cls(lat=np.nan, lon=np.nan, azi=np.nan, rk=np.nan)

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))


# Convenience alias for the array outputs of the batch functions
BatchResult = Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]
