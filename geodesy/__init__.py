"""
Geodesy Module for the gnomonic projection library.

All Earth-surface calculations originate from this package. No other
package may solve geodesic problems independently.

This package provides:
- Reference ellipsoid models and conformal-latitude helpers
- A geodesic engine adapter (inverse, direct, rays with reduced length
  and geodesic scale)
- The ellipsoidal gnomonic projection and its inverse
"""

from geodesy.ellipsoid import (
    EllipsoidParameters,
    WGS84Ellipsoid,
    MeanEarthSphere,
    radius_of_curvature_prime_vertical,
    conformal_latitude,
    geographic_latitude,
)

from geodesy.geodesic_engine import (
    GeodesicEngine,
    GeodesicRay,
    InverseSolution,
    RayPosition,
)

from geodesy.gnomonic import (
    GnomonicProjection,
    SolverSettings,
    TissotIndicatrix,
    ProjectionAdapter,
    GnomonicChart,
    forward_batch,
    reverse_batch,
)

__all__ = [
    # Ellipsoids
    "EllipsoidParameters",
    "WGS84Ellipsoid",
    "MeanEarthSphere",
    "radius_of_curvature_prime_vertical",
    "conformal_latitude",
    "geographic_latitude",
    # Geodesic engine
    "GeodesicEngine",
    "GeodesicRay",
    "InverseSolution",
    "RayPosition",
    # Projection
    "GnomonicProjection",
    "SolverSettings",
    "TissotIndicatrix",
    "ProjectionAdapter",
    "GnomonicChart",
    "forward_batch",
    "reverse_batch",
]
