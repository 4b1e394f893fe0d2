"""
Geodetic and Numerical Constants for Gnomonic Projection.

This module provides reference-ellipsoid constants and the numerical
constants that govern the iterative solvers. Every constant carries its
uncertainty, unit and source.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- Karney, C.F.F. (2013). Algorithms for geodesics. J. Geodesy 87, 43-55.
- IEEE 754-2008 binary64 format
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The SI unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class GeodeticConstants:
    """Registry of reference-ellipsoid constants.

    The WGS84 ellipsoid is the default planet model. The mean radius is
    provided for spherical test cases and approximations only.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    EARTH_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid: f = (a - b) / a"
    )

    EARTH_ECCENTRICITY_SQUARED: Final[Constant] = Constant(
        value=0.00669437999014,
        uncertainty=1e-14,
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2 (derived)",
        description="First eccentricity squared: e² = (a² - b²) / a²"
    )

    EARTH_MEAN_RADIUS: Final[Constant] = Constant(
        value=6_371_008.8,
        uncertainty=0.1,
        unit="m",
        source="IUGG mean radius",
        description="Mean radius of Earth (for spherical models only)"
    )


class NumericalConstants:
    """Registry of constants controlling the iterative solvers.

    Notes
    -----
    The Reverse gnomonic solver declares convergence once a Newton step on
    arc length is smaller than ``RELATIVE_TOLERANCE_FACTOR * sqrt(eps0) * a``
    where eps0 is the machine epsilon of binary64.
    """

    MACHINE_EPSILON: Final[Constant] = Constant(
        value=float(np.finfo(np.float64).eps),
        uncertainty=0.0,
        unit="dimensionless",
        source="IEEE 754-2008 binary64",
        description="Spacing between 1.0 and the next representable double"
    )

    RELATIVE_TOLERANCE_FACTOR: Final[Constant] = Constant(
        value=0.01,
        uncertainty=0.0,
        unit="dimensionless",
        source="Karney, GeographicLib Gnomonic",
        description="Multiplier of sqrt(eps0) giving the Reverse convergence tolerance"
    )

    MAX_SOLVER_ITERATIONS: Final[int] = 10

    CONFORMAL_LATITUDE_ITERATIONS: Final[int] = 5

    @staticmethod
    def convergence_tolerance(factor: float = 0.01) -> float:
        """Relative convergence tolerance eps = factor * sqrt(eps0).

        Parameters
        ----------
        factor : float
            Multiplier of sqrt(eps0).

        Returns
        -------
        float
            Dimensionless relative tolerance (about 1.5e-10 by default).
        """
        return factor * np.sqrt(NumericalConstants.MACHINE_EPSILON.value)
