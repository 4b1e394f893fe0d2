"""
Consistency Checks for the Gnomonic Projection.

This module verifies, at runtime, the properties a correct gnomonic
projection must satisfy for a given ellipsoid and center:

Check Categories
----------------
1. Origin (the center projects to (0, 0) with unit scale)
2. Round trip (reverse undoes forward to within the solver tolerance)
3. Longitude periodicity (lon and lon + 360 project identically)
4. Scale monotonicity (rk decreases away from the center along a ray)
5. Horizon (points past the M = 0 boundary are reported as undefined)
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Any
import numpy as np
from numpy.typing import ArrayLike

from common.logging_config import get_logger, AuditLogger
from geodesy.gnomonic import GnomonicProjection

logger = get_logger(__name__)


class ProjectionConsistencyError(RuntimeError):
    """Raised by a strict checker when a consistency check fails."""


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the check.
    passed : bool
        Whether the check passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


class ProjectionConsistencyChecker:
    """Checker for the consistency of a gnomonic projection.

    Parameters
    ----------
    projection : GnomonicProjection
        Projection under test.
    tolerance : float, optional
        Linear tolerance in the ellipsoid's unit. Defaults to the Reverse
        solver tolerance eps * a.
    strict_mode : bool
        If True, raise ProjectionConsistencyError on a failed check.
    audit : AuditLogger, optional
        Where to record residuals and solver failures.
    """

    def __init__(
        self,
        projection: GnomonicProjection,
        tolerance: Optional[float] = None,
        strict_mode: bool = False,
        audit: Optional[AuditLogger] = None
    ):
        self.projection = projection
        self.tolerance = projection.tolerance if tolerance is None else tolerance
        self.strict_mode = strict_mode
        self.audit = audit
        self._engine = projection.engine

    def _finish(self, result: ValidationResult) -> ValidationResult:
        if not result.passed:
            logger.warning(f"{result.test_name} failed: {result.message}")
            if self.strict_mode:
                raise ProjectionConsistencyError(result.message)
        return result

    def _record(self, name: str, residual: float, context: Dict[str, Any]) -> None:
        if self.audit is not None:
            self.audit.log_residual(name, residual, self.tolerance, context)

    def check_all(
        self,
        lat0: float,
        lon0: float,
        lats: ArrayLike,
        lons: ArrayLike,
        azimuth: float = 0.0,
        distances: Optional[ArrayLike] = None
    ) -> List[ValidationResult]:
        """Run all checks about one center.

        Parameters
        ----------
        lat0, lon0 : float
            Projection center in degrees.
        lats, lons : array_like
            Sample points in degrees for the round-trip and periodicity
            checks.
        azimuth : float
            Ray azimuth in degrees for the monotonicity and horizon checks.
        distances : array_like, optional
            Increasing distances along the ray in meters. Defaults to
            0.1 to 0.9 of a quarter meridian.

        Returns
        -------
        List[ValidationResult]
            Results of all checks.
        """
        if distances is None:
            quarter = np.pi / 2 * self.projection.a
            distances = np.linspace(0.1, 0.9, 9) * quarter

        results = [
            self.check_origin(lat0, lon0),
            self.check_round_trip(lat0, lon0, lats, lons),
            self.check_longitude_wrap(lat0, lon0, lats, lons),
            self.check_scale_monotonic(lat0, lon0, azimuth, distances),
            self.check_horizon(lat0, lon0, azimuth),
        ]
        return results

    def check_origin(self, lat0: float, lon0: float) -> ValidationResult:
        """Check that the center maps to the origin with unit scale."""
        result = self.projection.forward(lat0, lon0, lat0, lon0)
        offset = float(np.hypot(result.x, result.y))
        scale_error = float(abs(result.rk - 1))
        self._record("origin", offset, {"center": (lat0, lon0)})

        passed = bool(offset <= self.tolerance and scale_error <= 1e-12)
        return self._finish(ValidationResult(
            test_name="origin",
            passed=passed,
            message=f"Origin check: offset={offset:.3e}, |rk-1|={scale_error:.3e}",
            details={'offset': offset, 'rk': float(result.rk)}
        ))

    def check_round_trip(
        self,
        lat0: float,
        lon0: float,
        lats: ArrayLike,
        lons: ArrayLike
    ) -> ValidationResult:
        """Check reverse(forward(p)) == p for every projectable sample."""
        lats = np.atleast_1d(np.asarray(lats, dtype=np.float64))
        lons = np.atleast_1d(np.asarray(lons, dtype=np.float64))

        errors = []
        num_skipped = 0
        num_failures = 0
        for lat, lon in zip(lats, lons):
            fwd = self.projection.forward(lat0, lon0, lat, lon)
            if not fwd.is_valid:
                num_skipped += 1
                continue
            rev = self.projection.reverse(lat0, lon0, fwd.x, fwd.y)
            if not rev.is_valid:
                num_failures += 1
                if self.audit is not None:
                    self.audit.log_solver_failure(
                        (lat0, lon0), fwd.x, fwd.y, reason="no_convergence"
                    )
                continue
            error = self._engine.distance(lat, lon, rev.lat, rev.lon)
            self._record("round_trip", error, {"point": (float(lat), float(lon))})
            errors.append(error)

        max_error = float(np.max(errors)) if errors else 0.0
        passed = bool(num_failures == 0 and max_error <= self.tolerance)

        return self._finish(ValidationResult(
            test_name="round_trip",
            passed=passed,
            message=(
                f"Round trip check: max error {max_error:.3e}, "
                f"{num_failures} solver failures"
            ),
            details={
                'max_error': max_error,
                'num_checked': len(errors),
                'num_skipped': num_skipped,
                'num_failures': num_failures,
            }
        ))

    def check_longitude_wrap(
        self,
        lat0: float,
        lon0: float,
        lats: ArrayLike,
        lons: ArrayLike
    ) -> ValidationResult:
        """Check that shifting longitudes by 360 degrees changes nothing.

        Forward is evaluated with the point's longitude shifted, Reverse
        with the center's longitude shifted. A shifted evaluation that is
        undefined where the unshifted one is defined counts as a violation.
        """
        lats = np.atleast_1d(np.asarray(lats, dtype=np.float64))
        lons = np.atleast_1d(np.asarray(lons, dtype=np.float64))

        max_diff = 0.0
        num_violations = 0
        for lat, lon in zip(lats, lons):
            base = self.projection.forward(lat0, lon0, lat, lon)
            if not base.is_valid:
                continue
            base_rev = self.projection.reverse(lat0, lon0, base.x, base.y)
            for shift in (-360.0, 360.0):
                other = self.projection.forward(lat0, lon0, lat, lon + shift)
                if not other.is_valid:
                    num_violations += 1
                    continue
                diff = float(np.hypot(other.x - base.x, other.y - base.y))
                max_diff = max(max_diff, diff)

                if not base_rev.is_valid:
                    continue
                other_rev = self.projection.reverse(lat0, lon0 + shift, base.x, base.y)
                if not other_rev.is_valid:
                    num_violations += 1
                    continue
                diff = self._engine.distance(
                    base_rev.lat, base_rev.lon, other_rev.lat, other_rev.lon
                )
                max_diff = max(max_diff, float(diff))

        if num_violations:
            max_diff = np.inf
        self._record("longitude_wrap", max_diff, {"center": (lat0, lon0)})

        return self._finish(ValidationResult(
            test_name="longitude_wrap",
            passed=bool(max_diff <= self.tolerance),
            message=(
                f"Longitude wrap check: max difference {max_diff:.3e}, "
                f"{num_violations} undefined shifted results"
            ),
            details={'max_difference': max_diff, 'num_violations': num_violations}
        ))

    def check_scale_monotonic(
        self,
        lat0: float,
        lon0: float,
        azimuth: float,
        distances: ArrayLike
    ) -> ValidationResult:
        """Check that rk strictly decreases along a ray from the center."""
        distances = np.asarray(distances, dtype=np.float64)
        scales = []
        for distance in distances:
            pos = self._engine.direct(lat0, lon0, azimuth, distance)
            scales.append(self.projection.forward(lat0, lon0, pos.lat, pos.lon).rk)
        scales = np.asarray(scales)

        steps = np.diff(scales)
        num_violations = int(np.sum(~(steps < 0)))

        return self._finish(ValidationResult(
            test_name="scale_monotonic",
            passed=bool(num_violations == 0),
            message=f"Scale monotonicity check: {num_violations} violations",
            details={
                'scales': scales.tolist(),
                'num_violations': num_violations,
            }
        ))

    def check_horizon(
        self,
        lat0: float,
        lon0: float,
        azimuth: float,
        distance: Optional[float] = None
    ) -> ValidationResult:
        """Check that a point past the horizon is reported as undefined.

        Parameters
        ----------
        distance : float, optional
            Distance along the ray of a point known to be past the
            horizon. Defaults to 1.2 quarter meridians.
        """
        if distance is None:
            distance = 1.2 * np.pi / 2 * self.projection.a
        pos = self._engine.direct(lat0, lon0, azimuth, distance)
        result = self.projection.forward(lat0, lon0, pos.lat, pos.lon)

        passed = bool((not result.is_valid) and not result.rk > 0)
        return self._finish(ValidationResult(
            test_name="horizon",
            passed=passed,
            message=f"Horizon check at {distance:.1f}: rk={result.rk:.3e}",
            details={'rk': float(result.rk), 'distance': float(distance)}
        ))
