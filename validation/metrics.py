"""
Accuracy Metrics for the Gnomonic Projection.

This module provides summary statistics of how well the Reverse solver
undoes the Forward projection over a set of sample points.

Standard Metrics
----------------
- Round-trip error: geodesic distance between a point and
  reverse(forward(point))
- Mean, maximum and RMS of the round-trip error
- Counts of points outside the projection domain
"""

from dataclasses import dataclass
import numpy as np
from numpy.typing import ArrayLike, NDArray

from common.logging_config import get_logger
from geodesy.gnomonic import GnomonicProjection, forward_batch, reverse_batch

logger = get_logger(__name__)


@dataclass
class RoundTripMetrics:
    """Round-trip error metrics.

    Attributes
    ----------
    mean_error_m : float
        Mean round-trip error in meters.
    max_error_m : float
        Maximum round-trip error in meters.
    rms_error_m : float
        Root mean square round-trip error in meters.
    n_valid : int
        Number of points that projected and inverted successfully.
    n_invalid : int
        Number of points outside the domain or not inverted.
    """
    mean_error_m: float
    max_error_m: float
    rms_error_m: float
    n_valid: int
    n_invalid: int


def compute_round_trip_errors(
    projection: GnomonicProjection,
    lat0: float,
    lon0: float,
    lats: ArrayLike,
    lons: ArrayLike
) -> NDArray[np.float64]:
    """Compute the round-trip error of each sample point.

    Parameters
    ----------
    projection : GnomonicProjection
        Projection to evaluate.
    lat0, lon0 : float
        Projection center in degrees.
    lats, lons : array_like
        Sample points in degrees.

    Returns
    -------
    ndarray
        Geodesic distance in meters between each point and its round-trip
        image. NaN where the point is outside the projection domain.
    """
    x, y, _, _ = forward_batch(projection, lat0, lon0, lats, lons)
    rlat, rlon, _, _ = reverse_batch(projection, lat0, lon0, x, y)
    lats, lons = np.broadcast_arrays(
        np.asarray(lats, dtype=np.float64), np.asarray(lons, dtype=np.float64)
    )

    errors = np.full(lats.shape, np.nan, dtype=np.float64)
    for idx in np.ndindex(lats.shape):
        if np.isfinite(rlat[idx]) and np.isfinite(rlon[idx]):
            errors[idx] = projection.engine.distance(
                lats[idx], lons[idx], rlat[idx], rlon[idx]
            )

    return errors


def summarize_round_trip(
    projection: GnomonicProjection,
    lat0: float,
    lon0: float,
    lats: ArrayLike,
    lons: ArrayLike
) -> RoundTripMetrics:
    """Summarize round-trip errors over a set of sample points.

    Returns
    -------
    RoundTripMetrics
        Statistics over the valid points. With no valid points the error
        statistics are NaN.
    """
    errors = compute_round_trip_errors(projection, lat0, lon0, lats, lons)
    valid = errors[np.isfinite(errors)]

    if valid.size == 0:
        logger.warning(f"No sample point about ({lat0}, {lon0}) could be projected")
        mean_error = max_error = rms_error = np.nan
    else:
        mean_error = float(np.mean(valid))
        max_error = float(np.max(valid))
        rms_error = float(np.sqrt(np.mean(valid**2)))

    return RoundTripMetrics(
        mean_error_m=mean_error,
        max_error_m=max_error,
        rms_error_m=rms_error,
        n_valid=int(valid.size),
        n_invalid=int(errors.size - valid.size),
    )
