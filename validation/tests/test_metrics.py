import numpy as np
import numpy.testing as npt

from geodesy.gnomonic import GnomonicProjection
from ..metrics import compute_round_trip_errors, summarize_round_trip


def test_round_trip_errors_shape_and_nan():
    projection = GnomonicProjection()
    lats = np.array([[10.0, 20.0], [-30.0, -60.0]])
    lons = np.array([[0.0, 5.0], [10.0, 180.0]])
    errors = compute_round_trip_errors(projection, 0.0, 0.0, lats, lons)

    assert errors.shape == (2, 2)
    assert np.isnan(errors[1, 1])
    assert np.all(errors[np.isfinite(errors)] < projection.tolerance)


def test_summary():
    projection = GnomonicProjection()
    metrics = summarize_round_trip(
        projection, 0.0, 0.0, [10.0, 20.0, -30.0, -60.0], [0.0, 5.0, 10.0, 180.0]
    )
    assert metrics.n_valid == 3
    assert metrics.n_invalid == 1
    assert metrics.max_error_m < projection.tolerance
    assert metrics.mean_error_m <= metrics.rms_error_m <= metrics.max_error_m


def test_summary_without_valid_points():
    metrics = summarize_round_trip(GnomonicProjection(), 0.0, 0.0, [0.0], [150.0])
    assert metrics.n_valid == 0
    assert metrics.n_invalid == 1
    npt.assert_equal(metrics.max_error_m, np.nan)
