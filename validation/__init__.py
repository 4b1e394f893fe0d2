"""
Validation Framework for the gnomonic projection library.

This module provides runtime consistency checks and accuracy metrics.
"""

from validation.consistency import (
    ProjectionConsistencyChecker,
    ProjectionConsistencyError,
    ValidationResult,
)

from validation.metrics import (
    RoundTripMetrics,
    compute_round_trip_errors,
    summarize_round_trip,
)

__all__ = [
    "ProjectionConsistencyChecker",
    "ProjectionConsistencyError",
    "ValidationResult",
    "RoundTripMetrics",
    "compute_round_trip_errors",
    "summarize_round_trip",
]
