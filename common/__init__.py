"""
Common utilities and infrastructure for the gnomonic projection library.

This package provides foundational components used across all modules:
- Geodetic and numerical constants with provenance
- Point and result types
- Logging and audit trail infrastructure
"""

from common.constants import Constant, GeodeticConstants, NumericalConstants
from common.types import (
    GeographicPoint,
    PlanarPoint,
    ForwardResult,
    ReverseResult,
)
from common.logging_config import get_logger, AuditLogger

__all__ = [
    "Constant",
    "GeodeticConstants",
    "NumericalConstants",
    "GeographicPoint",
    "PlanarPoint",
    "ForwardResult",
    "ReverseResult",
    "get_logger",
    "AuditLogger",
]
