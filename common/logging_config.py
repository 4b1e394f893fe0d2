"""
Logging Configuration and Audit Trail Infrastructure.

This module provides the package loggers and an audit trail for projection
validation runs. A validation run records every round-trip residual and
every solver failure so that the accuracy of a projection setup can be
reviewed after the fact.

Audit Contents
--------------
Every run records:
- Configuration hash (ellipsoid and solver settings)
- Round-trip residuals with their tolerances
- Reverse-solver failures with the planar input that caused them
"""

import hashlib
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from contextlib import contextmanager
import threading


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the projection library.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


@dataclass
class SolverFailure:
    """Record of a planar input for which the Reverse solver gave up.

    Attributes
    ----------
    timestamp : datetime
        When the failure was recorded.
    center : tuple
        (lat0, lon0) of the projection in degrees.
    x, y : float
        The planar input.
    reason : str
        Short identifier, e.g. 'out_of_domain'.
    context : dict
        Additional context.
    """
    timestamp: datetime
    center: tuple
    x: float
    y: float
    reason: str
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RoundTripResidual:
    """Record of a round-trip consistency residual.

    Attributes
    ----------
    timestamp : datetime
        When the residual was computed.
    check_name : str
        Which property was checked (e.g., 'round_trip', 'origin').
    residual_value : float
        The residual magnitude in the linear unit of the ellipsoid.
    tolerance : float
        The acceptable tolerance.
    passed : bool
        Whether the residual is within tolerance.
    context : dict
        Additional context.
    """
    timestamp: datetime
    check_name: str
    residual_value: float
    tolerance: float
    passed: bool
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RunMetadata:
    """Metadata for a validation run."""
    run_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    config_hash: str = ""
    solver_failures: List[SolverFailure] = field(default_factory=list)
    residuals: List[RoundTripResidual] = field(default_factory=list)

    def compute_config_hash(self, config: Dict[str, Any]) -> str:
        """Compute a deterministic hash of the configuration.

        Parameters
        ----------
        config : dict
            The configuration dictionary.

        Returns
        -------
        str
            Truncated SHA-256 hash of the configuration.
        """
        config_str = json.dumps(config, sort_keys=True, default=str)
        self.config_hash = hashlib.sha256(config_str.encode()).hexdigest()[:16]
        return self.config_hash


class AuditLogger:
    """Central record of validation runs.

    Thread Safety
    -------------
    Construction of the singleton is guarded by a lock.

    Examples
    --------
    >>> audit = AuditLogger()
    >>> with audit.run_context("wgs84_check") as run:
    ...     audit.log_residual("round_trip", 1e-9, 1e-3)
    >>> summary = audit.get_run_summary("wgs84_check")
    """

    _instance: Optional['AuditLogger'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'AuditLogger':
        """Singleton pattern for the global audit logger."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._runs: Dict[str, RunMetadata] = {}
        self._current_run_id: Optional[str] = None
        self._logger = get_logger("audit")
        self._initialized = True

    @contextmanager
    def run_context(self, run_id: str, config: Optional[Dict[str, Any]] = None):
        """Context manager for a validation run.

        Parameters
        ----------
        run_id : str
            Unique identifier for this run.
        config : dict, optional
            Configuration to compute hash from.

        Yields
        ------
        RunMetadata
            The metadata object for this run.
        """
        metadata = RunMetadata(
            run_id=run_id,
            start_time=datetime.now()
        )

        if config:
            metadata.compute_config_hash(config)

        self._runs[run_id] = metadata
        self._current_run_id = run_id

        self._logger.info(f"Starting run {run_id} with config hash {metadata.config_hash}")

        try:
            yield metadata
        finally:
            metadata.end_time = datetime.now()
            self._current_run_id = None
            self._logger.info(
                f"Completed run {run_id}. "
                f"Solver failures: {len(metadata.solver_failures)}, "
                f"Residual checks: {len(metadata.residuals)}"
            )

    def log_solver_failure(
        self,
        center: tuple,
        x: float,
        y: float,
        reason: str = "out_of_domain",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a Reverse-solver failure in the current run."""
        failure = SolverFailure(
            timestamp=datetime.now(),
            center=tuple(center),
            x=x,
            y=y,
            reason=reason,
            context=context or {}
        )

        if self._current_run_id and self._current_run_id in self._runs:
            self._runs[self._current_run_id].solver_failures.append(failure)

        self._logger.debug(
            f"SOLVER FAILURE | {reason} | center={failure.center} | "
            f"x={x:.6e} y={y:.6e}"
        )

    def log_residual(
        self,
        check_name: str,
        residual_value: float,
        tolerance: float,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a consistency residual in the current run.

        Parameters
        ----------
        check_name : str
            Which property was checked.
        residual_value : float
            The computed residual.
        tolerance : float
            The acceptable tolerance.
        context : dict, optional
            Additional context.
        """
        passed = bool(abs(residual_value) <= tolerance)

        residual = RoundTripResidual(
            timestamp=datetime.now(),
            check_name=check_name,
            residual_value=residual_value,
            tolerance=tolerance,
            passed=passed,
            context=context or {}
        )

        if self._current_run_id and self._current_run_id in self._runs:
            self._runs[self._current_run_id].residuals.append(residual)

        status = "PASS" if passed else "FAIL"
        log_msg = (
            f"RESIDUAL CHECK | {check_name} | {status} | "
            f"residual={residual_value:.6e} (tolerance={tolerance:.6e})"
        )

        if passed:
            self._logger.debug(log_msg)
        else:
            self._logger.warning(log_msg)

    def get_run_summary(self, run_id: str) -> Dict[str, Any]:
        """Get a summary of a validation run.

        Raises
        ------
        KeyError
            If no run with this id was recorded.
        """
        if run_id not in self._runs:
            raise KeyError(f"No run found with ID {run_id}")

        metadata = self._runs[run_id]

        failure_counts = {}
        for f in metadata.solver_failures:
            failure_counts[f.reason] = failure_counts.get(f.reason, 0) + 1

        residual_results = {}
        for r in metadata.residuals:
            entry = residual_results.setdefault(
                r.check_name, {"passed": True, "max_residual": 0.0, "count": 0}
            )
            entry["passed"] = entry["passed"] and r.passed
            entry["max_residual"] = max(entry["max_residual"], abs(r.residual_value))
            entry["count"] += 1

        return {
            "run_id": run_id,
            "config_hash": metadata.config_hash,
            "start_time": metadata.start_time.isoformat(),
            "end_time": metadata.end_time.isoformat() if metadata.end_time else None,
            "total_solver_failures": len(metadata.solver_failures),
            "failure_counts_by_reason": failure_counts,
            "residuals": residual_results,
        }

    def export_run_artifacts(self, run_id: str, output_path: Path) -> None:
        """Export all audit records for a run to JSON.

        Parameters
        ----------
        run_id : str
            The run identifier.
        output_path : Path
            Path to write the JSON file.
        """
        if run_id not in self._runs:
            raise KeyError(f"No run found with ID {run_id}")

        metadata = self._runs[run_id]

        artifacts = {
            "run_id": metadata.run_id,
            "config_hash": metadata.config_hash,
            "start_time": metadata.start_time.isoformat(),
            "end_time": metadata.end_time.isoformat() if metadata.end_time else None,
            "solver_failures": [
                {
                    "timestamp": f.timestamp.isoformat(),
                    "center": list(f.center),
                    "x": f.x,
                    "y": f.y,
                    "reason": f.reason,
                    "context": f.context
                }
                for f in metadata.solver_failures
            ],
            "residuals": [
                {
                    "timestamp": r.timestamp.isoformat(),
                    "check_name": r.check_name,
                    "residual_value": r.residual_value,
                    "tolerance": r.tolerance,
                    "passed": r.passed,
                    "context": r.context
                }
                for r in metadata.residuals
            ]
        }

        with open(output_path, 'w') as f:
            json.dump(artifacts, f, indent=2)

        self._logger.info(f"Exported audit artifacts to {output_path}")

    def reset(self) -> None:
        """Forget all recorded runs."""
        self._runs.clear()
        self._current_run_id = None
