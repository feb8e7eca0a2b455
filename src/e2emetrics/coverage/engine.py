"""Coverage reconciliation.

The engine runs inside a host that must keep running indefinitely, so
``reconcile`` never raises for a bad manifest directory. Every failure
degrades into an outcome with ``phase=Failed`` and a reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from e2emetrics.config.models import E2EMetricsConfig
from e2emetrics.core.errors import E2EMetricsError, InternalError
from e2emetrics.core.logging import clear_reconcile_id, set_reconcile_id
from e2emetrics.core.telemetry import (
    ControllerStatus,
    ControllerType,
    MetricsSink,
    record_sync_call,
)
from e2emetrics.coverage.models import CoverageOutcome, Phase, ReconcileResult
from e2emetrics.manifest.loader import ManifestLoader
from e2emetrics.manifest.models import TestCasesMetrics

logger = structlog.get_logger()

MISSING_DESIRED_TESTS_WARNING = "Missing desired tests"


@dataclass(frozen=True, slots=True)
class CoverageCalculation:
    """Valid/invalid partition of the actual test cases and the ratio."""

    valid_tests: tuple[str, ...]
    invalid_tests: tuple[str, ...]
    coverage_ratio: float
    warnings: tuple[str, ...]


def calculate_coverage(metrics: TestCasesMetrics) -> CoverageCalculation:
    """Partition actual test cases against desired ones and compute coverage.

    Actual ids are walked in sorted order so repeated runs produce the same
    lists and warning text.
    """
    valid: list[str] = []
    invalid: list[str] = []
    for tcid in sorted(metrics.actual):
        if tcid in metrics.desired:
            valid.append(tcid)
        else:
            invalid.append(tcid)

    warnings: list[str] = []
    if invalid:
        warnings.append(f"{len(invalid)} invalid tests were found [{', '.join(invalid)}]")

    desired_count = len(metrics.desired)
    if desired_count == 0:
        warnings.append(MISSING_DESIRED_TESTS_WARNING)
        ratio = 0.0
    else:
        logger.debug("coverage_calculation", formula=f"{len(valid)}/{desired_count}*100")
        ratio = len(valid) / desired_count

    return CoverageCalculation(
        valid_tests=tuple(valid),
        invalid_tests=tuple(invalid),
        coverage_ratio=ratio,
        warnings=tuple(warnings),
    )


class CoverageEngine:
    """Computes pipeline coverage from the configured manifest directory.

    Holds no state between calls; each ``reconcile`` builds a fresh loader.
    """

    def __init__(self, config: E2EMetricsConfig, sink: MetricsSink) -> None:
        self.config = config
        self.sink = sink

    def reconcile(self, manifest_dir: Path | None = None) -> ReconcileResult:
        """Load the manifests and compute a coverage outcome.

        Args:
            manifest_dir: Directory to read. Defaults to ``config.manifests.path``.

        Returns:
            A complete outcome, with the error that degraded it if any.
        """
        set_reconcile_id()
        status = ControllerStatus.FAILED
        error: E2EMetricsError | None = None
        try:
            loader = ManifestLoader.from_config(self.config.manifests, self.sink, manifest_dir)
            try:
                metrics, error = loader.load_or_empty()
                calc = calculate_coverage(metrics)
            except Exception as e:  # reconcile never raises
                error = InternalError.unexpected(str(e), path=str(loader.path))
                metrics = TestCasesMetrics.empty()
                calc = calculate_coverage(metrics)
            if error is not None:
                logger.error("failed_to_reconcile", error=str(error), path=str(loader.path))

            outcome = CoverageOutcome(
                phase=Phase.FAILED if error is not None else Phase.PASSED,
                coverage_ratio=calc.coverage_ratio,
                desired_count=len(metrics.desired),
                valid_tests=calc.valid_tests,
                invalid_tests=calc.invalid_tests,
                warnings=calc.warnings,
                deprecated=tuple(metrics.deprecated),
                failure_reason=str(error) if error is not None else None,
            )
            logger.info(
                "coverage_reconciled",
                phase=str(outcome.phase),
                coverage=outcome.coverage,
                valid=outcome.valid_count,
                invalid=outcome.invalid_count,
                warnings=len(outcome.warnings),
            )
            if error is None:
                status = ControllerStatus.PASSED
            return ReconcileResult(outcome=outcome, error=error)
        finally:
            # Counted as failed unless an outcome without error was built
            record_sync_call(
                self.sink,
                name=self.config.coverage.controller_name,
                type=ControllerType.SYNC,
                status=status,
            )
            clear_reconcile_id()
