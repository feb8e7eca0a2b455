"""Coverage reconciliation and the PipelineCoverage record."""

from e2emetrics.coverage.engine import CoverageEngine, calculate_coverage
from e2emetrics.coverage.models import (
    CoverageOutcome,
    Phase,
    ReconcileResult,
    format_percentage,
)
from e2emetrics.coverage.record import CoverageIdentity, build_pipeline_coverage

__all__ = [
    "CoverageEngine",
    "CoverageIdentity",
    "CoverageOutcome",
    "Phase",
    "ReconcileResult",
    "build_pipeline_coverage",
    "calculate_coverage",
    "format_percentage",
]
