"""Coverage outcome model.

An outcome is built once per reconcile and never mutated. Identical manifest
contents always produce an equal outcome, so the derived record can be
applied repeatedly on create and update.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

from e2emetrics.core.errors import E2EMetricsError


class Phase(StrEnum):
    """Whether the reconcile itself succeeded, independent of the coverage value."""

    PASSED = "Passed"
    FAILED = "Failed"


def format_percentage(ratio: float) -> str:
    """Render a ratio as a whole percent, rounding half up.

    Rounds on the decimal representation so 0.595 gives "60%" even though the
    nearest float is slightly below it.

    Examples:
        0.5 -> "50%"
        0.594 -> "59%"
        0.595 -> "60%"
    """
    percent = (Decimal(repr(ratio)) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return f"{int(percent)}%"


def summarize(items: tuple[str, ...], noun: str) -> str:
    """Join items as ``"<n> <noun>: a: b"``, or "" when there are none."""
    if not items:
        return ""
    return f"{len(items)} {noun}: {': '.join(items)}"


@dataclass(frozen=True, slots=True)
class CoverageOutcome:
    """Result of one coverage reconcile."""

    phase: Phase
    coverage_ratio: float
    desired_count: int
    valid_tests: tuple[str, ...] = ()
    invalid_tests: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    deprecated: tuple[str, ...] = ()
    failure_reason: str | None = None

    @property
    def valid_count(self) -> int:
        return len(self.valid_tests)

    @property
    def invalid_count(self) -> int:
        return len(self.invalid_tests)

    @property
    def coverage(self) -> str:
        """Coverage as a percent string, e.g. "50%"."""
        return format_percentage(self.coverage_ratio)

    @property
    def warning_summary(self) -> str:
        return summarize(self.warnings, "warnings")

    @property
    def deprecated_summary(self) -> str:
        return summarize(self.deprecated, "deprecations")


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """An outcome that is always complete, plus the error that degraded it.

    ``error`` is for logging only; ``outcome.phase`` and
    ``outcome.failure_reason`` already reflect it.
    """

    outcome: CoverageOutcome
    error: E2EMetricsError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
