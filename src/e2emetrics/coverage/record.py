"""PipelineCoverage record built from a coverage outcome.

Output schema:
{
    "apiVersion": "e2e-metrics.mayadata.io/v1alpha1",
    "kind": "PipelineCoverage",
    "metadata": {"name": str, "namespace": str},
    "spec": {
        "pipeline": {"id": str},
        "test": {"count": int}          # desired test count
    },
    "result": {
        "phase": "Passed" | "Failed",
        "reason": str,                  # "" unless failed
        "warning": str,                 # "" or "<n> warnings: w1: w2"
        "deprecated": str,              # "" or "<n> deprecations: id1: id2"
        "runid": str,
        "validTestCount": int,
        "invalidTestCount": int,
        "coverage": str                 # e.g. "50%"
    }
}

Results live under ``result`` rather than ``status`` because the sync hook
host does not reconcile an attachment's status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from e2emetrics.config.constants import API_VERSION, KIND_PIPELINE_COVERAGE
from e2emetrics.config.models import CoverageConfig
from e2emetrics.coverage.models import CoverageOutcome


@dataclass(frozen=True, slots=True)
class CoverageIdentity:
    """Host-supplied identity fields of the record."""

    name: str = ""
    namespace: str = ""
    pipeline_id: str = ""
    run_id: str = ""

    @classmethod
    def from_config(cls, config: CoverageConfig) -> CoverageIdentity:
        return cls(
            name=config.name,
            namespace=config.namespace,
            pipeline_id=config.pipeline_id,
            run_id=config.run_id,
        )


def build_pipeline_coverage(outcome: CoverageOutcome, identity: CoverageIdentity) -> dict[str, Any]:
    """Build the PipelineCoverage record.

    The record depends only on its arguments, so it is safe to use for both
    create and update.
    """
    return {
        "apiVersion": API_VERSION,
        "kind": KIND_PIPELINE_COVERAGE,
        "metadata": {
            "name": identity.name,
            "namespace": identity.namespace,
        },
        "spec": {
            "pipeline": {"id": identity.pipeline_id},
            "test": {"count": outcome.desired_count},
        },
        "result": {
            "phase": str(outcome.phase),
            "reason": outcome.failure_reason or "",
            "warning": outcome.warning_summary,
            "deprecated": outcome.deprecated_summary,
            "runid": identity.run_id,
            "validTestCount": outcome.valid_count,
            "invalidTestCount": outcome.invalid_count,
            "coverage": outcome.coverage,
        },
    }
