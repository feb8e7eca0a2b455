"""Sync hook adapter for a watch-based host.

The host calls ``sync`` for every event on a watched Namespace and passes
the resources attached to it. Only the namespace e2e-metrics runs in is
reconciled; its PipelineCoverage attachment is replaced by a freshly built
one and every other attachment is handed back untouched so the host leaves
it alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from e2emetrics.config.constants import KIND_PIPELINE_COVERAGE
from e2emetrics.config.models import E2EMetricsConfig
from e2emetrics.core.errors import SyncError
from e2emetrics.core.telemetry import MetricsSink
from e2emetrics.coverage.engine import CoverageEngine
from e2emetrics.coverage.record import CoverageIdentity, build_pipeline_coverage

logger = structlog.get_logger()


def _metadata(obj: dict[str, Any]) -> dict[str, Any]:
    meta = obj.get("metadata")
    return meta if isinstance(meta, dict) else {}


@dataclass
class SyncRequest:
    """Watched object plus its current attachments."""

    watch: dict[str, Any] | None
    attachments: list[dict[str, Any]] = field(default_factory=list)

    @property
    def watch_name(self) -> str:
        return str(_metadata(self.watch or {}).get("name", ""))


@dataclass
class SyncResponse:
    """Attachments the host should converge to."""

    attachments: list[dict[str, Any]] = field(default_factory=list)
    skip_reconcile: bool = False


class PipelineCoverageSyncer:
    """Reconciles the PipelineCoverage attachment of the watched namespace."""

    def __init__(self, config: E2EMetricsConfig, sink: MetricsSink) -> None:
        self.config = config
        self.sink = sink

    @property
    def namespace(self) -> str:
        return self.config.coverage.namespace

    def _is_observed_coverage(self, attachment: dict[str, Any]) -> bool:
        return (
            attachment.get("kind") == KIND_PIPELINE_COVERAGE
            and _metadata(attachment).get("namespace", "") == self.namespace
        )

    def sync(self, request: SyncRequest | None) -> SyncResponse:
        """Build the desired attachments for one watch event.

        Raises:
            SyncError: The request or its watch object is missing.
        """
        if request is None:
            raise SyncError.invalid_request("Nil request")
        if request.watch is None:
            raise SyncError.invalid_request("Nil watch")

        if request.watch_name != self.namespace:
            logger.debug(
                "skipping_sync",
                got_namespace=request.watch_name,
                want_namespace=self.namespace,
            )
            return SyncResponse(skip_reconcile=True)

        logger.debug("syncing", namespace=request.watch_name)

        response = SyncResponse()
        for attachment in request.attachments:
            if not self._is_observed_coverage(attachment):
                response.attachments.append(attachment)

        result = CoverageEngine(self.config, self.sink).reconcile()
        identity = CoverageIdentity.from_config(self.config.coverage)
        response.attachments.append(build_pipeline_coverage(result.outcome, identity))

        logger.info(
            "sync_completed",
            namespace=request.watch_name,
            attachments=len(response.attachments),
            phase=str(result.outcome.phase),
        )
        return response
