"""Tests for the sync hook adapter."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from e2emetrics.controller.sync import PipelineCoverageSyncer, SyncRequest
from e2emetrics.core.errors import SyncError
from e2emetrics.core.telemetry import SYNC_CALL_COUNT


def _namespace(name: str) -> dict[str, Any]:
    return {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": name}}


def _coverage(namespace: str) -> dict[str, Any]:
    return {
        "kind": "PipelineCoverage",
        "metadata": {"name": "old", "namespace": namespace},
        "result": {"coverage": "10%"},
    }


@pytest.fixture
def syncer(testdata_dir: Path, sink, make_config) -> PipelineCoverageSyncer:
    return PipelineCoverageSyncer(make_config(testdata_dir, name="cov", namespace="e2e"), sink)


class TestSync:
    """PipelineCoverageSyncer.sync tests."""

    def test_nil_request_raises(self, syncer: PipelineCoverageSyncer) -> None:
        with pytest.raises(SyncError, match="Nil request"):
            syncer.sync(None)

    def test_nil_watch_raises(self, syncer: PipelineCoverageSyncer) -> None:
        with pytest.raises(SyncError, match="Nil watch"):
            syncer.sync(SyncRequest(watch=None))

    def test_other_namespace_is_skipped(self, syncer: PipelineCoverageSyncer, sink) -> None:
        response = syncer.sync(SyncRequest(watch=_namespace("default")))

        assert response.skip_reconcile is True
        assert response.attachments == []
        assert sink.counters == []

    def test_own_namespace_gets_fresh_coverage(self, syncer: PipelineCoverageSyncer, sink) -> None:
        response = syncer.sync(SyncRequest(watch=_namespace("e2e")))

        assert response.skip_reconcile is False
        [record] = response.attachments
        assert record["kind"] == "PipelineCoverage"
        assert record["metadata"] == {"name": "cov", "namespace": "e2e"}
        assert record["result"]["coverage"] == "67%"
        assert [name for name, _ in sink.counters] == [SYNC_CALL_COUNT]

    def test_observed_coverage_is_replaced_and_others_pass_through(
        self, syncer: PipelineCoverageSyncer
    ) -> None:
        config_map = {"kind": "ConfigMap", "metadata": {"name": "cm", "namespace": "e2e"}}
        foreign = _coverage("other")
        request = SyncRequest(
            watch=_namespace("e2e"),
            attachments=[_coverage("e2e"), config_map, foreign],
        )

        response = syncer.sync(request)

        assert response.attachments[:2] == [config_map, foreign]
        assert response.attachments[2]["result"]["coverage"] == "67%"
        assert len(response.attachments) == 3

    def test_empty_watch_matches_empty_namespace(self, testdata_dir: Path, sink, make_config) -> None:
        syncer = PipelineCoverageSyncer(make_config(testdata_dir), sink)

        response = syncer.sync(SyncRequest(watch={}))

        assert response.skip_reconcile is False
        assert len(response.attachments) == 1

    def test_bad_manifests_still_produce_a_record(
        self, tmp_path: Path, sink, make_config
    ) -> None:
        syncer = PipelineCoverageSyncer(make_config(tmp_path / "missing", namespace="e2e"), sink)

        response = syncer.sync(SyncRequest(watch=_namespace("e2e")))

        [record] = response.attachments
        assert record["result"]["phase"] == "Failed"
        assert record["result"]["reason"]
