"""Manifest directory loading.

A manifest directory holds at most two recognised files: the master plan
(desired test cases) and the CI pipeline definition (actual test cases).
Every other entry is skipped so unrelated config files can live alongside.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from e2emetrics.config.constants import (
    DEFAULT_ACTUAL_FILE_NAME,
    DEFAULT_DESIRED_FILE_NAME,
    MANIFEST_SUFFIXES,
)
from e2emetrics.config.models import ManifestConfig
from e2emetrics.core.errors import (
    DirectoryReadError,
    FileParseError,
    ManifestError,
    NoManifestsFoundError,
)
from e2emetrics.core.logging import manifest_context
from e2emetrics.core.telemetry import (
    ACTUAL_TEST_COUNT,
    MANIFEST_LOAD_DURATION,
    PLANNED_TEST_COUNT,
    ControllerStatus,
    MetricsSink,
)
from e2emetrics.manifest.models import ManifestRole, TestCasesMetrics
from e2emetrics.manifest.parsing import parse_manifest

logger = structlog.get_logger()


@dataclass
class ManifestLoader:
    """Loads desired and actual test case ids from a manifest directory."""

    path: Path
    sink: MetricsSink
    desired_file_name: str = DEFAULT_DESIRED_FILE_NAME
    actual_file_name: str = DEFAULT_ACTUAL_FILE_NAME
    test_impl_type: str = "litmus"

    _roles: dict[str, ManifestRole] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self._roles = {
            self.desired_file_name: ManifestRole.DESIRED,
            self.actual_file_name: ManifestRole.ACTUAL,
        }

    @classmethod
    def from_config(
        cls, config: ManifestConfig, sink: MetricsSink, path: Path | None = None
    ) -> ManifestLoader:
        return cls(
            path=path if path is not None else Path(config.path),
            sink=sink,
            desired_file_name=config.desired_file_name,
            actual_file_name=config.actual_file_name,
            test_impl_type=config.test_impl_type,
        )

    def role_for(self, entry: Path) -> ManifestRole | None:
        """Return the manifest role of a directory entry, or None to skip it."""
        if entry.is_dir():
            logger.debug("skipping_entry", reason="not a file", file=entry.name)
            return None
        if not entry.name.endswith(MANIFEST_SUFFIXES):
            logger.debug("skipping_entry", reason="not a yaml file", file=entry.name)
            return None
        role = self._roles.get(entry.name)
        if role is None:
            logger.debug(
                "skipping_entry",
                reason="unknown manifest",
                file=entry.name,
                want=[self.desired_file_name, self.actual_file_name],
            )
        return role

    def _list_entries(self) -> list[Path]:
        try:
            entries = sorted(self.path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DirectoryReadError.from_os_error(str(self.path), e) from e
        if not entries:
            raise NoManifestsFoundError.empty_directory(str(self.path))
        return entries

    def load(self) -> TestCasesMetrics:
        """Load all recognised manifests in the directory.

        Returns:
            Desired and actual test case sets plus deprecated ids.

        Raises:
            DirectoryReadError: The directory cannot be listed.
            NoManifestsFoundError: The directory has no entries.
            FileParseError: A recognised manifest could not be read.
        """
        started = time.perf_counter()
        status = ControllerStatus.FAILED
        try:
            out = self._load()
            status = ControllerStatus.PASSED
        finally:
            self.sink.observe(
                MANIFEST_LOAD_DURATION,
                {"status": str(status)},
                time.perf_counter() - started,
            )

        labels = {"testimpltype": self.test_impl_type}
        self.sink.set_gauge(ACTUAL_TEST_COUNT, labels, float(len(out.actual)))
        self.sink.set_gauge(PLANNED_TEST_COUNT, labels, float(len(out.desired)))
        logger.debug(
            "test_count_metrics_set",
            actual_test_count=len(out.actual),
            desired_test_count=len(out.desired),
        )
        return out

    def _load(self) -> TestCasesMetrics:
        logger.debug("loading_manifests", path=str(self.path))
        entries = self._list_entries()

        out = TestCasesMetrics()
        for entry in entries:
            role = self.role_for(entry)
            if role is None:
                continue
            logger.debug("loading_manifest", file=str(entry), role=str(role))
            try:
                with manifest_context(entry.name):
                    parse_manifest(entry, role, out)
            except OSError as e:
                raise FileParseError.from_cause(str(entry), e) from e

        logger.debug("manifests_loaded", path=str(self.path))
        return out

    def load_or_empty(self) -> tuple[TestCasesMetrics, ManifestError | None]:
        """Load manifests, falling back to empty sets on failure.

        Returns:
            (metrics, error). On failure metrics is ``TestCasesMetrics.empty()``
            and error is the manifest error, so callers can still compute a
            zero coverage outcome.
        """
        try:
            return self.load(), None
        except ManifestError as e:
            return TestCasesMetrics.empty(), e
