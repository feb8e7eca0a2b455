"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides manifest directory and metrics sink fixtures.
"""

import sys
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local e2emetrics package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from e2emetrics.config.models import E2EMetricsConfig  # noqa: E402

TESTDATA_DIR = Path(__file__).parent / "manifest" / "testdata"


class RecordingMetricsSink:
    """MetricsSink that keeps every call for assertions."""

    def __init__(self) -> None:
        self.counters: list[tuple[str, dict[str, str]]] = []
        self.gauges: list[tuple[str, dict[str, str], float]] = []
        self.observations: list[tuple[str, dict[str, str], float]] = []

    def increment_counter(self, name: str, labels: Mapping[str, str]) -> None:
        self.counters.append((name, dict(labels)))

    def set_gauge(self, name: str, labels: Mapping[str, str], value: float) -> None:
        self.gauges.append((name, dict(labels), value))

    def observe(self, name: str, labels: Mapping[str, str], value: float) -> None:
        self.observations.append((name, dict(labels), value))


@pytest.fixture
def sink() -> RecordingMetricsSink:
    return RecordingMetricsSink()


@pytest.fixture
def testdata_dir() -> Path:
    """Checked-in manifest directory with both manifests and a stray file."""
    return TESTDATA_DIR


@pytest.fixture
def write_manifests(tmp_path: Path) -> Callable[..., Path]:
    """Write a manifest directory and return its path.

    Each id in ``desired`` becomes a ``- tcid: <id>`` line of the master plan
    and each id in ``actual`` becomes a ``<id>:`` job of the CI manifest.
    """

    def _write(
        desired: list[str] | None = None,
        actual: list[str] | None = None,
        *,
        desired_text: str | None = None,
        actual_text: str | None = None,
    ) -> Path:
        manifest_dir = tmp_path / "manifests"
        manifest_dir.mkdir(exist_ok=True)
        if desired is not None or desired_text is not None:
            if desired_text is None:
                desired_text = "tests:\n" + "".join(f"  - tcid: {t}\n" for t in desired or [])
            (manifest_dir / ".master-plan.yml").write_text(desired_text)
        if actual is not None or actual_text is not None:
            if actual_text is None:
                actual_text = "".join(
                    f"{t}:\n  stage: test\n  script: ./run.sh\n" for t in actual or []
                )
            (manifest_dir / ".gitlab-ci.yml").write_text(actual_text)
        return manifest_dir

    return _write


@pytest.fixture
def make_config() -> Callable[..., E2EMetricsConfig]:
    """Build a config pointing at a manifest directory."""

    def _make(path: Path, **coverage: str) -> E2EMetricsConfig:
        return E2EMetricsConfig.model_validate(
            {"manifests": {"path": str(path)}, "coverage": coverage}
        )

    return _make
