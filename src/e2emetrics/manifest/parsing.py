"""Line rules for the two manifest formats.

Neither manifest is parsed as YAML. Each line is trimmed and only lines
starting with a known prefix carry meaning:

    .gitlab-ci.yml          TCID-DIR-HEALTH-CHECK:    -> actual
                            tcid-dir-health-check:    -> deprecated
    .master-plan.yml        - tcid: TCID-DIR-HEALTH-CHECK  -> desired
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import structlog

from e2emetrics.config.constants import (
    ACTUAL_TEST_CASE_PREFIX,
    DEPRECATED_TEST_CASE_PREFIX,
    DESIRED_TEST_CASE_DELIMITER,
    DESIRED_TEST_CASE_PREFIX,
)
from e2emetrics.manifest.models import ManifestRole, TestCasesMetrics

logger = structlog.get_logger()

LineRule = Callable[[str, TestCasesMetrics], None]


def _strip_trailing_colon(line: str) -> str:
    return line[:-1] if line.endswith(":") else line


def register_actual_line(line: str, out: TestCasesMetrics) -> None:
    """Register one trimmed CI manifest line.

    The actual prefix is checked first so a line is never counted twice.
    """
    if line.startswith(ACTUAL_TEST_CASE_PREFIX):
        tcid = _strip_trailing_colon(line)
        logger.debug("registering_actual_tcid", name=tcid)
        out.actual.add(tcid)
    elif line.startswith(DEPRECATED_TEST_CASE_PREFIX):
        tcid = _strip_trailing_colon(line)
        logger.debug("registering_deprecated_tcid", name=tcid)
        out.deprecated.append(tcid)


def register_desired_line(line: str, out: TestCasesMetrics) -> None:
    """Register one trimmed master plan line.

    Lines that do not split into exactly key and value are skipped.
    """
    if not line.startswith(DESIRED_TEST_CASE_PREFIX):
        return
    words = line.split(DESIRED_TEST_CASE_DELIMITER)
    if len(words) != 2:
        logger.debug("skipping_desired_line", line=line, parts=len(words))
        return
    tcid = words[1].strip()
    logger.debug("registering_desired_tcid", name=tcid)
    out.desired.add(tcid)


LINE_RULES: dict[ManifestRole, LineRule] = {
    ManifestRole.ACTUAL: register_actual_line,
    ManifestRole.DESIRED: register_desired_line,
}


def iter_manifest_lines(path: Path) -> Iterator[str]:
    """Yield trimmed, non-blank lines of a manifest.

    Undecodable bytes are replaced rather than raised; only lines with a
    known ASCII prefix carry meaning. OSError propagates to the caller.
    """
    with path.open(encoding="utf-8", errors="replace") as f:
        for raw in f:
            line = raw.strip()
            if line:
                yield line


def parse_manifest(path: Path, role: ManifestRole, out: TestCasesMetrics) -> None:
    """Apply the line rule for ``role`` to every line of ``path``."""
    rule = LINE_RULES[role]
    for line in iter_manifest_lines(path):
        rule(line, out)
