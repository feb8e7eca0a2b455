"""Test case sets extracted from the manifests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class ManifestRole(StrEnum):
    """Which side of the coverage calculation a manifest feeds."""

    DESIRED = "desired"
    ACTUAL = "actual"


@dataclass(slots=True)
class TestCasesMetrics:
    """Test case ids found in one manifest directory.

    ``desired`` and ``actual`` are membership sets; ``deprecated`` keeps
    discovery order and duplicates.
    """

    __test__ = False  # not a pytest class

    desired: set[str] = field(default_factory=set)
    actual: set[str] = field(default_factory=set)
    deprecated: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> TestCasesMetrics:
        return cls()
