"""Manifest loading: test case ids from the master plan and CI pipeline files."""

from e2emetrics.manifest.loader import ManifestLoader
from e2emetrics.manifest.models import ManifestRole, TestCasesMetrics
from e2emetrics.manifest.parsing import parse_manifest

__all__ = ["ManifestLoader", "ManifestRole", "TestCasesMetrics", "parse_manifest"]
