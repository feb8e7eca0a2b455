"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are manifest line formats and record identity values.

For configurable values, see models.py (ManifestConfig, CoverageConfig, etc.).
"""

# =============================================================================
# Manifest Line Formats
# =============================================================================
# Only lines carrying one of these prefixes mean anything; the rest of the
# YAML structure is ignored.

ACTUAL_TEST_CASE_PREFIX = "TCID-"
"""Prefix of every test case job name in the CI manifest."""

DEPRECATED_TEST_CASE_PREFIX = "tcid-"
"""Legacy lowercase prefix, reported as a deprecation rather than a test."""

DESIRED_TEST_CASE_PREFIX = "- tcid:"
"""Prefix of a planned test case entry, e.g. ``- tcid: miot1x``."""

DESIRED_TEST_CASE_DELIMITER = ": "
"""Separates the key from the planned test case id."""

MANIFEST_SUFFIXES = (".yml", ".yaml")
"""Only files with these suffixes are considered manifests."""

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_MANIFEST_PATH = "/etc/config/e2e-metrics/"
DEFAULT_DESIRED_FILE_NAME = ".master-plan.yml"
DEFAULT_ACTUAL_FILE_NAME = ".gitlab-ci.yml"
DEFAULT_CONTROLLER_NAME = "pipeline-coverage-controller"

# =============================================================================
# PipelineCoverage Record Identity
# =============================================================================

E2E_METRICS_GROUP = "e2e-metrics.mayadata.io"
API_VERSION = f"{E2E_METRICS_GROUP}/v1alpha1"
KIND_PIPELINE_COVERAGE = "PipelineCoverage"

# =============================================================================
# Metrics
# =============================================================================

METRICS_NAMESPACE = "e2emet"
"""Prefix for all metric names. Not a Kubernetes namespace."""
