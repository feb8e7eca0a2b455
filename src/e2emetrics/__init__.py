"""e2e-metrics - test coverage of a CI pipeline against its master plan."""

__version__ = "0.1.0"
