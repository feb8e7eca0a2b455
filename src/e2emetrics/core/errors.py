"""e2e-metrics error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Manifest
- 4xxx: Sync
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003

    # Manifest (3xxx)
    MANIFEST_DIRECTORY_UNREADABLE = 3001
    MANIFEST_NOT_FOUND = 3002
    MANIFEST_PARSE_ERROR = 3003

    # Sync (4xxx)
    SYNC_INVALID_REQUEST = 4001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class E2EMetricsError(Exception):
    """Base error with structured context for outcome records and logs."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'MANIFEST_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(E2EMetricsError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ManifestError(E2EMetricsError):
    """Errors that abort a manifest directory load."""


class DirectoryReadError(ManifestError):
    """Manifest directory is missing or cannot be listed."""

    @classmethod
    def from_os_error(cls, path: str, err: OSError) -> "DirectoryReadError":
        return cls(
            code=ErrorCode.MANIFEST_DIRECTORY_UNREADABLE,
            message=f"Failed to list manifest directory {path!r}: {err}",
            details={"path": path, "reason": str(err)},
        )


class NoManifestsFoundError(ManifestError):
    """Manifest directory exists but holds no entries."""

    @classmethod
    def empty_directory(cls, path: str) -> "NoManifestsFoundError":
        return cls(
            code=ErrorCode.MANIFEST_NOT_FOUND,
            message=f"No config(s) found at {path!r}",
            details={"path": path},
        )


class FileParseError(ManifestError):
    """A recognised manifest could not be read to the end."""

    @classmethod
    def from_cause(cls, path: str, cause: Exception) -> "FileParseError":
        return cls(
            code=ErrorCode.MANIFEST_PARSE_ERROR,
            message=f"Failed to parse {path!r}: {cause}",
            details={"path": path, "reason": str(cause)},
        )


class SyncError(E2EMetricsError):
    """Malformed sync hook request."""

    @classmethod
    def invalid_request(cls, reason: str) -> "SyncError":
        return cls(
            code=ErrorCode.SYNC_INVALID_REQUEST,
            message=f"Failed to sync 'Namespace': {reason}",
            details={"reason": reason},
        )


class InternalError(E2EMetricsError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
