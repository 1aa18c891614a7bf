"""qxlens error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Metadata (compiled class records)
- 4xxx: Class hierarchy

Expected misses during analysis (unknown names, unparseable snippets,
missing documentation) are NOT errors: the public query functions return
``None`` for them. These types cover the failures worth reporting.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Metadata (3xxx)
    METADATA_IO_FAILURE = 3001
    METADATA_INVALID_RECORD = 3002

    # Hierarchy (4xxx)
    CYCLIC_HIERARCHY = 4001


@dataclass(frozen=True, slots=True)
class QxLensError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CYCLIC_HIERARCHY')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(QxLensError):
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


class MetadataError(QxLensError):
    """A compiled metadata record could not be read or understood."""

    @classmethod
    def io_failure(cls, path: str, reason: str) -> "MetadataError":
        return cls(
            code=ErrorCode.METADATA_IO_FAILURE,
            message=f"Failed to read metadata file {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_record(cls, path: str, reason: str) -> "MetadataError":
        return cls(
            code=ErrorCode.METADATA_INVALID_RECORD,
            message=f"Invalid metadata record in {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class CyclicHierarchyError(QxLensError):
    """The superclass chain of a class revisits a class."""

    @classmethod
    def from_chain(cls, chain: list[str]) -> "CyclicHierarchyError":
        return cls(
            code=ErrorCode.CYCLIC_HIERARCHY,
            message=f"Cyclic class hierarchy: {' -> '.join(chain)}",
            details={"chain": list(chain)},
        )
