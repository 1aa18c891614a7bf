"""Core module exports."""

from qxlens.core.errors import (
    ConfigError,
    CyclicHierarchyError,
    ErrorCode,
    MetadataError,
    QxLensError,
)
from qxlens.core.logging import (
    clear_request_id,
    configure_logging,
    get_request_id,
    set_request_id,
    with_request_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CyclicHierarchyError",
    "ErrorCode",
    "MetadataError",
    "QxLensError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_request_id",
    "set_request_id",
    "with_request_id",
]
