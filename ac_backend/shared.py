"""Backend-facing alias for shared utilities."""

from __future__ import annotations

from ac_shared import (
    CanonicalRecord,
    EntryType,
    ErrorCode,
    Listing,
    Result,
    get_logger,
    log_structured,
    log_success,
    sanitize_error_message,
    timer,
)
from ac_shared.types import DIRECTORY_TYPES

__all__ = [
    "CanonicalRecord",
    "DIRECTORY_TYPES",
    "EntryType",
    "ErrorCode",
    "Listing",
    "Result",
    "get_logger",
    "log_structured",
    "log_success",
    "sanitize_error_message",
    "timer",
]
