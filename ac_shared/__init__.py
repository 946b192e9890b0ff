"""Shared utilities for Asset Container Contents."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success
from .result import Result
from .time import timer
from .types import CanonicalRecord, EntryType, ErrorCode, Listing

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "timer",
    "ErrorCode",
    "EntryType",
    "CanonicalRecord",
    "Listing",
    "sanitize_error_message",
]
