"""
Shared types, enums, and constants.
"""
from enum import Enum
from typing import Any, Final

# One normalized file or directory entry. Kept as a plain dict so listings
# can go through any backing store (JSON, pickle) unchanged.
CanonicalRecord = dict[str, Any]

# Ordered path -> record mapping for one container.
Listing = dict[str, CanonicalRecord]


class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    STORE_ERROR = "STORE_ERROR"


class EntryType(str, Enum):
    """Canonical record types."""

    FILE = "file"
    DIRECTORY = "dir"


# Driver discriminators that mean "directory"
DIRECTORY_TYPES: Final[frozenset[str]] = frozenset({"dir", "directory"})
