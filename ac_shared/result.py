"""
Result pattern for expected outcomes that are not failures.

`Result.Err(ErrorCode.NOT_FOUND, ...)` is the explicit "absent" variant:
a path that vanished is an ordinary outcome, while real I/O failures keep
propagating as exceptions.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from .types import ErrorCode

T = TypeVar("T")

@dataclass
class Result(Generic[T]):
    """
    Result pattern for safe outcome handling.

    Usage:
        def lookup(path: str) -> Result[dict]:
            if not driver.has(path):
                return Result.Err(ErrorCode.NOT_FOUND, f"Path not found: {path}")
            return Result.Ok({"path": path})
    """
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: str = "OK"
    meta: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def Ok(data: T, **meta: Any) -> "Result[T]":
        """Create a successful result with data and optional metadata."""
        return Result(ok=True, data=data, code="OK", meta=meta)

    @staticmethod
    def Err(code: ErrorCode | str | Enum, error: str, **meta: Any) -> "Result[T]":
        """Create an error result with code, message, and optional metadata."""
        code_value = code.value if isinstance(code, Enum) else code
        return Result(ok=False, error=error, code=str(code_value), meta=meta)

    @property
    def is_absent(self) -> bool:
        """True when this result reports a missing path."""
        return not self.ok and self.code == ErrorCode.NOT_FOUND.value

    def unwrap(self) -> T:
        """Get data or raise ValueError if error."""
        if self.ok and self.data is not None:
            return self.data
        raise ValueError(f"[{self.code}] {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Get data or return default if error."""
        return self.data if (self.ok and self.data is not None) else default
