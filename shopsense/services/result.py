from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a provider call that reports failure instead of raising.

    ``status_code`` is the last HTTP status seen, if any. ``attempts`` counts
    requests made, so an auth fallback that succeeded on the second header
    shows ``attempts == 2``.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    status_code: Optional[int] = None
    attempts: int = 1

    @classmethod
    def success(cls, value: T, *, status_code: Optional[int] = None, attempts: int = 1) -> "Result[T]":
        return cls(ok=True, value=value, status_code=status_code, attempts=attempts)

    @classmethod
    def failure(
        cls,
        error: str,
        code: str = "unknown",
        *,
        status_code: Optional[int] = None,
        attempts: int = 1,
    ) -> "Result[T]":
        return cls(ok=False, error=error, error_code=code, status_code=status_code, attempts=attempts)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default

    def log_context(self) -> dict:
        return {
            "ok": self.ok,
            "error": self.error,
            "error_code": self.error_code,
            "status_code": self.status_code,
            "attempts": self.attempts,
        }
