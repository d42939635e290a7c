"""Result value returned by the extraction pipeline."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SubtitleResult:
    """
    Either a successful extraction carrying the tool's response body, or a
    failure carrying a single error string. Never both.

    Build instances with ``SubtitleResult.ok`` / ``SubtitleResult.fail``.
    """

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.success and self.error is not None:
            raise ValueError("successful result cannot carry an error")
        if not self.success and self.data is not None:
            raise ValueError("failed result cannot carry data")

    @classmethod
    def ok(cls, data: Dict[str, Any]) -> 'SubtitleResult':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> 'SubtitleResult':
        return cls(success=False, error=error)
