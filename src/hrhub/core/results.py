from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from typing import Any, Mapping, Optional

from .enums import ErrorKind


@dataclass(frozen=True)
class Result:
    """Outcome of a business operation: ok, or exactly one named error.

    Expected rule failures travel as values of this type instead of
    exceptions; ``context`` carries the figures quoted in ``message``.
    """

    ok: bool
    error: Optional[ErrorKind] = None
    message: str = ""
    context: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, message: str = "", **fields: Any):
        return cls(ok=True, message=message, **fields)

    @classmethod
    def failure(cls, error: ErrorKind, message: str, *, context: Optional[Mapping[str, Any]] = None, **fields: Any):
        return cls(ok=False, error=error, message=message, context=dict(context or {}), **fields)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "error": self.error.value if self.error else None,
            "message": self.message,
            "context": {k: _plain(v) for k, v in self.context.items()},
        }


def _plain(value: Any) -> Any:
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value
