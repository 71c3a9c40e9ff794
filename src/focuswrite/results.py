"""Uniform result shape returned across the command boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CommandResult:
    success: bool
    error: str = ""
    canceled: bool = False
    reason: str = ""
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **payload: Any) -> CommandResult:
        return cls(success=True, payload=payload)

    @classmethod
    def failure(cls, error: str, **payload: Any) -> CommandResult:
        return cls(success=False, error=error, payload=payload)

    @classmethod
    def cancelled(cls) -> CommandResult:
        return cls(success=False, canceled=True)

    @classmethod
    def empty(cls) -> CommandResult:
        return cls(success=False, reason="empty")

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, **self.payload}
        result: dict[str, Any] = {"success": False}
        if self.canceled:
            result["canceled"] = True
        if self.reason:
            result["reason"] = self.reason
        if self.error:
            result["error"] = self.error
        result.update(self.payload)
        return result
