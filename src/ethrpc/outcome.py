from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    PARSE = "parse"
    NODE_ERROR = "node_error"
    MISSING_RESULT = "missing_result"


@dataclass(frozen=True)
class RpcFailure:
    """
    Why an RPC call produced no value.

    Attributes:
        kind: Failure category
        message: Human-readable reason (node message for NODE_ERROR)
        code: Node error code, NODE_ERROR only
        status_code: HTTP status, TRANSPORT only and only for non-2xx replies
    """
    kind: FailureKind
    message: str
    code: Optional[int] = None
    status_code: Optional[int] = None


@dataclass(frozen=True)
class RpcOutcome:
    """Result of one RPC call: a value, or a failure, never both."""

    method: str
    value: Any = None
    failure: Optional[RpcFailure] = None

    @classmethod
    def success(cls, method: str, value: Any) -> "RpcOutcome":
        return cls(method=method, value=value)

    @classmethod
    def failed(
        cls,
        method: str,
        kind: FailureKind,
        message: str,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
    ) -> "RpcOutcome":
        return cls(
            method=method,
            failure=RpcFailure(kind=kind, message=message, code=code, status_code=status_code),
        )

    @property
    def ok(self) -> bool:
        return self.failure is None

    def value_or_none(self) -> Any:
        return self.value if self.failure is None else None

    def map(self, fn: Callable[[Any], Any]) -> "RpcOutcome":
        if self.failure is not None:
            return self
        return RpcOutcome.success(self.method, fn(self.value))


__all__ = ["FailureKind", "RpcFailure", "RpcOutcome"]
