"""
Error types shared by the transport, codec and configuration layers.

These never cross the EthereumClient boundary: the client converts them
into failed RpcOutcome values after logging.
"""

from __future__ import annotations

from typing import Optional


class RpcClientError(RuntimeError):
    exit_code: int = 1


class TransportError(RpcClientError):
    """HTTP round trip failed, or the node answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(RpcClientError):
    """Response body is not syntactically valid JSON."""

    def __init__(self, detail: str, line: int = 0, column: int = 0) -> None:
        super().__init__(detail)
        self.detail = detail
        self.line = line
        self.column = column


class ConfigError(RpcClientError):
    """No usable node endpoint could be resolved."""


__all__ = [
    "RpcClientError",
    "TransportError",
    "ResponseParseError",
    "ConfigError",
]
