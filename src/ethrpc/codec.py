"""
JSON-RPC 2.0 envelope codec.

Builds request envelopes and classifies response envelopes. Parsing never
inspects method-specific result shapes; that is the client's job.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .errors import ResponseParseError
from .projection import JsonValue

JSONRPC_VERSION = "2.0"
DEFAULT_REQUEST_ID = 1
UNKNOWN_RPC_ERROR = "Unknown RPC error"


@dataclass(frozen=True)
class RpcRequest:
    method: str
    params: list[Any] = field(default_factory=list)
    id: int = DEFAULT_REQUEST_ID

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": JSONRPC_VERSION,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RpcResponse:
    """
    Decoded response envelope.

    ``payload`` is whatever JSON value the node sent. A payload that is not
    an object is kept as-is and classified as carrying neither ``result``
    nor ``error``.
    """

    payload: Any

    def _envelope(self) -> dict[str, Any]:
        return self.payload if isinstance(self.payload, dict) else {}

    @property
    def has_error(self) -> bool:
        return "error" in self._envelope()

    @property
    def has_result(self) -> bool:
        return "result" in self._envelope()

    @property
    def result(self) -> JsonValue:
        return self._envelope().get("result")

    @property
    def error(self) -> Any:
        return self._envelope().get("error")

    @property
    def error_message(self) -> str:
        error = self.error
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
        return UNKNOWN_RPC_ERROR

    @property
    def error_code(self) -> Optional[int]:
        error = self.error
        if isinstance(error, dict):
            code = error.get("code")
            if isinstance(code, int) and not isinstance(code, bool):
                return code
        return None


def encode_request(
    method: str,
    params: Sequence[Any] = (),
    request_id: int = DEFAULT_REQUEST_ID,
) -> str:
    """
    Serialize a JSON-RPC 2.0 request.

    Args:
        method: RPC method name (e.g., "eth_blockNumber")
        params: Positional parameters, sent in order
        request_id: Envelope id

    Returns:
        Compact JSON text of the request envelope
    """
    return RpcRequest(method=method, params=list(params), id=request_id).to_json()


def decode_response(raw: str) -> RpcResponse:
    """
    Parse a raw response body into an envelope.

    Raises:
        ResponseParseError: If the body is not valid JSON, or is too large
            or too deeply nested for the JSON decoder
    """
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError is a ValueError; the others carry no position.
        raise ResponseParseError(
            str(exc),
            line=getattr(exc, "lineno", 0),
            column=getattr(exc, "colno", 0),
        ) from exc
    return RpcResponse(payload)


__all__ = [
    "JSONRPC_VERSION",
    "DEFAULT_REQUEST_ID",
    "UNKNOWN_RPC_ERROR",
    "RpcRequest",
    "RpcResponse",
    "encode_request",
    "decode_response",
]
