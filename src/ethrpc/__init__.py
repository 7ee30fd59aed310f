__all__ = [
    # Client
    "EthereumClient",
    "normalize_log_filter",
    # Outcomes
    "FailureKind",
    "RpcFailure",
    "RpcOutcome",
    # Codec
    "RpcRequest",
    "RpcResponse",
    "encode_request",
    "decode_response",
    # Projection
    "JsonValue",
    "project_to_string",
    # Transport
    "HttpTransport",
    "Transport",
    # Config
    "NodeConfig",
    "load_node_config",
    "resolve_node_url",
    # Errors
    "RpcClientError",
    "TransportError",
    "ResponseParseError",
    "ConfigError",
]

from .client import EthereumClient, normalize_log_filter
from .codec import RpcRequest, RpcResponse, decode_response, encode_request
from .config import NodeConfig, load_node_config, resolve_node_url
from .errors import ConfigError, ResponseParseError, RpcClientError, TransportError
from .outcome import FailureKind, RpcFailure, RpcOutcome
from .projection import JsonValue, project_to_string
from .transport import HttpTransport, Transport
