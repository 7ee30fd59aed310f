"""
JSON-RPC Client for Ethereum-compatible nodes.

Each public operation is a thin binding over one RPC method: it builds
the positional params the method expects and runs them through a shared
execution path that classifies the response envelope. Failures never
raise; they are logged and come back as None (or as a failed RpcOutcome
from ``execute``).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from .codec import DEFAULT_REQUEST_ID, decode_response, encode_request
from .errors import ResponseParseError, TransportError
from .outcome import FailureKind, RpcOutcome
from .projection import JsonValue, project_to_string
from .transport import DEFAULT_TIMEOUT, HttpTransport, Transport

LogFilter = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]


def normalize_log_filter(filter_params: LogFilter) -> list[Any]:
    """eth_getLogs params: a list of filters as-is, a single filter wrapped."""
    if isinstance(filter_params, (list, tuple)):
        return list(filter_params)
    return [filter_params]


class EthereumClient:
    """
    Client bound to one node endpoint.

    Not safe for concurrent use: give each thread its own instance.

    Args:
        node_url: JSON-RPC endpoint (e.g., "http://localhost:8545")
        transport: Anything with ``post(url, body) -> str``. When omitted the
            client creates an HttpTransport and closes it in ``close()``.
        logger: Failure sink (default: this module's logger)
        request_id: Envelope id sent with every request
        timeout: Timeout for the default HttpTransport
    """

    def __init__(
        self,
        node_url: str,
        transport: Optional[Transport] = None,
        logger: Optional[logging.Logger] = None,
        request_id: int = DEFAULT_REQUEST_ID,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not node_url:
            raise ValueError("node_url must be a non-empty string")

        self.node_url = node_url
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.request_id = request_id
        self._owns_transport = transport is None
        self.transport: Transport = (
            transport if transport is not None
            else HttpTransport(timeout=timeout, logger=self.logger)
        )

    def close(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpTransport):
            self.transport.close()

    def __enter__(self) -> "EthereumClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ============ Execution Path ============

    def execute_command(self, method: str, params: Sequence[Any] = ()) -> Optional[str]:
        """
        Send a request and return the raw response body.

        The envelope is not inspected.

        Returns:
            Response text, or None if the transport failed
        """
        body = encode_request(method, params, request_id=self.request_id)
        try:
            return self.transport.post(self.node_url, body)
        except TransportError:
            self.logger.error(f"Failed to get response for method: {method}")
            return None

    def parse_response(self, response: str) -> Optional[dict[str, Any]]:
        """
        Parse a raw response body into its envelope object.

        Returns:
            The envelope dict, or None if the body is not a JSON object
        """
        try:
            decoded = decode_response(response)
        except ResponseParseError as exc:
            self.logger.error(f"Error parsing response: {exc.detail}")
            return None
        if not isinstance(decoded.payload, dict):
            self.logger.error("Error parsing response: envelope is not a JSON object")
            return None
        return decoded.payload

    def execute(self, method: str, params: Sequence[Any] = ()) -> RpcOutcome:
        """
        Run one RPC call and classify the reply.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: Positional RPC parameters

        Returns:
            Successful outcome holding the ``result`` value, or a failed
            outcome tagged with the failure kind
        """
        body = encode_request(method, params, request_id=self.request_id)

        try:
            raw = self.transport.post(self.node_url, body)
        except TransportError as exc:
            # The transport logged the cause; this line names the method.
            self.logger.error(f"Failed to get response for method: {method}")
            return RpcOutcome.failed(
                method, FailureKind.TRANSPORT, str(exc), status_code=exc.status_code
            )

        try:
            response = decode_response(raw)
        except ResponseParseError as exc:
            self.logger.error(f"Error parsing response: {exc.detail}")
            return RpcOutcome.failed(method, FailureKind.PARSE, exc.detail)

        if response.has_error:
            message = response.error_message
            self.logger.error(f"RPC method '{method}' failed: {message}")
            return RpcOutcome.failed(
                method, FailureKind.NODE_ERROR, message, code=response.error_code
            )

        if not response.has_result:
            self.logger.error(f"RPC method '{method}' returned no 'result' field.")
            return RpcOutcome.failed(
                method, FailureKind.MISSING_RESULT, "no 'result' field in response"
            )

        return RpcOutcome.success(method, response.result)

    def execute_and_extract(self, method: str, params: Sequence[Any] = ()) -> Optional[JsonValue]:
        """Run ``method`` and return its result, or None on any failure."""
        return self.execute(method, params).value_or_none()

    def execute_and_extract_string(self, method: str, params: Sequence[Any] = ()) -> Optional[str]:
        """Run ``method`` and return its result projected to a string."""
        outcome = self.execute(method, params)
        if not outcome.ok:
            return None
        return project_to_string(outcome.value)

    # ============ Ethereum RPC Methods ============

    def get_block_number(self) -> Optional[str]:
        """Latest block number, hex encoded."""
        return self.execute_and_extract_string("eth_blockNumber", [])

    def get_block_by_number(
        self, block_number: str, full_transactions: bool = False
    ) -> Optional[JsonValue]:
        """
        Get a block by number.

        Args:
            block_number: Hex block number or block tag
            full_transactions: Return full transaction objects instead of hashes

        Returns:
            Block object (None also when the node knows no such block)
        """
        return self.execute_and_extract(
            "eth_getBlockByNumber", [block_number, full_transactions]
        )

    def get_block_by_hash(
        self, block_hash: str, full_transactions: bool = False
    ) -> Optional[JsonValue]:
        return self.execute_and_extract(
            "eth_getBlockByHash", [block_hash, full_transactions]
        )

    def get_transaction_by_hash(self, tx_hash: str) -> Optional[JsonValue]:
        return self.execute_and_extract("eth_getTransactionByHash", [tx_hash])

    def estimate_gas(self, sender: str, to: str, value: str) -> Optional[str]:
        """
        Estimate gas for a plain value transfer.

        Args:
            sender: 0x-prefixed "from" address
            to: 0x-prefixed recipient address
            value: Hex encoded amount in wei

        Returns:
            Estimated gas, hex encoded
        """
        tx = {"from": sender, "to": to, "value": value}
        return self.execute_and_extract_string("eth_estimateGas", [tx])

    def get_gas_price(self) -> Optional[str]:
        return self.execute_and_extract_string("eth_gasPrice", [])

    def send_raw_transaction(self, raw_tx: str) -> Optional[str]:
        """
        Broadcast a signed raw transaction.

        Args:
            raw_tx: 0x-prefixed hex encoded signed transaction

        Returns:
            Transaction hash
        """
        return self.execute_and_extract_string("eth_sendRawTransaction", [raw_tx])

    def get_logs(self, filter_params: LogFilter) -> Optional[JsonValue]:
        """
        Fetch logs matching a filter.

        A single filter object is wrapped into a one-element params array;
        a list of filters is sent unchanged.
        """
        return self.execute_and_extract("eth_getLogs", normalize_log_filter(filter_params))

    def get_transaction_receipt(self, tx_hash: str) -> Optional[JsonValue]:
        return self.execute_and_extract("eth_getTransactionReceipt", [tx_hash])

    def get_transaction_count(self, address: str, block_tag: str = "latest") -> Optional[str]:
        """
        Get the transaction count (nonce) of an address.

        Args:
            address: 0x-prefixed address
            block_tag: "latest", "pending", or a hex block number

        Returns:
            Nonce, hex encoded
        """
        return self.execute_and_extract_string(
            "eth_getTransactionCount", [address, block_tag]
        )

    def get_chain_id(self) -> Optional[str]:
        return self.execute_and_extract_string("eth_chainId", [])

    def get_network_version(self) -> Optional[str]:
        return self.execute_and_extract_string("net_version", [])

    def get_syncing_status(self) -> Optional[JsonValue]:
        """``False`` when in sync, otherwise the node's progress object."""
        return self.execute_and_extract("eth_syncing", [])


__all__ = ["EthereumClient", "LogFilter", "normalize_log_filter"]
