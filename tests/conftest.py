from __future__ import annotations

import json
import logging
from typing import Any, Optional

import pytest

from ethrpc.client import EthereumClient
from ethrpc.errors import TransportError

NODE_URL = "http://localhost:8545"


class StubTransport:
    """Records every POST and answers with a canned body (or failure)."""

    def __init__(self, body: str = "", error: Optional[TransportError] = None) -> None:
        self.body = body
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def post(self, url: str, body: str) -> str:
        self.calls.append((url, body))
        if self.error is not None:
            raise self.error
        return self.body

    def reply(self, payload: Any) -> None:
        self.body = json.dumps(payload)

    @property
    def last_request(self) -> dict[str, Any]:
        return json.loads(self.calls[-1][1])


@pytest.fixture()
def stub() -> StubTransport:
    return StubTransport()


@pytest.fixture()
def rpc_logger() -> logging.Logger:
    return logging.getLogger("ethrpc.tests")


@pytest.fixture()
def client(stub: StubTransport, rpc_logger: logging.Logger) -> EthereumClient:
    return EthereumClient(NODE_URL, transport=stub, logger=rpc_logger)
