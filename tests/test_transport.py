"""Unit tests for HttpTransport, using httpx.MockTransport (no network)."""

from __future__ import annotations

import json
import logging
import ssl

import httpx
import pytest

from ethrpc.errors import TransportError
from ethrpc.transport import DEFAULT_TIMEOUT, HttpTransport, shared_ssl_context

NODE_URL = "http://localhost:8545"
SUCCESS_BODY = '{"jsonrpc":"2.0","id":1,"result":"0x5d5f"}'


def make_transport(handler, **kwargs) -> HttpTransport:
    return HttpTransport(transport=httpx.MockTransport(handler), **kwargs)


class TestPost:
    """Tests for HttpTransport.post."""

    def test_returns_body(self) -> None:
        transport = make_transport(lambda request: httpx.Response(200, text=SUCCESS_BODY))
        assert transport.post(NODE_URL, "{}") == SUCCESS_BODY

    def test_sends_json_post(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=SUCCESS_BODY)

        body = '{"jsonrpc":"2.0","method":"eth_blockNumber","params":[],"id":1}'
        make_transport(handler).post(NODE_URL, body)

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert (request.url.host, request.url.port) == ("localhost", 8545)
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == json.loads(body)

    def test_headers_do_not_leak_between_calls(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=SUCCESS_BODY)

        transport = make_transport(handler)
        transport.post(NODE_URL, '{"a":1}')
        transport.post("http://other:8545", '{"b":2}')

        assert seen[1].content == b'{"b":2}'
        assert seen[1].url.host == "other"
        assert seen[1].headers["Content-Length"] == str(len(b'{"b":2}'))

    @pytest.mark.parametrize("status", [300, 404, 500, 503])
    def test_non_2xx_is_failure_even_with_success_body(
        self, status: int, caplog: pytest.LogCaptureFixture
    ) -> None:
        transport = make_transport(lambda request: httpx.Response(status, text=SUCCESS_BODY))
        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransportError) as exc_info:
                transport.post(NODE_URL, "{}")
        assert exc_info.value.status_code == status
        assert str(status) in caplog.text

    @pytest.mark.parametrize("status", [200, 201, 202, 299])
    def test_2xx_is_success(self, status: int) -> None:
        transport = make_transport(lambda request: httpx.Response(status, text="ok"))
        assert transport.post(NODE_URL, "{}") == "ok"

    def test_network_error(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_transport(handler)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransportError) as exc_info:
                transport.post(NODE_URL, "{}")
        assert exc_info.value.status_code is None
        assert "connection refused" in caplog.text

    def test_timeout_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError):
            make_transport(handler).post(NODE_URL, "{}")

    def test_invalid_url(self, caplog: pytest.LogCaptureFixture) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=SUCCESS_BODY)

        transport = make_transport(handler)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransportError) as exc_info:
                transport.post("http://[::1", "{}")
        assert exc_info.value.status_code is None
        assert "HTTP error" in caplog.text
        assert seen == []

    def test_closed_transport(self, caplog: pytest.LogCaptureFixture) -> None:
        transport = make_transport(lambda request: httpx.Response(200, text=SUCCESS_BODY))
        transport.close()
        assert not transport.is_open
        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransportError):
                transport.post(NODE_URL, "{}")
        assert "not initialized" in caplog.text

    def test_uses_injected_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        custom = logging.getLogger("ethrpc.tests.transport")
        transport = make_transport(
            lambda request: httpx.Response(500, text=""), logger=custom
        )
        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransportError):
                transport.post(NODE_URL, "{}")
        assert [r.name for r in caplog.records] == ["ethrpc.tests.transport"]


class TestLifecycle:
    def test_default_timeout(self) -> None:
        transport = HttpTransport()
        try:
            assert transport.timeout == DEFAULT_TIMEOUT == 30.0
            assert transport.is_open
        finally:
            transport.close()

    def test_context_manager_closes(self) -> None:
        with make_transport(lambda request: httpx.Response(200)) as transport:
            assert transport.is_open
        assert not transport.is_open

    def test_close_twice(self) -> None:
        transport = make_transport(lambda request: httpx.Response(200))
        transport.close()
        transport.close()
        assert not transport.is_open


class TestSharedSslContext:
    def test_built_once(self) -> None:
        assert shared_ssl_context() is shared_ssl_context()

    def test_verifies_certificates(self) -> None:
        context = shared_ssl_context()
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True
