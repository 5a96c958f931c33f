"""Shared test fixtures and configuration."""

from typing import Any, Dict, List, Optional, Type

import httpx
import pytest

from wxpay_client import PayConfig

# Reference vector from the provider's signing guide.
KNOWN_PARAMS: Dict[str, Any] = {
    "appid": "wxd930ea5d5a258f4f",
    "mch_id": "10000100",
    "device_info": "1000",
    "body": "test",
    "nonce_str": "ibuaiVcKdpRxkhJA",
}
KNOWN_KEY = "192006250b4c09247ec02edce69f6a2d"
KNOWN_SIGN = "9A0A8659F005D6984697E2CA0A9CF3B7"


class RecordingHandler:
    """Answer every request with a fixed response and keep what was sent."""

    def __init__(self) -> None:
        self.status_code = 200
        self.content = b""
        self.json: Any = None
        self.error: Optional[Type[httpx.RequestError]] = None
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("simulated failure", request=request)
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json)
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def known_params() -> Dict[str, Any]:
    """Return a fresh copy of the reference parameters."""
    return dict(KNOWN_PARAMS)


@pytest.fixture
def pay_config() -> PayConfig:
    """Return a config pointing at test endpoints."""
    return PayConfig(
        app_id="wxd930ea5d5a258f4f",
        mch_id="10000100",
        api_key=KNOWN_KEY,
        unified_order_url="https://pay.test/pay/unifiedorder",
        order_query_url="https://pay.test/pay/orderquery",
        session_url="https://api.test/sns/jscode2session",
        mini_app_id="wxmini0001",
        mini_app_secret="mini-secret",
        timeout_seconds=5.0,
    )


@pytest.fixture
def handler() -> RecordingHandler:
    """Return the request handler behind ``http_client``."""
    return RecordingHandler()


@pytest.fixture
def http_client(handler: RecordingHandler) -> httpx.AsyncClient:
    """Return an ``httpx.AsyncClient`` served by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
