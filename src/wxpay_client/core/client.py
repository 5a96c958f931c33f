"""
HTTP transport and client for the payment provider endpoints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

from .codec import decode_xml, encode_xml, response_fields
from .config import PayConfig
from .errors import ConfigError, ParseError, TransportError
from .signing import random_str, sign, verify_signature

__all__ = [
    "XML_HEADERS",
    "PayClient",
    "PayResult",
    "get_json",
    "post_xml",
]

logger = logging.getLogger(__name__)

# The body is XML but the provider expects this exact content type.
XML_HEADERS = {
    "Accept": "text/xml",
    "Content-Type": "text/plain;charset=UTF-8",
}

SUCCESS = "SUCCESS"


async def _send(client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.RequestError as exc:
        raise TransportError(f"{method} {url} failed: {exc}") from exc
    if response.status_code >= 400:
        raise TransportError(
            f"Provider responded with {response.status_code}: {response.text}",
            status_code=response.status_code,
        )
    return response


async def post_xml(
    client: httpx.AsyncClient,
    url: str,
    xml_body: str,
    *,
    timeout: float = 30.0,
) -> Dict[str, Any]:
    """
    POST ``xml_body`` to ``url`` and decode the XML answer.

    Raises :class:`TransportError` if the server cannot be reached or returns
    an error status, and :class:`ParseError` if the body is not XML.
    """
    logger.info("Submitting XML request to %s", url)
    response = await _send(
        client,
        "POST",
        url,
        content=xml_body.encode("utf-8"),
        headers=XML_HEADERS,
        timeout=timeout,
    )
    return decode_xml(response.content)


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: Mapping[str, str],
    *,
    timeout: float = 30.0,
) -> Dict[str, Any]:
    logger.info("Submitting GET request to %s", url)
    response = await _send(
        client, "GET", url, params=dict(params), timeout=timeout
    )
    try:
        return response.json()
    except ValueError as exc:
        raise ParseError(f"Failed to parse JSON from {url}: {response.text}") from exc


@dataclass(frozen=True)
class PayResult:
    """
    Outcome of a pay API call.

    The provider reports two layers: ``return_code`` says whether the request
    was accepted at the protocol level, ``result_code`` whether the business
    operation succeeded. Only check the second when the first is SUCCESS.
    """

    return_code: Optional[str]
    return_msg: Optional[str]
    result_code: Optional[str]
    err_code: Optional[str]
    err_code_des: Optional[str]
    raw: Dict[str, Any]

    @property
    def communication_ok(self) -> bool:
        return self.return_code == SUCCESS

    @property
    def success(self) -> bool:
        return self.communication_ok and self.result_code == SUCCESS

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> "PayResult":
        fields = response_fields(response)
        return cls(
            return_code=fields.get("return_code"),
            return_msg=fields.get("return_msg"),
            result_code=fields.get("result_code"),
            err_code=fields.get("err_code"),
            err_code_des=fields.get("err_code_des"),
            raw=fields,
        )


class PayClient:
    """
    Thin convenience wrapper around the provider endpoints.
    """

    def __init__(
        self,
        config: PayConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "PayClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def sign(self, params: Mapping[str, Any]) -> str:
        return sign(params, self.config.api_key)

    def build_request(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Return a signed copy of ``params``.

        ``appid``, ``mch_id`` and ``nonce_str`` are filled from the
        configuration when the caller leaves them out.
        """
        request = dict(params)
        request.setdefault("appid", self.config.app_id)
        request.setdefault("mch_id", self.config.mch_id)
        if not request.get("nonce_str"):
            request["nonce_str"] = random_str()
        request.pop("sign", None)
        request["sign"] = self.sign(request)
        return request

    def build_xml(self, params: Mapping[str, Any]) -> str:
        return encode_xml(self.build_request(params))

    def verify_response(self, response: Mapping[str, Any]) -> bool:
        """
        Check the signature of a decoded response or notification.
        """
        return verify_signature(response_fields(response), self.config.api_key)

    async def post(self, url: str, xml_body: str) -> Dict[str, Any]:
        return await post_xml(
            self._get_client(), url, xml_body, timeout=self.config.timeout_seconds
        )

    async def unified_order(self, xml_body: str) -> Dict[str, Any]:
        return await self.post(self.config.unified_order_url, xml_body)

    async def order_query(self, xml_body: str) -> Dict[str, Any]:
        return await self.post(self.config.order_query_url, xml_body)

    async def code_to_session(self, code: str) -> Dict[str, Any]:
        """
        Exchange a mini program login ``code`` for ``openid``/``session_key``.
        """
        if not self.config.mini_app_secret:
            raise ConfigError("WXPAY_MINI_APP_SECRET is required for code_to_session")
        params = {
            "appid": self.config.mini_app_id or self.config.app_id,
            "secret": self.config.mini_app_secret,
            "js_code": code,
            "grant_type": "authorization_code",
        }
        return await get_json(
            self._get_client(),
            self.config.session_url,
            params,
            timeout=self.config.timeout_seconds,
        )

    async def create_order(self, params: Mapping[str, Any]) -> PayResult:
        """Sign ``params`` and place a unified order."""
        response = await self.unified_order(self.build_xml(params))
        return PayResult.from_response(response)

    async def query_order(self, params: Mapping[str, Any]) -> PayResult:
        """Sign ``params`` (``out_trade_no`` or ``transaction_id``) and query it."""
        response = await self.order_query(self.build_xml(params))
        return PayResult.from_response(response)
