# src/yaya_proxy/clients/yaya_client.py
"""
YaYa Wallet REST client (httpx).

Exposes the three operations the proxy consumes:
  - list(page)         GET  {path}/transaction/find-by-user?p=<page>   (signed)
  - search(query)      POST {path}/transaction/search {"query": ...}    (signed)
  - server_time()      GET  {path}/time

Signed requests carry YAYA-API-KEY, YAYA-API-TIMESTAMP and YAYA-API-SIGN,
where the signature is base64(HMAC-SHA256(secret, timestamp + METHOD + endpoint + body)).

Errors are raised as UpstreamCallError / InvalidJSONResponse; retrying is
the caller's business (see services/retry_policy.py).
"""

import base64
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import urlsplit

import httpx

from yaya_proxy.config import Settings
from yaya_proxy.errors import InvalidJSONResponse, UpstreamCallError

logger = logging.getLogger("yaya_proxy.yaya_client")

TimestampSource = Callable[[], Awaitable[int]]


async def local_timestamp() -> int:
    return int(time.time() * 1000)


def sign_request(secret: str, timestamp: int, method: str, endpoint: str, body: str = "") -> str:
    pre_hash = f"{timestamp}{method.upper()}{endpoint}{body}"
    digest = hmac.new(secret.encode("utf-8"), pre_hash.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


class YayaWalletClient:
    """
    HTTP client for the YaYa Wallet API.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        timestamp_source: Optional[TimestampSource] = None,
    ):
        self.settings = settings
        self.base = settings.api_base
        self.endpoint_prefix = urlsplit(self.base).path.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=settings.request_timeout)
        # replaced with WalletRetryPolicy.server_time once the policy exists
        self.timestamp_source: TimestampSource = timestamp_source or local_timestamp

    async def close(self):
        try:
            await self._client.aclose()
        except Exception:
            logger.exception("Error closing httpx client")

    async def _signed_headers(self, method: str, endpoint: str, body: str) -> Dict[str, str]:
        timestamp = int(await self.timestamp_source())
        return {
            "Content-Type": "application/json",
            "YAYA-API-KEY": self.settings.api_key,
            "YAYA-API-TIMESTAMP": str(timestamp),
            "YAYA-API-SIGN": sign_request(self.settings.api_secret, timestamp, method, endpoint, body),
        }

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None, signed: bool = True) -> Any:
        endpoint = f"{self.endpoint_prefix}{path}"
        url = f"{self.base}{path}"
        body = json.dumps(payload, separators=(",", ":")) if payload is not None else ""
        headers = await self._signed_headers(method, endpoint, body) if signed else {}

        try:
            resp = await self._client.request(method, url, content=body or None, headers=headers)
        except httpx.RequestError as e:
            logger.warning("YaYa %s %s transport error: %s", method, url, e)
            raise UpstreamCallError(str(e) or e.__class__.__name__) from e

        logger.info("YaYa %s %s -> %s", method, url, resp.status_code)
        if resp.status_code >= 400:
            raise UpstreamCallError(
                f"Request failed with status {resp.status_code} ({resp.reason_phrase})",
                status=resp.status_code,
                body=resp.text[:500],
            )
        try:
            return resp.json()
        except ValueError:
            raise InvalidJSONResponse(resp.text, status=resp.status_code) from None

    async def list(self, page: int) -> Any:
        return await self._request("GET", f"/transaction/find-by-user?p={page}")

    async def search(self, query: str) -> Any:
        return await self._request("POST", "/transaction/search", {"query": query})

    async def server_time(self) -> Any:
        return await self._request("GET", "/time", signed=False)
