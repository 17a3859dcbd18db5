"""
services/retry_policy.py

Bounded-retry wrapper around a wallet client (YayaWalletClient or
MockWalletClient).

- list:        up to N attempts, fixed delay, no timeout race
- search:      up to N attempts, fixed delay, each attempt raced against a timeout
- server_time: up to N attempts, fixed delay, falls back to the local clock

Invalid JSON and malformed payloads are never retried. A 401 is logged as an
authentication problem but retried like any other upstream failure.
"""

import asyncio
import logging
import math
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from yaya_proxy.api.schemas import SearchQuery
from yaya_proxy.api.validators import derive_query_value
from yaya_proxy.config import RetrySettings, Settings
from yaya_proxy.errors import (
    BadUpstreamResponse,
    InvalidJSONResponse,
    UpstreamCallError,
    UpstreamError,
    ValidationError,
)
from yaya_proxy.services.normalizer import ensure_transaction_page

logger = logging.getLogger("yaya_proxy.retry_policy")

LIST_FAILURE_MESSAGE = "Failed to fetch transactions from YaYa API"
SEARCH_FAILURE_MESSAGE = "Failed to search transactions in YaYa API after multiple attempts"
TIMEOUT_MESSAGE = "Request timeout"


class WalletRetryPolicy:
    def __init__(
        self,
        client: Any,
        retry: Optional[RetrySettings] = None,
        upstream_label: str = "YaYa API",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.retry = retry or RetrySettings()
        self.upstream_label = upstream_label
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_settings(cls, client: Any, settings: Settings) -> "WalletRetryPolicy":
        return cls(client, retry=settings.retry, upstream_label=settings.test_api_url)

    # -----------------------
    # Helpers
    # -----------------------
    def _log_failure(self, operation: str, attempt: int, attempts: int, error: UpstreamCallError) -> None:
        logger.error(
            "Error calling %s at %s (attempt %d/%d): status=%s message=%s response=%s",
            operation,
            self.upstream_label,
            attempt,
            attempts,
            error.status,
            error.message,
            (error.body or "No response text")[:500],
        )
        if error.is_unauthorized:
            logger.error(
                "Authentication failed for %s. Please check YAYA_API_KEY and YAYA_API_SECRET.",
                operation,
            )

    async def _run_with_retries(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
        delay: float,
        failure_message: str,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        attempts = max(1, self.retry.attempts)
        last_error: Optional[UpstreamCallError] = None

        for attempt in range(1, attempts + 1):
            try:
                if timeout is None:
                    payload = await call()
                else:
                    # wait_for cancels the losing upstream call
                    payload = await asyncio.wait_for(call(), timeout=timeout)
            except asyncio.TimeoutError:
                last_error = UpstreamCallError(TIMEOUT_MESSAGE)
            except InvalidJSONResponse as e:
                logger.error(
                    "Raw response causing invalid JSON error for %s: %s",
                    operation,
                    (e.body or "")[:500],
                )
                raise BadUpstreamResponse(
                    f"YaYa API returned invalid JSON response for {operation}",
                    diagnostic=e.body,
                ) from None
            except UpstreamCallError as e:
                last_error = e
            else:
                logger.info("%s succeeded on attempt %d/%d", operation, attempt, attempts)
                return ensure_transaction_page(payload, operation)

            self._log_failure(operation, attempt, attempts, last_error)
            if attempt < attempts:
                await self._sleep(delay)

        logger.error("Max retries reached for %s", operation)
        raise UpstreamError(last_error.message or failure_message, status=last_error.status)

    # -----------------------
    # Operations
    # -----------------------
    async def list_transactions(self, page: int) -> Dict[str, Any]:
        logger.info("Fetching transactions page=%s from %s/transaction/find-by-user", page, self.upstream_label)
        return await self._run_with_retries(
            "getTransactions",
            lambda: self.client.list(page),
            delay=self.retry.list_delay,
            failure_message=LIST_FAILURE_MESSAGE,
        )

    async def search_transactions(self, query: Union[SearchQuery, Dict[str, Any]]) -> Dict[str, Any]:
        query_value = derive_query_value(query)
        if not query_value:
            raise ValidationError("Search query is empty. At least one search field must be provided.")

        logger.info(
            "Searching transactions with query value '%s' at %s/transaction/search",
            query_value,
            self.upstream_label,
        )
        return await self._run_with_retries(
            "searchTransactions",
            lambda: self.client.search(query_value),
            delay=self.retry.search_delay,
            failure_message=SEARCH_FAILURE_MESSAGE,
            timeout=self.retry.search_timeout,
        )

    async def server_time(self) -> int:
        """
        Provider clock in epoch milliseconds. Never raises: after the last
        failed attempt the local clock is returned instead.
        """
        attempts = max(1, self.retry.time_attempts)
        for attempt in range(1, attempts + 1):
            try:
                response = await self.client.server_time()
                value = response.get("time") if isinstance(response, dict) else None
                if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                    raise UpstreamCallError(f"Invalid server time format from YaYa API: {response!r}"[:300])
                logger.debug("server_time attempt %d -> %s", attempt, value)
                return int(value)
            except UpstreamCallError as e:
                logger.warning(
                    "Error fetching server time from %s/time (attempt %d/%d): status=%s message=%s",
                    self.upstream_label,
                    attempt,
                    attempts,
                    e.status,
                    e.message,
                )
            except Exception as e:
                logger.warning(
                    "Unexpected error fetching server time from %s/time (attempt %d/%d): %r",
                    self.upstream_label,
                    attempt,
                    attempts,
                    e,
                )
            if attempt < attempts:
                await self._sleep(self.retry.time_delay)

        fallback = int(self._clock() * 1000)
        logger.error("Max retries reached for server_time, falling back to local timestamp %s", fallback)
        return fallback
