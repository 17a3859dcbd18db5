"""
services/normalizer.py

Checks that an upstream payload looks like a TransactionPage before it is
handed back to the frontend. Values are never rewritten: the object that
comes in is the object that goes out.
"""

import json
import logging
from typing import Any, Dict, Mapping

import pydantic

from yaya_proxy.api.schemas import TransactionPage
from yaya_proxy.errors import BadUpstreamResponse

logger = logging.getLogger("yaya_proxy.normalizer")

DIAGNOSTIC_LIMIT = 500


def truncated_dump(payload: Any, limit: int = DIAGNOSTIC_LIMIT) -> str:
    try:
        text = json.dumps(payload, default=str)
    except (TypeError, ValueError):
        text = repr(payload)
    return text[:limit]


def ensure_transaction_page(payload: Any, operation: str) -> Dict[str, Any]:
    """
    Require ``payload["data"]`` to be a list of Transaction-shaped records.

    Raises BadUpstreamResponse carrying a truncated dump of the payload.
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), list):
        dump = truncated_dump(payload)
        logger.error("Invalid response format from YaYa API for %s: %s", operation, dump)
        raise BadUpstreamResponse(
            f"Invalid response format from YaYa API for {operation}",
            diagnostic=dump,
        )

    try:
        TransactionPage.model_validate(payload)
    except pydantic.ValidationError as exc:
        dump = truncated_dump(payload)
        logger.error(
            "Unexpected transaction shape from YaYa API for %s (%d errors): %s",
            operation,
            exc.error_count(),
            dump,
        )
        raise BadUpstreamResponse(
            f"Unexpected transaction shape from YaYa API for {operation}",
            diagnostic=dump,
        ) from None

    return payload
