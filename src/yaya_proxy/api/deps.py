from json import JSONDecodeError
from typing import Any

from fastapi import Request

from yaya_proxy.errors import ValidationError
from yaya_proxy.services.transactions_service import TransactionsService


def get_transactions_service(request: Request) -> TransactionsService:
    """
    Service instance created by create_app() and kept on app.state.
    """
    return request.app.state.transactions_service


async def get_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON") from None
