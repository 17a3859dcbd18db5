import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from yaya_proxy.services.transactions_service import TransactionsService
from .deps import get_json_body, get_transactions_service

logger = logging.getLogger("yaya_proxy.api.transactions")

router = APIRouter(tags=["transactions"])


@router.get("/transactions")
async def get_transactions(
    p: Optional[str] = Query(default=None, description="1-based page number"),
    service: TransactionsService = Depends(get_transactions_service),
):
    """
    One page of the current user's transactions.
    """
    try:
        result = await service.get_transactions(p)
    except Exception as e:
        logger.error("Error in get_transactions p=%s: %s", p, e)
        raise
    # upstream payload is returned as-is, without response_model coercion
    return JSONResponse(content=result)


@router.post("/transactions/search")
async def search_transactions(
    body: Any = Depends(get_json_body),
    service: TransactionsService = Depends(get_transactions_service),
):
    """
    Search by id, sender account, receiver account or cause.
    """
    try:
        result = await service.search_transactions(body)
    except Exception as e:
        logger.error("Error in search_transactions: %s", e)
        raise
    return JSONResponse(content=result)
