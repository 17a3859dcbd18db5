"""
Transactions Service Business Logic
"""

import logging
from typing import Any, Dict, Optional

from yaya_proxy.api.schemas import SearchQuery
from yaya_proxy.api.validators import parse_page, parse_search_query
from yaya_proxy.clients.mock_client import MockWalletClient
from yaya_proxy.clients.yaya_client import YayaWalletClient
from yaya_proxy.config import Settings
from yaya_proxy.services.retry_policy import WalletRetryPolicy

logger = logging.getLogger("yaya_proxy.transactions_service")


class TransactionsService:
    """
    GetTransactions / SearchTransactions on top of the retry policy.
    Inputs are validated here so nothing malformed reaches the provider.
    """

    def __init__(self, policy: WalletRetryPolicy):
        self.policy = policy

    async def get_transactions(self, page: Any) -> Dict[str, Any]:
        page_number = parse_page(page)
        return await self.policy.list_transactions(page_number)

    async def search_transactions(self, query: Any) -> Dict[str, Any]:
        if not isinstance(query, SearchQuery):
            query = parse_search_query(query)
        return await self.policy.search_transactions(query)

    async def close(self) -> None:
        await self.policy.client.close()


def build_transactions_service(settings: Settings, client: Optional[Any] = None) -> TransactionsService:
    """
    Wire client -> policy -> service for the given settings.
    """
    if client is None:
        if settings.use_mock:
            logger.warning("YAYA_USE_MOCK is set; serving fixture transactions")
            client = MockWalletClient(current_account=settings.current_account)
        else:
            client = YayaWalletClient(settings)

    policy = WalletRetryPolicy.from_settings(client, settings)
    if isinstance(client, YayaWalletClient):
        # sign requests with the provider clock (local clock as fallback)
        client.timestamp_source = policy.server_time
    return TransactionsService(policy)
