"""
In-memory stand-in for the YaYa Wallet API.

Serves five fixture transactions with a page size of 3. Incoming/outgoing
sums are computed over the returned page (list) or result set (search)
relative to ``current_account``.
"""

import copy
import logging
import math
import time
from typing import Any, Dict, List, Optional

logger = logging.getLogger("yaya_proxy.mock_client")

DEFAULT_ACCOUNT = "yayawalletpi"
PER_PAGE = 3

FIXTURE_TRANSACTIONS: List[Dict[str, Any]] = [
    {
        "id": "7446ee50-418f-9c8f-03f2466f514f",
        "sender": {"name": "Yaya Wallet Pii", "account": "yayawalletpi"},
        "receiver": {"name": "YaYa PII SC", "account": "antenehgebey"},
        "amount_with_currency": "2,500.00 ETB",
        "amount": 2500,
        "amount_in_base_currency": 2500,
        "fee": 5.75,
        "currency": "ETB",
        "cause": "Pay",
        "sender_caption": "",
        "receiver_caption": "",
        "created_at_time": 1756101350,
        "is_topup": False,
        "is_outgoing_transfer": False,
        "fee_vat": 0.75,
        "fee_before_vat": 5,
    },
    {
        "id": "f30a36f1-413b-b9c4-a63d1549aa03",
        "sender": {"name": "Yaya Wallet Pii", "account": "yayawalletpi"},
        "receiver": {"name": "Habetamu Worku Feleke", "account": "tewobstatewo"},
        "amount_with_currency": "2,500.00 ETB",
        "amount": 2500,
        "amount_in_base_currency": 2500,
        "fee": 5.75,
        "currency": "ETB",
        "cause": "Pay",
        "sender_caption": "",
        "receiver_caption": "",
        "created_at_time": 1756101331,
        "is_topup": False,
        "is_outgoing_transfer": False,
        "fee_vat": 0.75,
        "fee_before_vat": 5,
    },
    {
        "id": "b7a2ed8407-cba5e9575d59",
        "sender": {"name": "Surafel Araya", "account": "surafelaraya"},
        "receiver": {"name": "Yaya Wallet Pii", "account": "yayawalletpi"},
        "amount_with_currency": "300.00 ETB",
        "amount": 300,
        "amount_in_base_currency": 300,
        "fee": 1.15,
        "currency": "ETB",
        "cause": "Pay",
        "sender_caption": "",
        "receiver_caption": "",
        "created_at_time": 1756033429,
        "is_topup": False,
        "is_outgoing_transfer": False,
        "fee_vat": 0.15,
        "fee_before_vat": 1,
    },
    {
        "id": "9e889994-657-c88b9bcd2fb6",
        "sender": {"name": "Yaya Wallet Pii", "account": "yayawalletpi"},
        "receiver": {"name": "Yaya Wallet Pii", "account": "yayawalletpi"},
        "amount_with_currency": "500.00 ETB",
        "amount": 500,
        "amount_in_base_currency": 500,
        "fee": 1.15,
        "currency": "ETB",
        "cause": "Top-up",
        "sender_caption": "",
        "receiver_caption": "",
        "created_at_time": 1756033389,
        "is_topup": True,
        "is_outgoing_transfer": False,
        "fee_vat": 0.15,
        "fee_before_vat": 1,
    },
    {
        "id": "a2bbd8-47a6-a306-274c6f784c74",
        "sender": {"name": "YaYa PII SC", "account": "antenehgebey"},
        "receiver": {"name": "Yaya Wallet Pii", "account": "yayawalletpi"},
        "amount_with_currency": "1,000.00 ETB",
        "amount": 1000,
        "amount_in_base_currency": 1000,
        "fee": 2.3,
        "currency": "ETB",
        "cause": "Allowance",
        "sender_caption": "",
        "receiver_caption": "",
        "created_at_time": 1756033360,
        "is_topup": False,
        "is_outgoing_transfer": False,
        "fee_vat": 0.3,
        "fee_before_vat": 2,
    },
]


def is_incoming(txn: Dict[str, Any], account: str) -> bool:
    return txn["receiver"]["account"] == account or bool(txn.get("is_topup"))


def is_outgoing(txn: Dict[str, Any], account: str) -> bool:
    return txn["sender"]["account"] == account and not txn.get("is_topup")


def summarize(txns: List[Dict[str, Any]], account: str) -> Dict[str, Any]:
    return {
        "incomingSum": sum(t["amount"] for t in txns if is_incoming(t, account)),
        "outgoingSum": sum(t["amount"] for t in txns if is_outgoing(t, account)),
    }


class MockWalletClient:
    """
    Fixture-backed wallet client. ``calls`` records every operation invoked.
    """

    def __init__(
        self,
        transactions: Optional[List[Dict[str, Any]]] = None,
        current_account: str = DEFAULT_ACCOUNT,
        per_page: int = PER_PAGE,
    ):
        self.transactions = copy.deepcopy(transactions if transactions is not None else FIXTURE_TRANSACTIONS)
        self.current_account = current_account
        self.per_page = per_page
        self.calls: List[tuple] = []

    async def close(self):
        return None

    async def list(self, page: int) -> Dict[str, Any]:
        self.calls.append(("list", page))
        logger.info("[MOCK] Fetching transactions for page %s", page)
        total = len(self.transactions)
        start = (page - 1) * self.per_page
        data = self.transactions[start:start + self.per_page]
        return {
            "data": data,
            "lastPage": max(1, math.ceil(total / self.per_page)),
            "total": total,
            "perPage": self.per_page,
            **summarize(data, self.current_account),
        }

    async def search(self, query: str) -> Dict[str, Any]:
        self.calls.append(("search", query))
        logger.info("[MOCK] Searching transactions with query=%r", query)
        needle = query.lower()
        data = [
            t for t in self.transactions
            if needle in t["id"].lower()
            or needle in t["sender"]["account"].lower()
            or needle in t["receiver"]["account"].lower()
            or needle in (t.get("cause") or "").lower()
        ]
        return {
            "data": data,
            "lastPage": 1,
            "total": len(data),
            "perPage": len(data),
            **summarize(data, self.current_account),
        }

    async def server_time(self) -> Dict[str, Any]:
        self.calls.append(("server_time",))
        return {"time": int(time.time() * 1000)}
