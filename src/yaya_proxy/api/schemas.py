from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Number = Union[int, float]

SEARCH_FIELDS = ("id", "senderAccount", "receiverAccount", "cause")
MAX_SEARCH_FIELD_LENGTH = 100


class Party(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    account: str


class Transaction(BaseModel):
    """
    One wallet transaction as returned by YaYa. Used to check the shape of
    upstream records; the proxy responds with the upstream dict itself.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    sender: Party
    receiver: Party
    amount: Number
    amount_with_currency: Optional[str] = None
    amount_in_base_currency: Optional[Number] = None
    currency: Optional[str] = None
    fee: Optional[Number] = None
    fee_vat: Optional[Number] = None
    fee_before_vat: Optional[Number] = None
    cause: Optional[str] = None
    sender_caption: Optional[str] = None
    receiver_caption: Optional[str] = None
    created_at_time: Optional[Number] = None
    is_topup: bool = False
    is_outgoing_transfer: bool = False


class TransactionPage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    data: List[Transaction]
    lastPage: Optional[int] = None
    total: Optional[int] = None
    perPage: Optional[int] = None
    incomingSum: Optional[Number] = None
    outgoingSum: Optional[Number] = None


class SearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = Field(default=None, json_schema_extra={"label": "ID"})
    senderAccount: Optional[str] = Field(default=None, json_schema_extra={"label": "Sender account"})
    receiverAccount: Optional[str] = Field(default=None, json_schema_extra={"label": "Receiver account"})
    cause: Optional[str] = Field(default=None, json_schema_extra={"label": "Cause"})

    @field_validator(*SEARCH_FIELDS, mode="after")
    @classmethod
    def _trim_and_bound(cls, value: Optional[str], info) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if len(value) > MAX_SEARCH_FIELD_LENGTH:
            label = cls.model_fields[info.field_name].json_schema_extra["label"]
            raise ValueError(f"{label} must not exceed {MAX_SEARCH_FIELD_LENGTH} characters")
        return value

    @model_validator(mode="after")
    def _require_one_field(self) -> "SearchQuery":
        if not any(getattr(self, name) for name in SEARCH_FIELDS):
            raise ValueError("At least one search field must be provided")
        return self

    def query_value(self) -> str:
        """First non-empty field in priority order id > senderAccount > receiverAccount > cause."""
        for name in SEARCH_FIELDS:
            value = getattr(self, name)
            if value:
                return value
        return ""
