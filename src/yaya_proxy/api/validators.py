"""
Request validation for the transactions endpoints.

Turns raw query/body input into a page number or a SearchQuery, raising
ValidationError (400) before anything reaches the wallet provider.
"""

from typing import Any, Mapping, Optional, Union

import pydantic

from yaya_proxy.api.schemas import SEARCH_FIELDS, SearchQuery
from yaya_proxy.errors import ValidationError

PAGE_ERROR = "Page number must be a positive integer"


def parse_page(raw: Optional[Union[str, int]]) -> int:
    """
    Coerce the ``p`` query parameter to a positive integer. Only an absent
    parameter defaults to 1; an empty value is rejected.
    """
    if raw is None:
        return 1
    if isinstance(raw, bool):
        raise ValidationError(PAGE_ERROR)
    if isinstance(raw, int):
        page = raw
    else:
        text = str(raw).strip()
        try:
            page = int(text)
        except ValueError:
            # accept "2.0" style input, reject "2.5"
            try:
                as_float = float(text)
            except ValueError:
                raise ValidationError(PAGE_ERROR) from None
            if not as_float.is_integer():
                raise ValidationError(PAGE_ERROR)
            page = int(as_float)
    if page < 1:
        raise ValidationError(PAGE_ERROR)
    return page


def _error_message(err: Mapping[str, Any]) -> str:
    ctx_error = (err.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


def parse_search_query(body: Any) -> SearchQuery:
    """
    Validate a search body. Each field is trimmed and bounded; at least one
    field must remain non-empty.
    """
    if not isinstance(body, Mapping):
        raise ValidationError("Search body must be a JSON object")
    try:
        return SearchQuery.model_validate(dict(body))
    except pydantic.ValidationError as exc:
        message = ", ".join(_error_message(err) for err in exc.errors())
        raise ValidationError(message) from None


def derive_query_value(query: Union[SearchQuery, Mapping[str, Any]]) -> str:
    """
    Return the trimmed value of the first non-empty search field, or "".
    """
    if isinstance(query, SearchQuery):
        return query.query_value()
    for name in SEARCH_FIELDS:
        value = query.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""
