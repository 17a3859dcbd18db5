"""HTTP-level tests for the transactions endpoints."""

from dataclasses import replace

from fastapi.testclient import TestClient

from yaya_proxy.app import create_app
from yaya_proxy.clients.mock_client import FIXTURE_TRANSACTIONS
from yaya_proxy.errors import InvalidJSONResponse, UpstreamCallError
from tests.fakes import ScriptedWalletClient


def _client(settings, wallet=None, **kwargs) -> tuple:
    wallet = wallet or ScriptedWalletClient()
    app = create_app(settings, client=wallet)
    return TestClient(app, **kwargs), wallet


def test_get_transactions_first_page(settings) -> None:
    client, wallet = _client(settings)

    response = client.get("/api/transactions", params={"p": 1})

    assert response.status_code == 200
    payload = response.json()
    assert payload["lastPage"] == 2
    assert payload["total"] == 5
    assert payload["perPage"] == 3
    assert [t["id"] for t in payload["data"]] == [t["id"] for t in FIXTURE_TRANSACTIONS[:3]]
    # receiver of the third transaction is the current user
    assert payload["incomingSum"] == 300
    assert payload["outgoingSum"] == 5000
    assert wallet.attempts["list"] == 1


def test_get_transactions_defaults_to_first_page(settings) -> None:
    client, wallet = _client(settings)

    response = client.get("/api/transactions")

    assert response.status_code == 200
    assert wallet.calls == [("list", 1)]


def test_second_page_sums_cover_returned_rows_only(settings) -> None:
    client, _ = _client(settings)

    payload = client.get("/api/transactions", params={"p": 2}).json()

    assert len(payload["data"]) == 2
    assert payload["incomingSum"] == 1500
    assert payload["outgoingSum"] == 0


def test_transactions_are_returned_field_for_field(settings) -> None:
    client, _ = _client(settings)

    payload = client.get("/api/transactions", params={"p": 1}).json()

    assert payload["data"] == FIXTURE_TRANSACTIONS[:3]
    assert isinstance(payload["data"][0]["amount"], int)


def test_invalid_page_is_rejected_before_upstream_call(settings) -> None:
    client, wallet = _client(settings)

    for raw in ("0", "-1", "abc", "1.5"):
        response = client.get("/api/transactions", params={"p": raw})
        assert response.status_code == 400
        assert response.json()["error"] == "Page number must be a positive integer"

    assert wallet.attempts["list"] == 0


def test_empty_page_parameter_is_rejected(settings) -> None:
    client, wallet = _client(settings)

    for url in ("/api/transactions?p=", "/api/transactions?p=%20%20"):
        response = client.get(url)
        assert response.status_code == 400
        assert response.json()["error"] == "Page number must be a positive integer"

    assert wallet.attempts["list"] == 0


def test_search_by_cause(settings) -> None:
    client, wallet = _client(settings)

    response = client.post("/api/transactions/search", json={"cause": "Top-up"})

    assert response.status_code == 200
    payload = response.json()
    assert [t["cause"] for t in payload["data"]] == ["Top-up"]
    assert payload["total"] == 1
    assert payload["incomingSum"] == 500
    assert wallet.calls == [("search", "Top-up")]


def test_search_is_case_insensitive(settings) -> None:
    client, _ = _client(settings)

    payload = client.post("/api/transactions/search", json={"cause": "  top-UP "}).json()

    assert [t["id"] for t in payload["data"]] == ["9e889994-657-c88b9bcd2fb6"]


def test_search_with_blank_fields_is_rejected(settings) -> None:
    client, wallet = _client(settings)

    response = client.post("/api/transactions/search", json={"id": " ", "cause": ""})

    assert response.status_code == 400
    assert response.json()["error"] == "At least one search field must be provided"
    assert wallet.attempts["search"] == 0


def test_search_with_long_field_is_rejected(settings) -> None:
    client, _ = _client(settings)

    response = client.post("/api/transactions/search", json={"cause": "x" * 150})

    assert response.status_code == 400
    assert response.json()["error"] == "Cause must not exceed 100 characters"


def test_search_with_malformed_json_is_rejected(settings) -> None:
    client, _ = _client(settings)

    response = client.post(
        "/api/transactions/search",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Request body must be valid JSON"


def test_upstream_failure_surfaces_status_and_message(settings) -> None:
    wallet = ScriptedWalletClient(
        search_script=[UpstreamCallError("Request failed with status 503 (Service Unavailable)", status=503)] * 3
    )
    client, _ = _client(settings, wallet)

    response = client.post("/api/transactions/search", json={"id": "abc"})

    assert response.status_code == 503
    assert response.json()["error"] == "Request failed with status 503 (Service Unavailable)"
    assert wallet.attempts["search"] == 3


def test_bad_upstream_payload_returns_generic_message(settings) -> None:
    wallet = ScriptedWalletClient(list_script=[{"data": {"unexpected": True}}])
    client, _ = _client(settings, wallet)

    response = client.get("/api/transactions")

    assert response.status_code == 500
    assert response.json()["error"] == "Invalid response from YaYa API"


def test_bad_upstream_payload_is_not_echoed_outside_production(settings) -> None:
    wallet = ScriptedWalletClient(list_script=[{"data": "SECRET-UPSTREAM-BODY"}])
    client, _ = _client(settings, wallet)

    response = client.get("/api/transactions")

    assert response.status_code == 500
    assert response.json()["error"] == "Invalid response from YaYa API"
    assert "stack" in response.json()
    assert "SECRET-UPSTREAM-BODY" not in response.text


def test_invalid_json_body_is_not_echoed_outside_production(settings) -> None:
    wallet = ScriptedWalletClient(search_script=[InvalidJSONResponse("SECRET-UPSTREAM-BODY", status=200)])
    client, _ = _client(settings, wallet)

    response = client.post("/api/transactions/search", json={"cause": "Pay"})

    assert response.status_code == 500
    assert response.json()["error"] == "Invalid response from YaYa API"
    assert "SECRET-UPSTREAM-BODY" not in response.text
    assert wallet.attempts["search"] == 1


def test_unknown_route_returns_not_found(settings) -> None:
    client, _ = _client(settings)

    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_unsupported_method_returns_not_found(settings) -> None:
    client, _ = _client(settings)

    response = client.get("/api/transactions/search")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
    assert "allow" not in response.headers


def test_unhandled_error_includes_details_outside_production(settings) -> None:
    wallet = ScriptedWalletClient(list_script=[RuntimeError("secret internals")])
    client, _ = _client(settings, wallet, raise_server_exceptions=False)

    response = client.get("/api/transactions")

    assert response.status_code == 500
    payload = response.json()
    assert payload["error"] == "Internal server error"
    assert "secret internals" in payload["stack"]


def test_unhandled_error_hides_details_in_production(settings) -> None:
    wallet = ScriptedWalletClient(list_script=[RuntimeError("secret internals")])
    client, _ = _client(replace(settings, app_env="production"), wallet, raise_server_exceptions=False)

    response = client.get("/api/transactions")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_health(settings) -> None:
    client, _ = _client(settings)

    assert client.get("/api/health").json() == {"status": "healthy", "mock": True}


def test_cors_allows_configured_client_origin(settings) -> None:
    client, _ = _client(settings)

    response = client.options(
        "/api/transactions",
        headers={"Origin": settings.client_url, "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == settings.client_url
