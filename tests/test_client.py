import httpx
import pytest

from kraken_api import (
    PRIVATE_METHODS,
    PUBLIC_METHODS,
    KrakenAPIError,
    KrakenClient,
    KrakenConfigError,
    KrakenDecodeError,
    KrakenTransportError,
    UnknownMethodError,
)
from kraken_api.signer import decode_secret, sign
from tests.conftest import API_KEY, API_SECRET, form, ok


def test_method_sets_are_disjoint():
    assert not PUBLIC_METHODS & PRIVATE_METHODS
    assert "Time" in PUBLIC_METHODS
    assert "Balance" in PRIVATE_METHODS


def test_query_routes_public_method(make_client):
    client, requests = make_client(ok({"unixtime": 1700000000, "rfc1123": "x"}))

    assert client.query("Time") == {"unixtime": 1700000000, "rfc1123": "x"}

    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.kraken.com/0/public/Time"
    assert "API-Sign" not in request.headers
    assert "nonce" not in form(request)


def test_query_routes_private_method(make_client):
    client, requests = make_client(ok({"ZUSD": "100.0000"}))

    assert client.query("Balance") == {"ZUSD": "100.0000"}

    request = requests[0]
    assert str(request.url) == "https://api.kraken.com/0/private/Balance"
    assert request.headers["API-Key"] == API_KEY
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    body = request.content.decode()
    nonce = form(request)["nonce"]
    assert request.headers["API-Sign"] == sign("/0/private/Balance", nonce, body, decode_secret(API_SECRET))


def test_query_passes_params(make_client):
    client, requests = make_client(ok({}))

    client.query("Ticker", {"pair": "XBTUSD,ETHUSD"})

    assert form(requests[0]) == {"pair": "XBTUSD,ETHUSD"}


def test_unknown_method_fails_before_network(make_client):
    client, requests = make_client(ok({}))

    with pytest.raises(UnknownMethodError) as excinfo:
        client.query("NotAMethod")

    assert excinfo.value.method == "NotAMethod"
    assert requests == []


def test_user_agent_is_sent(make_client):
    client, requests = make_client(ok({}))

    client.query_public("Assets")

    assert requests[0].headers["User-Agent"].startswith("kraken-api-client/")


def test_api_error_is_raised_verbatim(make_client, log_messages):
    client, _ = make_client({"error": ["EAPI:Invalid key"], "result": {"ZUSD": "1"}})

    with pytest.raises(KrakenAPIError) as excinfo:
        client.query_private("Balance")

    assert excinfo.value.errors == ["EAPI:Invalid key"]
    assert any("EAPI:Invalid key" in message for message in log_messages)


def test_http_status_error_is_transport_error(make_client):
    client, _ = make_client(b"Service Unavailable", status_code=503)

    with pytest.raises(KrakenTransportError) as excinfo:
        client.query_public("Time")

    assert excinfo.value.status_code == 503
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


def test_network_error_is_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = make_client(handler=handler)

    with pytest.raises(KrakenTransportError) as excinfo:
        client.query_public("Time")

    assert excinfo.value.status_code is None


def test_invalid_json_is_decode_error(make_client):
    client, _ = make_client(b"<html>maintenance</html>")

    with pytest.raises(KrakenDecodeError):
        client.query_public("Time")


def test_malformed_secret_fails_at_construction():
    with pytest.raises(KrakenConfigError):
        KrakenClient(api_key=API_KEY, api_secret="%%% not base64 %%%")


def test_public_only_client_rejects_private_call(make_client):
    client, requests = make_client(ok({}), api_key="", api_secret="")

    assert client.query("Time") == {}
    with pytest.raises(KrakenConfigError):
        client.query("Balance")

    assert len(requests) == 1


def test_nonces_increase_across_calls(make_client):
    client, requests = make_client(ok({}))

    for _ in range(5):
        client.query_private("Balance")

    nonces = [int(form(request)["nonce"]) for request in requests]
    assert nonces == sorted(nonces)
    assert len(set(nonces)) == 5


def test_credentials_are_never_logged(make_client, log_messages):
    client, requests = make_client({"error": ["EGeneral:Internal error"]})

    with pytest.raises(KrakenAPIError):
        client.query_private("Balance", {"asset": "ZUSD"})

    signature = requests[0].headers["API-Sign"]
    logged = "\n".join(log_messages)
    assert "Balance" in logged
    assert API_KEY not in logged
    assert API_SECRET not in logged
    assert signature not in logged


def test_custom_base_url_and_version(make_client):
    def handler(request):
        return httpx.Response(200, json=ok({}))

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    client = KrakenClient(base_url="https://sandbox.example.com/", api_version="1", http_client=http_client)

    client.query_public("Time")

    assert client.base_url == "https://sandbox.example.com"
    assert client._builder.build_public("Time").url == "https://sandbox.example.com/1/public/Time"
    http_client.close()


def test_close_only_closes_owned_client():
    owned = KrakenClient()
    owned.close()
    assert owned._client.is_closed

    http_client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=ok({}))))
    with KrakenClient(http_client=http_client) as client:
        client.query_public("Time")
    assert not http_client.is_closed
    http_client.close()
