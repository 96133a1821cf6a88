import threading
from urllib.parse import parse_qsl, urlencode

import pytest

from kraken_api.errors import KrakenConfigError
from kraken_api.request import Credentials, NonceSource, RequestBuilder, comma_list
from kraken_api.signer import sign
from tests.conftest import API_KEY, API_SECRET


def _builder(credentials=None, clock=None):
    return RequestBuilder(
        base_url="https://api.kraken.com/",
        version="0",
        user_agent="test-agent",
        credentials=credentials,
        nonce_source=NonceSource(clock) if clock else None,
    )


def test_public_request_has_no_credentials():
    request = _builder().build_public("Ticker", {"pair": "XBTUSD"})

    assert request.url == "https://api.kraken.com/0/public/Ticker"
    assert request.path == "/0/public/Ticker"
    assert request.body == "pair=XBTUSD"
    assert request.headers["User-Agent"] == "test-agent"
    assert "API-Key" not in request.headers
    assert "API-Sign" not in request.headers


def test_private_request_is_signed_over_sent_body():
    credentials = Credentials.from_strings(API_KEY, API_SECRET)
    request = _builder(credentials, clock=lambda: 1700000000000000000).build_private(
        "Balance", {"asset": "ZUSD"}
    )

    assert request.url == "https://api.kraken.com/0/private/Balance"
    assert request.path == "/0/private/Balance"
    assert request.body == "asset=ZUSD&nonce=1700000000000000000"
    assert request.headers["API-Key"] == API_KEY
    assert request.headers["API-Sign"] == sign(
        "/0/private/Balance", "1700000000000000000", request.body, credentials.secret
    )


def test_generated_nonce_overrides_caller_nonce():
    credentials = Credentials.from_strings(API_KEY, API_SECRET)
    request = _builder(credentials, clock=lambda: 42).build_private("Balance", {"nonce": "1"})

    assert dict(parse_qsl(request.body)) == {"nonce": "42"}


def test_private_request_requires_credentials():
    with pytest.raises(KrakenConfigError):
        _builder().build_private("Balance")


def test_private_request_requires_secret():
    with pytest.raises(KrakenConfigError):
        _builder(Credentials(api_key=API_KEY, secret=b"")).build_private("Balance")


def test_encoded_params_roundtrip():
    params = {"pair": "XBT/USD", "close[ordertype]": "limit", "oflags": "post,fcib", "price": "+1.5%"}
    assert dict(parse_qsl(urlencode(params))) == params
    assert dict(parse_qsl(_builder().build_public("AddOrder", params).body)) == params


def test_nonce_is_strictly_increasing_when_clock_stalls():
    nonce = NonceSource(lambda: 1000)
    assert [nonce(), nonce(), nonce()] == [1000, 1001, 1002]


def test_nonce_follows_clock_when_it_advances():
    ticks = iter([10, 50, 20])
    nonce = NonceSource(lambda: next(ticks))
    assert [nonce(), nonce(), nonce()] == [10, 50, 51]


def test_nonce_is_unique_across_threads():
    nonce = NonceSource(lambda: 1)
    seen = []
    lock = threading.Lock()

    def worker():
        values = [nonce() for _ in range(200)]
        with lock:
            seen.extend(values)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(seen) == len(set(seen)) == 1600


def test_credentials_repr_hides_key_and_secret():
    credentials = Credentials.from_strings(API_KEY, API_SECRET)
    assert API_KEY not in repr(credentials)
    assert str(credentials.secret) not in repr(credentials)


@pytest.mark.parametrize(
    "values, expected",
    [
        ("OQCLML-BW3P3-BUCMWZ", "OQCLML-BW3P3-BUCMWZ"),
        ("O1,O2", "O1,O2"),
        (["O1", "O2"], "O1,O2"),
        (("XBT",), "XBT"),
    ],
)
def test_comma_list_keeps_strings_whole(values, expected):
    assert comma_list(values) == expected
