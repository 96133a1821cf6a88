import base64
from urllib.parse import parse_qsl

import httpx
import pytest
from loguru import logger

from kraken_api import KrakenClient

API_KEY = "test-api-key"
API_SECRET = base64.b64encode(b"kraken-test-secret-bytes" * 3).decode()


def form(request: httpx.Request) -> dict:
    """请求体 -> {key: value}"""
    return dict(parse_qsl(request.content.decode(), keep_blank_values=True))


def ok(result) -> dict:
    return {"error": [], "result": result}


@pytest.fixture
def make_client():
    """
    构造使用 httpx.MockTransport 的 KrakenClient

    返回 (client, requests)，requests 记录所有发出的请求
    """
    http_clients = []

    def _make(payload=None, status_code=200, api_key=API_KEY, api_secret=API_SECRET, handler=None):
        requests = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if handler is not None:
                return handler(request)
            if isinstance(payload, bytes):
                return httpx.Response(status_code, content=payload)
            return httpx.Response(status_code, json=payload)

        http_client = httpx.Client(transport=httpx.MockTransport(_handler))
        http_clients.append(http_client)
        client = KrakenClient(api_key=api_key, api_secret=api_secret, http_client=http_client)
        return client, requests

    yield _make

    for http_client in http_clients:
        http_client.close()


@pytest.fixture
def log_messages():
    """收集 loguru 输出"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
