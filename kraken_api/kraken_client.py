"""
Kraken API Client
=================
封装 Kraken REST API 的 HTTP 请求，包括签名、请求发送和响应解析。
"""
from typing import Any, Callable, Mapping, Optional, TypeVar

import httpx
from loguru import logger

from .decoder import decode_raw, decode_typed
from .errors import KrakenAPIError, KrakenDecodeError, KrakenTransportError, UnknownMethodError
from .request import Credentials, KrakenRequest, NonceSource, RequestBuilder

T = TypeVar("T")

# API 端点
API_URL = "https://api.kraken.com"
API_VERSION = "0"
USER_AGENT = "kraken-api-client/0.1.0 (python-httpx)"

PUBLIC_METHODS = frozenset({
    "Time",
    "Assets",
    "AssetPairs",
    "Ticker",
    "OHLC",
    "Depth",
    "Trades",
    "Spread",
})

PRIVATE_METHODS = frozenset({
    "Balance",
    "TradeBalance",
    "OpenOrders",
    "ClosedOrders",
    "QueryOrders",
    "TradesHistory",
    "QueryTrades",
    "OpenPositions",
    "Ledgers",
    "QueryLedgers",
    "TradeVolume",
    "AddOrder",
    "CancelOrder",
})


class KrakenClient:
    """Kraken API 客户端"""

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
        nonce_source: Optional[NonceSource] = None,
    ):
        """
        初始化 Kraken 客户端

        Args:
            api_key: API Key（仅调用公共接口时可留空）
            api_secret: API Secret（Base64 字符串，格式错误时立即抛出 KrakenConfigError）
            base_url: 自定义基础 URL（可选）
            api_version: API 版本（可选，默认 0）
            timeout: 默认 HTTP 客户端的超时时间（秒）
            http_client: 自定义 httpx.Client（可选，由调用方负责关闭）
            nonce_source: 自定义 nonce 生成器（可选）
        """
        credentials = None
        if api_key or api_secret:
            credentials = Credentials.from_strings(api_key, api_secret)

        self.base_url = (base_url or API_URL).rstrip("/")
        self.api_version = api_version or API_VERSION
        self._builder = RequestBuilder(
            base_url=self.base_url,
            version=self.api_version,
            user_agent=USER_AGENT,
            credentials=credentials,
            nonce_source=nonce_source,
        )

        self._owns_client = http_client is None
        self._client: httpx.Client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """关闭默认创建的 HTTP 客户端"""
        if self._owns_client:
            self._client.close()

    def _send(self, request: KrakenRequest, method: str) -> bytes:
        """发送请求并返回响应体"""
        try:
            response = self._client.post(request.url, headers=request.headers, content=request.body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP Error on {method}: {e}")
            raise KrakenTransportError(
                f"Could not execute request {method}: {e}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Request failed on {method}: {e}")
            raise KrakenTransportError(f"Could not execute request {method}: {e}") from e
        return response.content

    def _decode(self, raw: bytes, method: str, parse: Optional[Callable[[Any], T]]) -> Any:
        try:
            if parse is None:
                return decode_raw(raw, method)
            return decode_typed(raw, parse, method)
        except KrakenAPIError as e:
            logger.error(f"Kraken API Error on {method}: {e.errors}")
            raise
        except KrakenDecodeError as e:
            logger.error(f"Decode Error on {method}: {e}")
            raise

    def _public(self, method: str, params: Optional[Mapping[str, str]], parse=None) -> Any:
        logger.debug(f"Kraken public request: {method}")
        request = self._builder.build_public(method, params)
        return self._decode(self._send(request, method), method, parse)

    def _private(self, method: str, params: Optional[Mapping[str, str]], parse=None) -> Any:
        logger.debug(f"Kraken private request: {method}")
        request = self._builder.build_private(method, params)
        return self._decode(self._send(request, method), method, parse)

    def query_public(self, method: str, params: Optional[Mapping[str, str]] = None) -> Any:
        """公共接口，返回未转换的 result"""
        return self._public(method, params)

    def query_private(self, method: str, params: Optional[Mapping[str, str]] = None) -> Any:
        """私有接口，返回未转换的 result"""
        return self._private(method, params)

    def query_public_typed(
        self,
        method: str,
        parse: Callable[[Any], T],
        params: Optional[Mapping[str, str]] = None,
    ) -> T:
        """公共接口，result 经 parse 转换后返回"""
        return self._public(method, params, parse)

    def query_private_typed(
        self,
        method: str,
        parse: Callable[[Any], T],
        params: Optional[Mapping[str, str]] = None,
    ) -> T:
        """私有接口，result 经 parse 转换后返回"""
        return self._private(method, params, parse)

    def query(self, method: str, params: Optional[Mapping[str, str]] = None) -> Any:
        """
        按方法名调用任意接口

        Args:
            method: 接口名（如 Time、Balance）
            params: 请求参数

        Returns:
            未转换的 result
        """
        if method in PUBLIC_METHODS:
            return self.query_public(method, params)
        if method in PRIVATE_METHODS:
            return self.query_private(method, params)
        raise UnknownMethodError(method)
