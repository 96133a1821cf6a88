"""
Kraken Python SDK
=================
Kraken REST API 的 Python SDK
"""
from typing import Any, Mapping, Optional

import httpx

from .account import AccountAPI
from .config import KrakenConfig
from .errors import (
    KrakenAPIError,
    KrakenConfigError,
    KrakenDecodeError,
    KrakenError,
    KrakenTransportError,
    UnknownMethodError,
)
from .kraken_client import PRIVATE_METHODS, PUBLIC_METHODS, KrakenClient
from .public import PublicAPI
from .trade import TradeAPI


class KrakenExchange:
    """Kraken 主类，整合所有 API 模块"""

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        初始化 Kraken 客户端

        Args:
            api_key: API Key（仅调用公共接口时可留空）
            api_secret: API Secret（Base64 字符串）
            base_url: 自定义基础 URL（可选）
            api_version: API 版本（可选）
            timeout: 默认 HTTP 客户端的超时时间（秒）
            http_client: 自定义 httpx.Client（可选）
        """
        self.client = KrakenClient(
            api_key=api_key,
            api_secret=api_secret,
            base_url=base_url,
            api_version=api_version,
            timeout=timeout,
            http_client=http_client,
        )

        # 初始化各个 API 模块
        self.public = PublicAPI(self.client)
        self.account = AccountAPI(self.client)
        self.trade = TradeAPI(self.client)

    @classmethod
    def from_config(
        cls,
        config: Optional[KrakenConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> "KrakenExchange":
        """根据 KrakenConfig（默认读取环境变量）创建客户端"""
        config = config or KrakenConfig()
        return cls(
            api_key=config.api_key,
            api_secret=config.api_secret,
            base_url=config.base_url,
            api_version=config.api_version,
            timeout=config.timeout,
            http_client=http_client,
        )

    def query(self, method: str, params: Optional[Mapping[str, str]] = None) -> Any:
        """按方法名调用任意接口，返回未转换的 result"""
        return self.client.query(method, params)

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


__all__ = [
    "KrakenExchange",
    "KrakenClient",
    "KrakenConfig",
    "KrakenError",
    "KrakenAPIError",
    "KrakenConfigError",
    "KrakenDecodeError",
    "KrakenTransportError",
    "UnknownMethodError",
    "PUBLIC_METHODS",
    "PRIVATE_METHODS",
    "PublicAPI",
    "AccountAPI",
    "TradeAPI",
]
