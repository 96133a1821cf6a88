"""
配置文件
支持从环境变量（以及 .env 文件）读取配置
"""
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import KrakenConfigError

DEFAULT_TIMEOUT = 30.0


class KrakenConfig:
    """Kraken API 配置类"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        load_env_file: bool = True,
    ):
        """
        初始化配置

        Args:
            api_key: API Key（如果为 None，则从环境变量 KRAKEN_API_KEY 读取）
            api_secret: API Secret（如果为 None，则从环境变量 KRAKEN_API_SECRET 读取）
            base_url: 自定义基础 URL（如果为 None，则从环境变量 KRAKEN_BASE_URL 读取）
            api_version: API 版本（如果为 None，则从环境变量 KRAKEN_API_VERSION 读取）
            timeout: 超时时间，秒（如果为 None，则从环境变量 KRAKEN_TIMEOUT 读取）
            load_env_file: 是否先加载 .env 文件
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))

        self.api_key = api_key or os.getenv("KRAKEN_API_KEY", "")
        self.api_secret = api_secret or os.getenv("KRAKEN_API_SECRET", "")
        self.base_url = base_url or os.getenv("KRAKEN_BASE_URL") or None
        self.api_version = api_version or os.getenv("KRAKEN_API_VERSION") or None

        if timeout is None:
            timeout_str = os.getenv("KRAKEN_TIMEOUT")
            if timeout_str:
                try:
                    timeout = float(timeout_str)
                except ValueError:
                    raise KrakenConfigError(f"KRAKEN_TIMEOUT is not a number: {timeout_str!r}") from None
            else:
                timeout = DEFAULT_TIMEOUT
        if timeout <= 0:
            raise KrakenConfigError(f"timeout must be positive, got {timeout}")
        self.timeout = timeout

    def __repr__(self) -> str:
        return (
            f"KrakenConfig(base_url={self.base_url!r}, api_version={self.api_version!r}, "
            f"timeout={self.timeout!r}, has_credentials={bool(self.api_key and self.api_secret)})"
        )
