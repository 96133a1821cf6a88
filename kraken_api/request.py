"""
请求构造
========
所有请求都以 application/x-www-form-urlencoded 的 POST 发送。
私有请求注入 nonce，并对实际发送的请求体签名。
"""
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Union
from urllib.parse import urlencode

from .errors import KrakenConfigError
from .signer import decode_secret, sign

NONCE_KEY = "nonce"


def comma_list(values: Union[str, Sequence[str]]) -> str:
    """列表参数按逗号拼接，字符串原样传递"""
    if isinstance(values, str):
        return values
    return ",".join(values)


@dataclass(frozen=True)
class Credentials:
    """API Key 与解码后的 Secret，不参与 repr"""
    api_key: str = field(repr=False)
    secret: bytes = field(repr=False)

    @classmethod
    def from_strings(cls, api_key: str, api_secret: str) -> "Credentials":
        return cls(api_key=api_key, secret=decode_secret(api_secret))


@dataclass
class KrakenRequest:
    url: str
    path: str
    body: str
    headers: Dict[str, str]


class NonceSource:
    """
    严格递增的 nonce

    基于 time.time_ns()，时钟未前进时取上一个值 + 1，
    多线程并发调用时不会产生重复值。
    """

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            self._last = max(self._clock(), self._last + 1)
            return self._last


class RequestBuilder:
    """构造公共 / 私有接口请求"""

    def __init__(
        self,
        base_url: str,
        version: str,
        user_agent: str,
        credentials: Optional[Credentials] = None,
        nonce_source: Optional[NonceSource] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.version = version
        self.user_agent = user_agent
        self._credentials = credentials
        self._nonce = nonce_source or NonceSource()

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Content-Type": "application/x-www-form-urlencoded",
        }

    def build_public(self, method: str, params: Optional[Mapping[str, str]] = None) -> KrakenRequest:
        """
        构造公共接口请求
        POST {base}/{version}/public/{method}
        """
        path = f"/{self.version}/public/{method}"
        return KrakenRequest(
            url=f"{self.base_url}{path}",
            path=path,
            body=urlencode(dict(params or {})),
            headers=self._headers(),
        )

    def build_private(self, method: str, params: Optional[Mapping[str, str]] = None) -> KrakenRequest:
        """
        构造私有接口请求
        POST {base}/{version}/private/{method}

        Args:
            method: 接口名（如 Balance）
            params: 请求参数，其中的 nonce 会被覆盖

        Returns:
            已签名的请求
        """
        if self._credentials is None or not self._credentials.api_key or not self._credentials.secret:
            raise KrakenConfigError(f"API key and secret are required for private method '{method}'")

        path = f"/{self.version}/private/{method}"
        values = dict(params or {})
        nonce = str(self._nonce())
        values[NONCE_KEY] = nonce
        body = urlencode(values)

        headers = self._headers()
        headers["API-Key"] = self._credentials.api_key
        headers["API-Sign"] = sign(path, nonce, body, self._credentials.secret)

        return KrakenRequest(url=f"{self.base_url}{path}", path=path, body=body, headers=headers)
