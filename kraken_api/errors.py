"""
Kraken API 异常定义
"""
from typing import List, Optional


class KrakenError(Exception):
    """所有 Kraken 客户端异常的基类"""


class KrakenConfigError(KrakenError):
    """配置错误（密钥格式错误、缺少凭证等）"""


class KrakenTransportError(KrakenError):
    """HTTP 请求失败（网络、TLS、超时、非 2xx 状态码）"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class KrakenAPIError(KrakenError):
    """交易所返回的 error 列表非空"""

    def __init__(self, errors: List[str], method: Optional[str] = None):
        self.errors = list(errors)
        self.method = method
        prefix = f"{method}: " if method else ""
        super().__init__(f"{prefix}{', '.join(self.errors)}")


class KrakenDecodeError(KrakenError):
    """响应结构与预期不符"""


class UnknownMethodError(KrakenError):
    """方法名既不是公共方法也不是私有方法"""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Method '{method}' is not valid")
