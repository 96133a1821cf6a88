"""
Kraken API 签名
===============
API-Sign = Base64(HMAC-SHA512(urlPath + SHA256(nonce + postData), Base64Decode(secret)))
"""
import base64
import binascii
import hashlib
import hmac

from .errors import KrakenConfigError


def decode_secret(secret: str) -> bytes:
    """
    解码 Base64 格式的 API Secret

    Args:
        secret: API Secret（Base64 字符串）

    Returns:
        解码后的密钥字节
    """
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KrakenConfigError(f"API secret is not valid base64: {e}") from None


def sign(path: str, nonce: str, encoded_params: str, secret: bytes) -> str:
    """
    生成 API 签名

    Args:
        path: 请求路径（如 /0/private/Balance）
        nonce: nonce 值，必须与 encoded_params 中的 nonce 一致
        encoded_params: 实际发送的 URL 编码请求体
        secret: 解码后的 API Secret

    Returns:
        Base64 编码的签名
    """
    digest = hashlib.sha256((nonce + encoded_params).encode("utf-8")).digest()
    mac = hmac.new(secret, path.encode("utf-8") + digest, hashlib.sha512)
    return base64.b64encode(mac.digest()).decode("utf-8")
