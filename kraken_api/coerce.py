"""
JSON 字段类型转换

Kraken 的响应中价格、数量用字符串表示，时间戳用数字表示，
这里按字段逐一校验，类型不符时抛出 KrakenDecodeError。
"""
import math
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from .errors import KrakenDecodeError

T = TypeVar("T")

_MISSING = object()

_DECIMAL_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_INTEGER_RE = re.compile(r"[0-9]+")


def _type_name(value: Any) -> str:
    return type(value).__name__


def as_str(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise KrakenDecodeError(f"{field}: expected string, got {_type_name(value)}")
    return value


def as_decimal(value: Any, field: str) -> str:
    """十进制字符串，原样返回以保留精度"""
    if not isinstance(value, str):
        raise KrakenDecodeError(f"{field}: expected decimal string, got {_type_name(value)}")
    if not _DECIMAL_RE.fullmatch(value):
        raise KrakenDecodeError(f"{field}: {value!r} is not a decimal number")
    return value


def as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise KrakenDecodeError(f"{field}: expected integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise KrakenDecodeError(f"{field}: expected integer, got {value!r}")


def as_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise KrakenDecodeError(f"{field}: expected number, got {_type_name(value)}")
    try:
        number = float(value)
    except OverflowError:
        raise KrakenDecodeError(f"{field}: number out of range") from None
    if not math.isfinite(number):
        raise KrakenDecodeError(f"{field}: expected finite number, got {value!r}")
    return number


def as_timestamp(value: Any, field: str) -> int:
    """Unix 时间戳（秒），小数部分截断"""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(as_number(value, field))


def as_int_string(value: Any, field: str) -> int:
    """字符串形式的整数（如 Trades 的 last）"""
    text = as_str(value, field)
    if not _INTEGER_RE.fullmatch(text):
        raise KrakenDecodeError(f"{field}: {text!r} is not an integer")
    return int(text)


def as_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise KrakenDecodeError(f"{field}: expected bool, got {_type_name(value)}")
    return value


def as_mapping(value: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise KrakenDecodeError(f"{field}: expected object, got {_type_name(value)}")
    return value


def as_list(value: Any, field: str) -> List[Any]:
    if not isinstance(value, list):
        raise KrakenDecodeError(f"{field}: expected array, got {_type_name(value)}")
    return value


def list_of(coerce: Callable[[Any, str], T]) -> Callable[[Any, str], List[T]]:
    def _coerce(value: Any, field: str) -> List[T]:
        return [coerce(item, f"{field}[{i}]") for i, item in enumerate(as_list(value, field))]
    return _coerce


def required(data: Mapping[str, Any], key: str, coerce: Callable[[Any, str], T], where: str = "") -> T:
    field = f"{where}.{key}" if where else key
    if key not in data:
        raise KrakenDecodeError(f"{field}: missing field")
    return coerce(data[key], field)


def optional(
    data: Mapping[str, Any],
    key: str,
    coerce: Callable[[Any, str], T],
    where: str = "",
    default: Optional[T] = None,
) -> Optional[T]:
    """缺失或为 null 时返回 default"""
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        return default
    return coerce(value, f"{where}.{key}" if where else key)


def mapping_of(
    value: Any,
    parse: Callable[[Mapping[str, Any], str], T],
    field: str = "result",
) -> Dict[str, T]:
    """解析 {id: object} 形式的结果"""
    return {
        key: parse(as_mapping(item, f"{field}.{key}"), f"{field}.{key}")
        for key, item in as_mapping(value, field).items()
    }
