"""
响应解析
========
所有响应都是 {"error": [...], "result": ...} 信封：
error 非空时直接抛出 KrakenAPIError，不再读取 result。

OHLC / Trades / Spread / Depth 的 result 以请求中的交易对为键，
其中 OHLC / Trades / Spread 的记录是按位置定义字段的数组，
这里为每种记录定义固定的 RecordSchema，按位置逐个转换类型。
"""
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .coerce import (
    as_decimal,
    as_int,
    as_int_string,
    as_list,
    as_mapping,
    as_str,
    as_timestamp,
    required,
)
from .errors import KrakenAPIError, KrakenDecodeError
from .models import (
    BUY,
    LIMIT,
    MARKET,
    OHLC,
    SELL,
    OHLCResponse,
    OrderBook,
    OrderBookEntry,
    SpreadInfo,
    SpreadResponse,
    TradeInfo,
    TradesResponse,
)

T = TypeVar("T")

Coercer = Callable[[Any, str], Any]


@dataclass
class Envelope:
    error: List[str]
    result: Any = None


@dataclass(frozen=True)
class RecordSchema:
    """按位置定义的记录：fields 必须全部存在，optional_fields 可以缺省"""
    name: str
    fields: Tuple[Tuple[str, Coercer], ...]
    optional_fields: Tuple[Tuple[str, Coercer], ...] = ()

    def decode(self, row: Any, where: str) -> Dict[str, Any]:
        values = as_list(row, where)
        min_len = len(self.fields)
        max_len = min_len + len(self.optional_fields)
        if not min_len <= len(values) <= max_len:
            expected = str(min_len) if min_len == max_len else f"{min_len}-{max_len}"
            raise KrakenDecodeError(
                f"{where}: {self.name} record has {len(values)} fields, expected {expected}"
            )
        decoded = {}
        for (name, coerce), value in zip(self.fields + self.optional_fields, values):
            decoded[name] = coerce(value, f"{where}.{name}")
        return decoded


OHLC_RECORD = RecordSchema(
    name="OHLC",
    fields=(
        ("time", as_timestamp),
        ("open", as_decimal),
        ("high", as_decimal),
        ("low", as_decimal),
        ("close", as_decimal),
        ("vwap", as_decimal),
        ("volume", as_decimal),
        ("count", as_int),
    ),
)

TRADE_RECORD = RecordSchema(
    name="trade",
    fields=(
        ("price", as_decimal),
        ("volume", as_decimal),
        ("time", as_timestamp),
        ("side", as_str),
        ("order_type", as_str),
        ("miscellaneous", as_str),
    ),
    # 新版接口在末尾追加 trade_id
    optional_fields=(("trade_id", as_int),),
)

SPREAD_RECORD = RecordSchema(
    name="spread",
    fields=(
        ("time", as_timestamp),
        ("bid", as_decimal),
        ("ask", as_decimal),
    ),
)

BOOK_RECORD = RecordSchema(
    name="order book",
    fields=(
        ("price", as_decimal),
        ("volume", as_decimal),
        ("timestamp", as_timestamp),
    ),
)


def parse_envelope(raw: bytes) -> Envelope:
    """解析响应信封"""
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise KrakenDecodeError(f"response is not valid JSON: {e}") from None

    if not isinstance(payload, dict):
        raise KrakenDecodeError("response envelope is not a JSON object")

    errors = payload.get("error")
    if errors is None:
        errors = []
    if not isinstance(errors, list) or not all(isinstance(e, str) for e in errors):
        raise KrakenDecodeError(f"response error field is not a list of strings: {errors!r}")

    return Envelope(error=errors, result=payload.get("result"))


def _checked_result(raw: bytes, method: Optional[str]) -> Any:
    envelope = parse_envelope(raw)
    if envelope.error:
        raise KrakenAPIError(envelope.error, method=method)
    return envelope.result


def decode_raw(raw: bytes, method: Optional[str] = None) -> Any:
    """
    解析响应并返回未经类型转换的 result

    Args:
        raw: 响应体
        method: 接口名（用于错误信息）

    Returns:
        result 字段（dict / list / 标量）
    """
    return _checked_result(raw, method)


def decode_typed(raw: bytes, parse: Callable[[Any], T], method: Optional[str] = None) -> T:
    """
    解析响应并将 result 转换为指定类型

    Args:
        raw: 响应体
        parse: result -> 结果类型 的转换函数
        method: 接口名（用于错误信息）

    Returns:
        parse(result) 的返回值
    """
    return parse(_checked_result(raw, method))


def object_parser(model: Any) -> Callable[[Any], Any]:
    """为带 from_dict 的数据类生成 result 解析函数"""
    def _parse(result: Any) -> Any:
        return model.from_dict(as_mapping(result, "result"), "result")
    return _parse


def _pair_value(result: Any, pair: str) -> Tuple[Mapping[str, Any], Any]:
    data = as_mapping(result, "result")
    if pair not in data:
        raise KrakenDecodeError(f"invalid response: pair '{pair}' missing from result")
    return data, data[pair]


def _pair_records(result: Any, pair: str) -> Tuple[Mapping[str, Any], Sequence[Any]]:
    data, rows = _pair_value(result, pair)
    return data, as_list(rows, f"result.{pair}")


def reshape_depth(result: Any, pair: str) -> OrderBook:
    """{pair: {"asks": [...], "bids": [...]}} -> OrderBook"""
    _, value = _pair_value(result, pair)
    book = as_mapping(value, f"result.{pair}")

    def _side(key: str) -> List[OrderBookEntry]:
        rows = required(book, key, as_list, f"result.{pair}")
        return [
            OrderBookEntry(**BOOK_RECORD.decode(row, f"result.{pair}.{key}[{i}]"))
            for i, row in enumerate(rows)
        ]

    return OrderBook(asks=_side("asks"), bids=_side("bids"))


def reshape_ohlc(result: Any, pair: str) -> OHLCResponse:
    """{pair: [[time, open, high, low, close, vwap, volume, count], ...], "last": 数字}"""
    data, rows = _pair_records(result, pair)
    candles = [OHLC(**OHLC_RECORD.decode(row, f"result.{pair}[{i}]")) for i, row in enumerate(rows)]
    return OHLCResponse(
        pair=pair,
        ohlc=candles,
        last=required(data, "last", as_timestamp, "result"),
    )


def reshape_trades(result: Any, pair: str) -> TradesResponse:
    """{pair: [[price, volume, time, side, type, misc(, trade_id)], ...], "last": "字符串整数"}"""
    data, rows = _pair_records(result, pair)
    trades = []
    for i, row in enumerate(rows):
        record = TRADE_RECORD.decode(row, f"result.{pair}[{i}]")
        trades.append(TradeInfo(
            price=record["price"],
            price_float=float(record["price"]),
            volume=record["volume"],
            volume_float=float(record["volume"]),
            time=record["time"],
            buy=record["side"] == BUY,
            sell=record["side"] == SELL,
            market=record["order_type"] == MARKET,
            limit=record["order_type"] == LIMIT,
            miscellaneous=record["miscellaneous"],
            trade_id=record.get("trade_id"),
        ))
    return TradesResponse(
        pair=pair,
        last=required(data, "last", as_int_string, "result"),
        trades=trades,
    )


def reshape_spread(result: Any, pair: str) -> SpreadResponse:
    """{pair: [[time, bid, ask], ...], "last": 数字}"""
    data, rows = _pair_records(result, pair)
    spreads = [SpreadInfo(**SPREAD_RECORD.decode(row, f"result.{pair}[{i}]")) for i, row in enumerate(rows)]
    return SpreadResponse(
        pair=pair,
        spreads=spreads,
        last=required(data, "last", as_timestamp, "result"),
    )
