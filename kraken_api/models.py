"""
响应数据结构
============
价格、数量、余额等十进制数值一律保留交易所返回的原始字符串，
浮点数只作为便捷字段（*_float），不能用于记账。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .coerce import (
    as_bool,
    as_decimal,
    as_int,
    as_mapping,
    as_number,
    as_str,
    list_of,
    mapping_of,
    optional,
    required,
)

# Trades 记录中的方向 / 类型标记
BUY = "b"
SELL = "s"
MARKET = "m"
LIMIT = "l"


# ---------------------------------------------------------------------------
# 公共行情
# ---------------------------------------------------------------------------

@dataclass
class ServerTime:
    unixtime: int
    rfc1123: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "ServerTime":
        return cls(
            unixtime=required(data, "unixtime", as_int, where),
            rfc1123=required(data, "rfc1123", as_str, where),
        )


@dataclass
class AssetInfo:
    altname: str
    aclass: str
    decimals: int
    display_decimals: int
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "AssetInfo":
        return cls(
            altname=required(data, "altname", as_str, where),
            aclass=required(data, "aclass", as_str, where),
            decimals=required(data, "decimals", as_int, where),
            display_decimals=required(data, "display_decimals", as_int, where),
            status=optional(data, "status", as_str, where),
        )


@dataclass
class AssetPairInfo:
    altname: str
    base: str
    quote: str
    wsname: Optional[str] = None
    aclass_base: Optional[str] = None
    aclass_quote: Optional[str] = None
    pair_decimals: Optional[int] = None
    lot_decimals: Optional[int] = None
    lot_multiplier: Optional[int] = None
    leverage_buy: List[int] = field(default_factory=list)
    leverage_sell: List[int] = field(default_factory=list)
    # [[成交量, 费率百分比], ...]
    fees: List[List[float]] = field(default_factory=list)
    fees_maker: List[List[float]] = field(default_factory=list)
    fee_volume_currency: Optional[str] = None
    margin_call: Optional[int] = None
    margin_stop: Optional[int] = None
    ordermin: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "AssetPairInfo":
        fee_schedule = list_of(list_of(as_number))
        return cls(
            altname=required(data, "altname", as_str, where),
            base=required(data, "base", as_str, where),
            quote=required(data, "quote", as_str, where),
            wsname=optional(data, "wsname", as_str, where),
            aclass_base=optional(data, "aclass_base", as_str, where),
            aclass_quote=optional(data, "aclass_quote", as_str, where),
            pair_decimals=optional(data, "pair_decimals", as_int, where),
            lot_decimals=optional(data, "lot_decimals", as_int, where),
            lot_multiplier=optional(data, "lot_multiplier", as_int, where),
            leverage_buy=optional(data, "leverage_buy", list_of(as_int), where, []),
            leverage_sell=optional(data, "leverage_sell", list_of(as_int), where, []),
            fees=optional(data, "fees", fee_schedule, where, []),
            fees_maker=optional(data, "fees_maker", fee_schedule, where, []),
            fee_volume_currency=optional(data, "fee_volume_currency", as_str, where),
            margin_call=optional(data, "margin_call", as_int, where),
            margin_stop=optional(data, "margin_stop", as_int, where),
            ordermin=optional(data, "ordermin", as_decimal, where),
        )


@dataclass
class PairTicker:
    """
    单个交易对的 Ticker

    ask / bid: [价格, 整手数量, 数量]
    close: [价格, 数量]
    volume / vwap / low / high: [今日, 近 24 小时]
    trades: [今日成交笔数, 近 24 小时成交笔数]
    """
    ask: List[str]
    bid: List[str]
    close: List[str]
    volume: List[str]
    vwap: List[str]
    trades: List[int]
    low: List[str]
    high: List[str]
    open: str

    @property
    def ask_price(self) -> str:
        return self.ask[0]

    @property
    def bid_price(self) -> str:
        return self.bid[0]

    @property
    def last_price(self) -> str:
        return self.close[0]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "PairTicker":
        decimals = list_of(as_decimal)
        return cls(
            ask=required(data, "a", decimals, where),
            bid=required(data, "b", decimals, where),
            close=required(data, "c", decimals, where),
            volume=required(data, "v", decimals, where),
            vwap=required(data, "p", decimals, where),
            trades=required(data, "t", list_of(as_int), where),
            low=required(data, "l", decimals, where),
            high=required(data, "h", decimals, where),
            open=required(data, "o", as_decimal, where),
        )


@dataclass
class OrderBookEntry:
    price: str
    volume: str
    timestamp: int

    @property
    def price_float(self) -> float:
        return float(self.price)

    @property
    def volume_float(self) -> float:
        return float(self.volume)


@dataclass
class OrderBook:
    asks: List[OrderBookEntry]
    bids: List[OrderBookEntry]


@dataclass
class OHLC:
    time: int
    open: str
    high: str
    low: str
    close: str
    vwap: str
    volume: str
    count: int

    @property
    def close_float(self) -> float:
        return float(self.close)


@dataclass
class OHLCResponse:
    pair: str
    ohlc: List[OHLC]
    last: int


@dataclass
class TradeInfo:
    price: str
    price_float: float
    volume: str
    volume_float: float
    time: int
    buy: bool
    sell: bool
    market: bool
    limit: bool
    miscellaneous: str
    trade_id: Optional[int] = None


@dataclass
class TradesResponse:
    pair: str
    last: int
    trades: List[TradeInfo]


@dataclass
class SpreadInfo:
    time: int
    bid: str
    ask: str


@dataclass
class SpreadResponse:
    pair: str
    spreads: List[SpreadInfo]
    last: int


# ---------------------------------------------------------------------------
# 账户
# ---------------------------------------------------------------------------

@dataclass
class TradeBalance:
    equivalent_balance: str
    trade_balance: str
    margin: str
    unrealized_pnl: str
    cost_basis: str
    valuation: str
    equity: str
    free_margin: str
    margin_level: Optional[str] = None
    unexecuted_value: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "TradeBalance":
        return cls(
            equivalent_balance=required(data, "eb", as_decimal, where),
            trade_balance=required(data, "tb", as_decimal, where),
            margin=required(data, "m", as_decimal, where),
            unrealized_pnl=required(data, "n", as_decimal, where),
            cost_basis=required(data, "c", as_decimal, where),
            valuation=required(data, "v", as_decimal, where),
            equity=required(data, "e", as_decimal, where),
            free_margin=required(data, "mf", as_decimal, where),
            margin_level=optional(data, "ml", as_decimal, where),
            unexecuted_value=optional(data, "uv", as_decimal, where),
        )


@dataclass
class OrderDescription:
    pair: str
    type: str
    ordertype: str
    price: str
    price2: str
    leverage: str
    order: str
    close: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "OrderDescription":
        return cls(
            pair=required(data, "pair", as_str, where),
            type=required(data, "type", as_str, where),
            ordertype=required(data, "ordertype", as_str, where),
            price=required(data, "price", as_decimal, where),
            price2=required(data, "price2", as_decimal, where),
            leverage=required(data, "leverage", as_str, where),
            order=required(data, "order", as_str, where),
            close=optional(data, "close", as_str, where),
        )


@dataclass
class Order:
    status: str
    opentm: float
    description: OrderDescription
    vol: str
    vol_exec: str
    cost: str
    fee: str
    price: str
    misc: str
    oflags: str
    refid: Optional[str] = None
    userref: Optional[int] = None
    closetm: Optional[float] = None
    starttm: Optional[float] = None
    expiretm: Optional[float] = None
    stopprice: Optional[str] = None
    limitprice: Optional[str] = None
    trades: List[str] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "Order":
        descr = required(data, "descr", as_mapping, where)
        return cls(
            status=required(data, "status", as_str, where),
            opentm=required(data, "opentm", as_number, where),
            description=OrderDescription.from_dict(descr, f"{where}.descr"),
            vol=required(data, "vol", as_decimal, where),
            vol_exec=required(data, "vol_exec", as_decimal, where),
            cost=required(data, "cost", as_decimal, where),
            fee=required(data, "fee", as_decimal, where),
            price=required(data, "price", as_decimal, where),
            misc=required(data, "misc", as_str, where),
            oflags=required(data, "oflags", as_str, where),
            refid=optional(data, "refid", as_str, where),
            userref=optional(data, "userref", as_int, where),
            closetm=optional(data, "closetm", as_number, where),
            starttm=optional(data, "starttm", as_number, where),
            expiretm=optional(data, "expiretm", as_number, where),
            stopprice=optional(data, "stopprice", as_decimal, where),
            limitprice=optional(data, "limitprice", as_decimal, where),
            trades=optional(data, "trades", list_of(as_str), where, []),
            reason=optional(data, "reason", as_str, where),
        )


@dataclass
class OpenOrdersResponse:
    open: Dict[str, Order]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "OpenOrdersResponse":
        return cls(open=mapping_of(required(data, "open", as_mapping, where), Order.from_dict, f"{where}.open"))


@dataclass
class ClosedOrdersResponse:
    closed: Dict[str, Order]
    count: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "ClosedOrdersResponse":
        return cls(
            closed=mapping_of(required(data, "closed", as_mapping, where), Order.from_dict, f"{where}.closed"),
            count=required(data, "count", as_int, where),
        )


@dataclass
class TradeHistoryEntry:
    ordertxid: str
    pair: str
    time: float
    type: str
    ordertype: str
    price: str
    cost: str
    fee: str
    vol: str
    margin: str
    misc: str
    postxid: Optional[str] = None
    leverage: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "TradeHistoryEntry":
        return cls(
            ordertxid=required(data, "ordertxid", as_str, where),
            pair=required(data, "pair", as_str, where),
            time=required(data, "time", as_number, where),
            type=required(data, "type", as_str, where),
            ordertype=required(data, "ordertype", as_str, where),
            price=required(data, "price", as_decimal, where),
            cost=required(data, "cost", as_decimal, where),
            fee=required(data, "fee", as_decimal, where),
            vol=required(data, "vol", as_decimal, where),
            margin=required(data, "margin", as_decimal, where),
            misc=required(data, "misc", as_str, where),
            postxid=optional(data, "postxid", as_str, where),
            leverage=optional(data, "leverage", as_str, where),
        )


@dataclass
class TradesHistoryResponse:
    trades: Dict[str, TradeHistoryEntry]
    count: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "TradesHistoryResponse":
        return cls(
            trades=mapping_of(
                required(data, "trades", as_mapping, where), TradeHistoryEntry.from_dict, f"{where}.trades"
            ),
            count=required(data, "count", as_int, where),
        )


@dataclass
class Position:
    ordertxid: str
    pair: str
    time: float
    type: str
    ordertype: str
    cost: str
    fee: str
    vol: str
    vol_closed: str
    margin: str
    misc: str
    oflags: str
    posstatus: Optional[str] = None
    value: Optional[str] = None
    net: Optional[str] = None
    terms: Optional[str] = None
    rollovertm: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "Position":
        return cls(
            ordertxid=required(data, "ordertxid", as_str, where),
            pair=required(data, "pair", as_str, where),
            time=required(data, "time", as_number, where),
            type=required(data, "type", as_str, where),
            ordertype=required(data, "ordertype", as_str, where),
            cost=required(data, "cost", as_decimal, where),
            fee=required(data, "fee", as_decimal, where),
            vol=required(data, "vol", as_decimal, where),
            vol_closed=required(data, "vol_closed", as_decimal, where),
            margin=required(data, "margin", as_decimal, where),
            misc=required(data, "misc", as_str, where),
            oflags=required(data, "oflags", as_str, where),
            posstatus=optional(data, "posstatus", as_str, where),
            value=optional(data, "value", as_decimal, where),
            net=optional(data, "net", as_str, where),
            terms=optional(data, "terms", as_str, where),
            rollovertm=optional(data, "rollovertm", as_str, where),
        )


@dataclass
class LedgerEntry:
    refid: str
    time: float
    type: str
    aclass: str
    asset: str
    amount: str
    fee: str
    balance: str
    subtype: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "LedgerEntry":
        return cls(
            refid=required(data, "refid", as_str, where),
            time=required(data, "time", as_number, where),
            type=required(data, "type", as_str, where),
            aclass=required(data, "aclass", as_str, where),
            asset=required(data, "asset", as_str, where),
            amount=required(data, "amount", as_decimal, where),
            fee=required(data, "fee", as_decimal, where),
            balance=required(data, "balance", as_decimal, where),
            subtype=optional(data, "subtype", as_str, where),
        )


@dataclass
class LedgersResponse:
    ledger: Dict[str, LedgerEntry]
    count: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "LedgersResponse":
        return cls(
            ledger=mapping_of(required(data, "ledger", as_mapping, where), LedgerEntry.from_dict, f"{where}.ledger"),
            count=required(data, "count", as_int, where),
        )


@dataclass
class FeeTier:
    fee: str
    minfee: str
    maxfee: str
    nextfee: Optional[str] = None
    nextvolume: Optional[str] = None
    tiervolume: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "") -> "FeeTier":
        return cls(
            fee=required(data, "fee", as_decimal, where),
            minfee=required(data, "minfee", as_decimal, where),
            maxfee=required(data, "maxfee", as_decimal, where),
            nextfee=optional(data, "nextfee", as_decimal, where),
            nextvolume=optional(data, "nextvolume", as_decimal, where),
            tiervolume=optional(data, "tiervolume", as_decimal, where),
        )


@dataclass
class TradeVolume:
    currency: str
    volume: str
    fees: Dict[str, FeeTier] = field(default_factory=dict)
    fees_maker: Dict[str, FeeTier] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "TradeVolume":
        fees = optional(data, "fees", as_mapping, where, {})
        fees_maker = optional(data, "fees_maker", as_mapping, where, {})
        return cls(
            currency=required(data, "currency", as_str, where),
            volume=required(data, "volume", as_decimal, where),
            fees=mapping_of(fees, FeeTier.from_dict, f"{where}.fees"),
            fees_maker=mapping_of(fees_maker, FeeTier.from_dict, f"{where}.fees_maker"),
        )


# ---------------------------------------------------------------------------
# 交易
# ---------------------------------------------------------------------------

@dataclass
class AddOrderDescription:
    order: str
    close: Optional[str] = None


@dataclass
class AddOrderResponse:
    description: AddOrderDescription
    # validate=True 时交易所不返回 txid
    txids: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "AddOrderResponse":
        descr = required(data, "descr", as_mapping, where)
        return cls(
            description=AddOrderDescription(
                order=required(descr, "order", as_str, f"{where}.descr"),
                close=optional(descr, "close", as_str, f"{where}.descr"),
            ),
            txids=optional(data, "txid", list_of(as_str), where, []),
        )


@dataclass
class CancelOrderResponse:
    count: int
    pending: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "result") -> "CancelOrderResponse":
        return cls(
            count=required(data, "count", as_int, where),
            pending=optional(data, "pending", as_bool, where, False),
        )


# ---------------------------------------------------------------------------
# {id: object} 形式的结果
# ---------------------------------------------------------------------------

def parse_assets(result: Any) -> Dict[str, AssetInfo]:
    return mapping_of(result, AssetInfo.from_dict)


def parse_asset_pairs(result: Any) -> Dict[str, AssetPairInfo]:
    return mapping_of(result, AssetPairInfo.from_dict)


def parse_ticker(result: Any) -> Dict[str, PairTicker]:
    return mapping_of(result, PairTicker.from_dict)


def parse_balance(result: Any) -> Dict[str, str]:
    """资产 -> 余额（十进制字符串）"""
    return {asset: as_decimal(amount, f"result.{asset}") for asset, amount in as_mapping(result, "result").items()}


def parse_orders(result: Any) -> Dict[str, Order]:
    return mapping_of(result, Order.from_dict)


def parse_trade_entries(result: Any) -> Dict[str, TradeHistoryEntry]:
    return mapping_of(result, TradeHistoryEntry.from_dict)


def parse_positions(result: Any) -> Dict[str, Position]:
    return mapping_of(result, Position.from_dict)


def parse_ledger_entries(result: Any) -> Dict[str, LedgerEntry]:
    return mapping_of(result, LedgerEntry.from_dict)
