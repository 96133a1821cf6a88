"""
账户相关 API
"""
from typing import Dict, Optional, Sequence, Union

from .decoder import object_parser
from .kraken_client import KrakenClient
from .request import comma_list
from .models import (
    ClosedOrdersResponse,
    LedgerEntry,
    LedgersResponse,
    OpenOrdersResponse,
    Order,
    Position,
    TradeBalance,
    TradeHistoryEntry,
    TradesHistoryResponse,
    TradeVolume,
    parse_balance,
    parse_ledger_entries,
    parse_orders,
    parse_positions,
    parse_trade_entries,
)


class AccountAPI:
    """账户相关 API（需要认证）"""

    def __init__(self, client: KrakenClient):
        self.client = client

    def get_balance(self) -> Dict[str, str]:
        """
        获取账户余额
        POST /0/private/Balance

        Returns:
            资产名 -> 余额（十进制字符串）
        """
        return self.client.query_private_typed("Balance", parse_balance)

    def get_trade_balance(self, asset: Optional[str] = None) -> TradeBalance:
        """
        获取交易余额（保证金、权益、未实现盈亏等）
        POST /0/private/TradeBalance

        Args:
            asset: 计价资产（可选，默认 ZUSD）
        """
        params = {}
        if asset:
            params["asset"] = asset

        return self.client.query_private_typed("TradeBalance", object_parser(TradeBalance), params)

    def get_open_orders(
        self,
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
    ) -> OpenOrdersResponse:
        """
        获取当前挂单
        POST /0/private/OpenOrders

        Args:
            trades: 是否返回相关成交 ID（可选）
            userref: 按用户自定义 ID 过滤（可选）
        """
        params = {}
        if trades is not None:
            params["trades"] = str(trades).lower()
        if userref is not None:
            params["userref"] = str(userref)

        return self.client.query_private_typed("OpenOrders", object_parser(OpenOrdersResponse), params)

    def get_closed_orders(
        self,
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        ofs: Optional[int] = None,
        closetime: Optional[str] = None,
    ) -> ClosedOrdersResponse:
        """
        获取已关闭订单
        POST /0/private/ClosedOrders

        Args:
            trades: 是否返回相关成交 ID（可选）
            userref: 按用户自定义 ID 过滤（可选）
            start: 开始时间（Unix 时间戳或订单 txid，可选）
            end: 结束时间（Unix 时间戳或订单 txid，可选）
            ofs: 分页偏移（可选）
            closetime: 使用的时间类型 open / close / both（可选）

        Returns:
            ClosedOrdersResponse，count 为符合条件的总数
        """
        params = {}
        if trades is not None:
            params["trades"] = str(trades).lower()
        if userref is not None:
            params["userref"] = str(userref)
        if start:
            params["start"] = str(start)
        if end:
            params["end"] = str(end)
        if ofs is not None:
            params["ofs"] = str(ofs)
        if closetime:
            params["closetime"] = closetime

        return self.client.query_private_typed("ClosedOrders", object_parser(ClosedOrdersResponse), params)

    def query_orders(
        self,
        txids: Union[str, Sequence[str]],
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
    ) -> Dict[str, Order]:
        """
        查询指定订单
        POST /0/private/QueryOrders

        Args:
            txids: 订单 txid 列表（最多 50 个）
            trades: 是否返回相关成交 ID（可选）
            userref: 按用户自定义 ID 过滤（可选）

        Returns:
            txid -> Order
        """
        params = {"txid": comma_list(txids)}
        if trades is not None:
            params["trades"] = str(trades).lower()
        if userref is not None:
            params["userref"] = str(userref)

        return self.client.query_private_typed("QueryOrders", parse_orders, params)

    def get_trades_history(
        self,
        type: Optional[str] = None,
        trades: Optional[bool] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        ofs: Optional[int] = None,
    ) -> TradesHistoryResponse:
        """
        获取成交历史
        POST /0/private/TradesHistory

        Args:
            type: 成交类型（all / any position / closed position / closing position / no position，可选）
            trades: 是否返回持仓相关成交 ID（可选）
            start: 开始时间（Unix 时间戳或成交 txid，可选）
            end: 结束时间（Unix 时间戳或成交 txid，可选）
            ofs: 分页偏移（可选）
        """
        params = {}
        if type:
            params["type"] = type
        if trades is not None:
            params["trades"] = str(trades).lower()
        if start:
            params["start"] = str(start)
        if end:
            params["end"] = str(end)
        if ofs is not None:
            params["ofs"] = str(ofs)

        return self.client.query_private_typed("TradesHistory", object_parser(TradesHistoryResponse), params)

    def query_trades(
        self,
        txids: Union[str, Sequence[str]],
        trades: Optional[bool] = None,
    ) -> Dict[str, TradeHistoryEntry]:
        """
        查询指定成交
        POST /0/private/QueryTrades
        """
        params = {"txid": comma_list(txids)}
        if trades is not None:
            params["trades"] = str(trades).lower()

        return self.client.query_private_typed("QueryTrades", parse_trade_entries, params)

    def get_open_positions(
        self,
        txids: Optional[Union[str, Sequence[str]]] = None,
        docalcs: Optional[bool] = None,
    ) -> Dict[str, Position]:
        """
        获取未平仓的保证金持仓
        POST /0/private/OpenPositions

        Args:
            txids: 按持仓 txid 过滤（可选）
            docalcs: 是否计算盈亏（可选）
        """
        params = {}
        if txids:
            params["txid"] = comma_list(txids)
        if docalcs is not None:
            params["docalcs"] = str(docalcs).lower()

        return self.client.query_private_typed("OpenPositions", parse_positions, params)

    def get_ledgers(
        self,
        asset: Optional[Union[str, Sequence[str]]] = None,
        aclass: Optional[str] = None,
        type: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        ofs: Optional[int] = None,
    ) -> LedgersResponse:
        """
        获取账本流水
        POST /0/private/Ledgers

        Args:
            asset: 资产列表（可选，默认全部）
            aclass: 资产类别（可选，默认 currency）
            type: 流水类型（all / deposit / withdrawal / trade / margin 等，可选）
            start: 开始时间（Unix 时间戳或流水 ID，可选）
            end: 结束时间（Unix 时间戳或流水 ID，可选）
            ofs: 分页偏移（可选）
        """
        params = {}
        if asset:
            params["asset"] = comma_list(asset)
        if aclass:
            params["aclass"] = aclass
        if type:
            params["type"] = type
        if start:
            params["start"] = str(start)
        if end:
            params["end"] = str(end)
        if ofs is not None:
            params["ofs"] = str(ofs)

        return self.client.query_private_typed("Ledgers", object_parser(LedgersResponse), params)

    def query_ledgers(self, ids: Union[str, Sequence[str]]) -> Dict[str, LedgerEntry]:
        """
        查询指定账本流水
        POST /0/private/QueryLedgers
        """
        params = {"id": comma_list(ids)}
        return self.client.query_private_typed("QueryLedgers", parse_ledger_entries, params)

    def get_trade_volume(
        self,
        pairs: Optional[Union[str, Sequence[str]]] = None,
        fee_info: Optional[bool] = None,
    ) -> TradeVolume:
        """
        获取 30 天交易量及手续费等级
        POST /0/private/TradeVolume

        Args:
            pairs: 需要返回手续费信息的交易对（可选）
            fee_info: 是否返回手续费信息（可选）
        """
        params = {}
        if pairs:
            params["pair"] = comma_list(pairs)
        if fee_info is not None:
            params["fee-info"] = str(fee_info).lower()

        return self.client.query_private_typed("TradeVolume", object_parser(TradeVolume), params)
