"""
公共 API（服务器时间、资产、行情、K线、深度、成交等）
"""
from typing import Dict, Optional, Sequence, Union

from .decoder import object_parser, reshape_depth, reshape_ohlc, reshape_spread, reshape_trades
from .kraken_client import KrakenClient
from .request import comma_list
from .models import (
    AssetInfo,
    AssetPairInfo,
    OHLCResponse,
    OrderBook,
    PairTicker,
    ServerTime,
    SpreadResponse,
    TradesResponse,
    parse_asset_pairs,
    parse_assets,
    parse_ticker,
)


class PublicAPI:
    """公共 API（无需认证）"""

    def __init__(self, client: KrakenClient):
        self.client = client

    def get_server_time(self) -> ServerTime:
        """
        获取服务器时间
        POST /0/public/Time
        """
        return self.client.query_public_typed("Time", object_parser(ServerTime))

    def get_assets(self, assets: Optional[Union[str, Sequence[str]]] = None) -> Dict[str, AssetInfo]:
        """
        获取资产信息
        POST /0/public/Assets

        Args:
            assets: 资产列表（可选，不传则返回全部）

        Returns:
            资产名 -> AssetInfo
        """
        params = {}
        if assets:
            params["asset"] = comma_list(assets)

        return self.client.query_public_typed("Assets", parse_assets, params)

    def get_asset_pairs(self, pairs: Optional[Union[str, Sequence[str]]] = None) -> Dict[str, AssetPairInfo]:
        """
        获取交易对信息
        POST /0/public/AssetPairs

        Args:
            pairs: 交易对列表（可选，不传则返回全部）

        Returns:
            交易对名 -> AssetPairInfo
        """
        params = {}
        if pairs:
            params["pair"] = comma_list(pairs)

        return self.client.query_public_typed("AssetPairs", parse_asset_pairs, params)

    def get_ticker(self, *pairs: str) -> Dict[str, PairTicker]:
        """
        获取 Ticker
        POST /0/public/Ticker

        Args:
            pairs: 一个或多个交易对（如 "XBTUSD", "ETHUSD"）

        Returns:
            交易对名 -> PairTicker
        """
        params = {"pair": comma_list(pairs)}
        return self.client.query_public_typed("Ticker", parse_ticker, params)

    def get_ohlc(
        self,
        pair: str,
        interval: Optional[int] = None,
        since: Optional[int] = None,
    ) -> OHLCResponse:
        """
        获取 K 线数据
        POST /0/public/OHLC

        Args:
            pair: 交易对
            interval: K 线间隔（分钟，可选：1, 5, 15, 30, 60, 240, 1440, 10080, 21600）
            since: 返回该游标之后的数据（可选，取上一次结果的 last）

        Returns:
            OHLCResponse，last 可作为下一次请求的 since
        """
        params = {"pair": pair}
        if interval is not None:
            params["interval"] = str(interval)
        if since is not None:
            params["since"] = str(since)

        return self.client.query_public_typed("OHLC", lambda result: reshape_ohlc(result, pair), params)

    def get_depth(self, pair: str, count: Optional[int] = None) -> OrderBook:
        """
        获取订单簿
        POST /0/public/Depth

        Args:
            pair: 交易对
            count: 每一侧的最大档位数（可选）

        Returns:
            OrderBook
        """
        params = {"pair": pair}
        if count is not None:
            params["count"] = str(count)

        return self.client.query_public_typed("Depth", lambda result: reshape_depth(result, pair), params)

    def get_trades(self, pair: str, since: Optional[int] = None) -> TradesResponse:
        """
        获取最近成交
        POST /0/public/Trades

        Args:
            pair: 交易对
            since: 返回该游标之后的成交（可选，取上一次结果的 last）

        Returns:
            TradesResponse
        """
        params = {"pair": pair}
        if since:
            params["since"] = str(since)

        return self.client.query_public_typed("Trades", lambda result: reshape_trades(result, pair), params)

    def get_spread(self, pair: str, since: Optional[int] = None) -> SpreadResponse:
        """
        获取最近买卖价差
        POST /0/public/Spread
        """
        params = {"pair": pair}
        if since is not None:
            params["since"] = str(since)

        return self.client.query_public_typed("Spread", lambda result: reshape_spread(result, pair), params)
