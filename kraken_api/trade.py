"""
交易相关 API（下单、撤单）
"""
from typing import Optional

from .decoder import object_parser
from .kraken_client import KrakenClient
from .models import AddOrderResponse, CancelOrderResponse


class TradeAPI:
    """交易相关 API（需要认证）"""

    def __init__(self, client: KrakenClient):
        self.client = client

    def add_order(
        self,
        pair: str,
        direction: str,  # "buy" or "sell"
        order_type: str,  # "market", "limit", "stop-loss", ...
        volume: str,
        price: Optional[str] = None,
        price2: Optional[str] = None,
        leverage: Optional[str] = None,
        oflags: Optional[str] = None,
        starttm: Optional[str] = None,
        expiretm: Optional[str] = None,
        userref: Optional[int] = None,
        validate: Optional[bool] = None,
        close_order_type: Optional[str] = None,
        close_price: Optional[str] = None,
        close_price2: Optional[str] = None,
        trading_agreement: Optional[str] = None,
    ) -> AddOrderResponse:
        """
        创建订单
        POST /0/private/AddOrder

        Args:
            pair: 交易对（如 XBTUSD）
            direction: 订单方向 ("buy" 或 "sell")
            order_type: 订单类型 ("market", "limit", "stop-loss" 等)
            volume: 订单数量（十进制字符串）
            price: 价格（限价单必需）
            price2: 第二价格（止损限价等订单类型使用）
            leverage: 杠杆（可选）
            oflags: 订单标记，逗号分隔（如 "post,fcib"）
            starttm: 生效时间（可选）
            expiretm: 过期时间（可选）
            userref: 用户自定义 ID（可选）
            validate: 只校验不下单（可选）
            close_order_type: 成交后自动挂出的平仓单类型（可选）
            close_price: 平仓单价格（可选）
            close_price2: 平仓单第二价格（可选）
            trading_agreement: 德国用户需要传 "agree"

        Returns:
            订单描述与 txid 列表
        """
        data = {
            "pair": pair,
            "type": direction,
            "ordertype": order_type,
            "volume": volume,
        }

        if price:
            data["price"] = price
        if price2:
            data["price2"] = price2
        if leverage:
            data["leverage"] = leverage
        if oflags:
            data["oflags"] = oflags
        if starttm:
            data["starttm"] = starttm
        if expiretm:
            data["expiretm"] = expiretm
        if userref is not None:
            data["userref"] = str(userref)
        if validate is not None:
            data["validate"] = str(validate).lower()
        if close_order_type:
            data["close[ordertype]"] = close_order_type
        if close_price:
            data["close[price]"] = close_price
        if close_price2:
            data["close[price2]"] = close_price2
        if trading_agreement:
            data["trading_agreement"] = trading_agreement

        return self.client.query_private_typed("AddOrder", object_parser(AddOrderResponse), data)

    def cancel_order(self, txid: str) -> CancelOrderResponse:
        """
        取消订单
        POST /0/private/CancelOrder

        Args:
            txid: 订单 txid 或 userref

        Returns:
            撤销数量及是否仍在处理中
        """
        return self.client.query_private_typed(
            "CancelOrder", object_parser(CancelOrderResponse), {"txid": txid}
        )
