"""
DEEP feed dispatch table.

DEEP 1.0 replaces TOPS quotes with aggregated price level updates, one tag
per side of book, and adds security events. Tag 0x51 (TOPS QuoteUpdate) is
not part of DEEP and decodes to Unsupported here.
"""

from typing import Union

from ..formats.message_types import MessageType
from ..formats.segment_header import CHANNEL_ID, MessageProtocol
from .types import (
    AuctionInformation,
    OfficialPrice,
    OperationalHaltStatus,
    PriceLevelUpdate,
    SecurityDirectory,
    SecurityEvent,
    ShortSalePriceTestStatus,
    SystemEvent,
    TradeBreak,
    TradeReport,
    TradingStatus,
    Unsupported,
)


FEED_NAME = 'DEEP'
PROTOCOL_IDS = (MessageProtocol.DEEP_1_0,)

DeepMessage = Union[
    SystemEvent,
    SecurityDirectory,
    TradingStatus,
    OperationalHaltStatus,
    ShortSalePriceTestStatus,
    SecurityEvent,
    PriceLevelUpdate,
    TradeReport,
    OfficialPrice,
    TradeBreak,
    AuctionInformation,
    Unsupported,
]

DISPATCH = {
    # Administrative
    MessageType.SYSTEM_EVENT: SystemEvent,
    MessageType.SECURITY_DIRECTORY: SecurityDirectory,
    MessageType.TRADING_STATUS: TradingStatus,
    MessageType.OPERATIONAL_HALT_STATUS: OperationalHaltStatus,
    MessageType.SHORT_SALE_PRICE_TEST_STATUS: ShortSalePriceTestStatus,
    MessageType.SECURITY_EVENT: SecurityEvent,
    # Trading
    MessageType.PRICE_LEVEL_UPDATE_BUY: PriceLevelUpdate,
    MessageType.PRICE_LEVEL_UPDATE_SELL: PriceLevelUpdate,
    MessageType.TRADE_REPORT: TradeReport,
    MessageType.OFFICIAL_PRICE: OfficialPrice,
    MessageType.TRADE_BREAK: TradeBreak,
    # Auction
    MessageType.AUCTION_INFORMATION: AuctionInformation,
}


def decode(buf: bytes, legacy_short_sale_status: bool = False) -> DeepMessage:
    """Decode one DEEP message block."""
    msg_cls = DISPATCH.get(buf[0]) if len(buf) else None
    if msg_cls is None:
        return Unsupported.from_bytes(buf)
    if msg_cls is ShortSalePriceTestStatus:
        return msg_cls.decode(buf, legacy=legacy_short_sale_status)
    return msg_cls.decode(buf)


__all__ = ['FEED_NAME', 'CHANNEL_ID', 'PROTOCOL_IDS', 'DISPATCH', 'DeepMessage', 'decode']
