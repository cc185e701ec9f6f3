"""
TOPS feed dispatch table.

TOPS 1.5/1.6 carries top-of-book quotes, trades, official prices and
auction information. Tags not listed here, including the DEEP-only ones,
decode to Unsupported.
"""

from typing import Union

from ..formats.message_types import MessageType
from ..formats.segment_header import CHANNEL_ID, MessageProtocol
from .types import (
    AuctionInformation,
    OfficialPrice,
    OperationalHaltStatus,
    QuoteUpdate,
    SecurityDirectory,
    ShortSalePriceTestStatus,
    SystemEvent,
    TradeBreak,
    TradeReport,
    TradingStatus,
    Unsupported,
)


FEED_NAME = 'TOPS'
PROTOCOL_IDS = (MessageProtocol.TOPS_1_5, MessageProtocol.TOPS_1_6)

TopsMessage = Union[
    SystemEvent,
    SecurityDirectory,
    TradingStatus,
    OperationalHaltStatus,
    ShortSalePriceTestStatus,
    QuoteUpdate,
    TradeReport,
    TradeBreak,
    OfficialPrice,
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
    # Trading
    MessageType.QUOTE_UPDATE: QuoteUpdate,
    MessageType.TRADE_REPORT: TradeReport,
    MessageType.TRADE_BREAK: TradeBreak,
    MessageType.OFFICIAL_PRICE: OfficialPrice,
    # Auction
    MessageType.AUCTION_INFORMATION: AuctionInformation,
}


def decode(buf: bytes, legacy_short_sale_status: bool = False) -> TopsMessage:
    """Decode one TOPS message block."""
    msg_cls = DISPATCH.get(buf[0]) if len(buf) else None
    if msg_cls is None:
        return Unsupported.from_bytes(buf)
    if msg_cls is ShortSalePriceTestStatus:
        return msg_cls.decode(buf, legacy=legacy_short_sale_status)
    return msg_cls.decode(buf)


__all__ = ['FEED_NAME', 'CHANNEL_ID', 'PROTOCOL_IDS', 'DISPATCH', 'TopsMessage', 'decode']
