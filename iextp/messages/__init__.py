"""Typed message blocks and the per-feed dispatch tables."""

from .types import (
    Message,
    SystemEvent,
    SecurityDirectory,
    TradingStatus,
    OperationalHaltStatus,
    ShortSalePriceTestStatus,
    SecurityEvent,
    QuoteUpdate,
    PriceLevelUpdate,
    TradeReport,
    TradeBreak,
    OfficialPrice,
    AuctionInformation,
    Unsupported,
)
from . import tops, deep

__all__ = [
    'Message',
    'SystemEvent',
    'SecurityDirectory',
    'TradingStatus',
    'OperationalHaltStatus',
    'ShortSalePriceTestStatus',
    'SecurityEvent',
    'QuoteUpdate',
    'PriceLevelUpdate',
    'TradeReport',
    'TradeBreak',
    'OfficialPrice',
    'AuctionInformation',
    'Unsupported',
    'tops',
    'deep',
]
