"""
Typed IEXTP message blocks.

Each message type is a frozen dataclass with a fixed block SIZE and a
decode() classmethod that reads fields at fixed offsets through the
primitive codecs. Offsets are from the start of the block, tag byte
included.

Decoders accept buffers longer than SIZE (trailing bytes are ignored) and
raise TruncatedBufferError for shorter ones.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import pandas as pd

from ..formats.message_types import MessageType, PriceLevelSide
from ..formats.primitives import (
    decode_ascii_trimmed,
    decode_event_time,
    decode_i64,
    decode_price,
    decode_system_timestamp,
    decode_u32,
    require_length,
)


@dataclass(frozen=True)
class Message:
    """Common base for all decoded message blocks."""

    message_type: int

    SIZE = 0

    @property
    def name(self) -> str:
        return MessageType.name(self.message_type)

    @classmethod
    def _check(cls, buf: bytes) -> None:
        require_length(buf, cls.SIZE, cls.__name__)

    def to_dict(self) -> Dict[str, Any]:
        """Field values converted to JSON-safe types."""
        out: Dict[str, Any] = {'type': type(self).__name__}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, pd.Timestamp):
                value = value.isoformat()
            elif isinstance(value, bytes):
                value = value.hex()
            out[f.name] = value
        return out


# ---------------------------------------------------------------------------
# Administrative messages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SystemEvent(Message):
    """
    System-wide trading session event.

    Layout (10 bytes):
        0     type
        1     system_event (see SystemEventType)
        2-9   timestamp
    """
    system_event: int
    timestamp: pd.Timestamp

    SIZE = 10

    @classmethod
    def decode(cls, buf: bytes) -> 'SystemEvent':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            system_event=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
        )


@dataclass(frozen=True)
class SecurityDirectory(Message):
    """
    Reference data for an IEX-listed security.

    Layout (31 bytes):
        0       type
        1       flags (0x80 test, 0x40 when issued, 0x20 ETP)
        2-9     timestamp
        10-17   symbol
        18-21   round_lot_size
        22-29   adjusted_poc_price
        30      luld_tier (see LULDTier)
    """
    flags: int
    timestamp: pd.Timestamp
    symbol: str
    round_lot_size: int
    adjusted_poc_price: float
    luld_tier: int

    SIZE = 31

    @classmethod
    def decode(cls, buf: bytes) -> 'SecurityDirectory':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            flags=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            round_lot_size=decode_u32(buf[18:22]),
            adjusted_poc_price=decode_price(buf[22:30]),
            luld_tier=buf[30],
        )

    @property
    def is_test_security(self) -> bool:
        return bool(self.flags & 0x80)

    @property
    def is_when_issued(self) -> bool:
        return bool(self.flags & 0x40)

    @property
    def is_etp(self) -> bool:
        return bool(self.flags & 0x20)


@dataclass(frozen=True)
class TradingStatus(Message):
    """
    Trading status of a security.

    The reason is populated for IEX-listed securities when the status is
    halted or in an order acceptance period, and blank otherwise.

    Layout (22 bytes):
        0       type
        1       trading_status
        2-9     timestamp
        10-17   symbol
        18-21   reason
    """
    trading_status: int
    timestamp: pd.Timestamp
    symbol: str
    reason: str

    SIZE = 22

    @classmethod
    def decode(cls, buf: bytes) -> 'TradingStatus':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            trading_status=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            reason=decode_ascii_trimmed(buf[18:22]),
        )


@dataclass(frozen=True)
class OperationalHaltStatus(Message):
    """IEX-specific operational halt (18 bytes: type, status, ts, symbol)."""
    operational_halt_status: int
    timestamp: pd.Timestamp
    symbol: str

    SIZE = 18

    @classmethod
    def decode(cls, buf: bytes) -> 'OperationalHaltStatus':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            operational_halt_status=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
        )


@dataclass(frozen=True)
class ShortSalePriceTestStatus(Message):
    """
    Reg SHO short sale price test status.

    Layout (19 bytes):
        0       type
        1       status (nonzero = in effect)
        2-9     timestamp
        10-17   symbol
        18      detail

    With legacy=True the status is read from byte 0 (the type tag) as older
    decoders did, which makes it true for every real message.
    """
    short_sale_price_test_status: bool
    timestamp: pd.Timestamp
    symbol: str
    detail: int

    SIZE = 19

    @classmethod
    def decode(cls, buf: bytes, legacy: bool = False) -> 'ShortSalePriceTestStatus':
        cls._check(buf)
        status_byte = buf[0] if legacy else buf[1]
        return cls(
            message_type=buf[0],
            short_sale_price_test_status=status_byte != 0x00,
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            detail=buf[18],
        )


@dataclass(frozen=True)
class SecurityEvent(Message):
    """Opening/closing process complete (DEEP, 18 bytes)."""
    security_event: int
    timestamp: pd.Timestamp
    symbol: str

    SIZE = 18

    @classmethod
    def decode(cls, buf: bytes) -> 'SecurityEvent':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            security_event=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
        )


# ---------------------------------------------------------------------------
# Trading messages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QuoteUpdate(Message):
    """
    Top-of-book quote (TOPS).

    Layout (42 bytes):
        0       type
        1       flags
        2-9     timestamp
        10-17   symbol
        18-21   bid_size
        22-29   bid_price
        30-37   ask_price
        38-41   ask_size
    """
    flags: int
    timestamp: pd.Timestamp
    symbol: str
    bid_size: int
    bid_price: float
    ask_price: float
    ask_size: int

    SIZE = 42

    @classmethod
    def decode(cls, buf: bytes) -> 'QuoteUpdate':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            flags=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            bid_size=decode_u32(buf[18:22]),
            bid_price=decode_price(buf[22:30]),
            ask_price=decode_price(buf[30:38]),
            ask_size=decode_u32(buf[38:42]),
        )


@dataclass(frozen=True)
class PriceLevelUpdate(Message):
    """
    Aggregated size at a price level (DEEP).

    The side of book is the tag itself: 0x38 buy, 0x35 sell.

    Layout (30 bytes):
        0       type (side)
        1       event_flags (1 = event processing in progress)
        2-9     timestamp
        10-17   symbol
        18-21   size
        22-29   price
    """
    event_flags: int
    timestamp: pd.Timestamp
    symbol: str
    size: int
    price: float

    SIZE = 30

    @classmethod
    def decode(cls, buf: bytes) -> 'PriceLevelUpdate':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            event_flags=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            size=decode_u32(buf[18:22]),
            price=decode_price(buf[22:30]),
        )

    @property
    def side(self) -> PriceLevelSide:
        return PriceLevelSide(self.message_type)

    @property
    def is_buy(self) -> bool:
        return self.message_type == PriceLevelSide.BUY


@dataclass(frozen=True)
class _Trade(Message):
    """
    Layout shared by TradeReport and TradeBreak.

    Layout (38 bytes):
        0       type
        1       sale_condition_flags
        2-9     timestamp
        10-17   symbol
        18-21   size
        22-29   price
        30-37   trade_id (signed)
    """
    sale_condition_flags: int
    timestamp: pd.Timestamp
    symbol: str
    size: int
    price: float
    trade_id: int

    SIZE = 38

    @classmethod
    def decode(cls, buf: bytes):
        cls._check(buf)
        return cls(
            message_type=buf[0],
            sale_condition_flags=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            size=decode_u32(buf[18:22]),
            price=decode_price(buf[22:30]),
            trade_id=decode_i64(buf[30:38]),
        )


@dataclass(frozen=True)
class TradeReport(_Trade):
    """Execution on IEX."""


@dataclass(frozen=True)
class TradeBreak(_Trade):
    """Broken execution. Same layout as TradeReport."""


@dataclass(frozen=True)
class OfficialPrice(Message):
    """IEX official opening or closing price (26 bytes)."""
    price_type: int
    timestamp: pd.Timestamp
    symbol: str
    official_price: float

    SIZE = 26

    @classmethod
    def decode(cls, buf: bytes) -> 'OfficialPrice':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            price_type=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            official_price=decode_price(buf[18:26]),
        )


# ---------------------------------------------------------------------------
# Auction messages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AuctionInformation(Message):
    """
    Auction imbalance and clearing information.

    Layout (80 bytes):
        0       type
        1       auction_type
        2-9     timestamp
        10-17   symbol
        18-21   paired_shares
        22-29   reference_price
        30-37   indicative_clearing_price
        38-41   imbalance_shares
        42      imbalance_side
        43      extension_number
        44-47   scheduled_auction_time (whole seconds)
        48-55   auction_book_clearing_price
        56-63   collar_reference_price
        64-71   lower_auction_collar
        72-79   upper_auction_collar
    """
    auction_type: int
    timestamp: pd.Timestamp
    symbol: str
    paired_shares: int
    reference_price: float
    indicative_clearing_price: float
    imbalance_shares: int
    imbalance_side: int
    extension_number: int
    scheduled_auction_time: pd.Timestamp
    auction_book_clearing_price: float
    collar_reference_price: float
    lower_auction_collar: float
    upper_auction_collar: float

    SIZE = 80

    @classmethod
    def decode(cls, buf: bytes) -> 'AuctionInformation':
        cls._check(buf)
        return cls(
            message_type=buf[0],
            auction_type=buf[1],
            timestamp=decode_system_timestamp(buf[2:10]),
            symbol=decode_ascii_trimmed(buf[10:18]),
            paired_shares=decode_u32(buf[18:22]),
            reference_price=decode_price(buf[22:30]),
            indicative_clearing_price=decode_price(buf[30:38]),
            imbalance_shares=decode_u32(buf[38:42]),
            imbalance_side=buf[42],
            extension_number=buf[43],
            scheduled_auction_time=decode_event_time(buf[44:48]),
            auction_book_clearing_price=decode_price(buf[48:56]),
            collar_reference_price=decode_price(buf[56:64]),
            lower_auction_collar=decode_price(buf[64:72]),
            upper_auction_collar=decode_price(buf[72:80]),
        )


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Unsupported:
    """
    Message block whose tag is not in the feed's dispatch table.

    The raw bytes are copied so the caller's buffer can be reused.
    """
    message_type: Optional[int]
    data: bytes

    @classmethod
    def from_bytes(cls, buf: bytes) -> 'Unsupported':
        data = bytes(buf)
        return cls(message_type=data[0] if data else None, data=data)

    @property
    def name(self) -> str:
        if self.message_type is None:
            return 'UNKNOWN(empty)'
        return MessageType.name(self.message_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'Unsupported',
            'message_type': self.message_type,
            'data': self.data.hex(),
        }
