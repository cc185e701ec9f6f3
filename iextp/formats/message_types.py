"""
Message type tag constants.

The first byte of every message block identifies its type. Tags are shared
between TOPS and DEEP where the layouts agree; QuoteUpdate is TOPS-only and
SecurityEvent/PriceLevelUpdate are DEEP-only.

The fixed block size of each type doubles as the framing length inside a
segment, since blocks carry no length prefix of their own.
"""

from enum import IntEnum


class MessageType:
    """Message type tag constants."""

    # Administrative
    SYSTEM_EVENT = 0x53                 # 'S'
    SECURITY_DIRECTORY = 0x44           # 'D'
    TRADING_STATUS = 0x48               # 'H'
    OPERATIONAL_HALT_STATUS = 0x4F      # 'O'
    SHORT_SALE_PRICE_TEST_STATUS = 0x50  # 'P'
    SECURITY_EVENT = 0x45               # 'E', DEEP only

    # Trading
    QUOTE_UPDATE = 0x51                 # 'Q', TOPS only
    PRICE_LEVEL_UPDATE_BUY = 0x38       # '8', DEEP only
    PRICE_LEVEL_UPDATE_SELL = 0x35      # '5', DEEP only
    TRADE_REPORT = 0x54                 # 'T'
    TRADE_BREAK = 0x42                  # 'B'
    OFFICIAL_PRICE = 0x58               # 'X'

    # Auction
    AUCTION_INFORMATION = 0x41          # 'A'

    SIZES = {
        SYSTEM_EVENT: 10,
        SECURITY_DIRECTORY: 31,
        TRADING_STATUS: 22,
        OPERATIONAL_HALT_STATUS: 18,
        SHORT_SALE_PRICE_TEST_STATUS: 19,
        SECURITY_EVENT: 18,
        QUOTE_UPDATE: 42,
        PRICE_LEVEL_UPDATE_BUY: 30,
        PRICE_LEVEL_UPDATE_SELL: 30,
        TRADE_REPORT: 38,
        TRADE_BREAK: 38,
        OFFICIAL_PRICE: 26,
        AUCTION_INFORMATION: 80,
    }

    NAMES = {
        SYSTEM_EVENT: 'System Event',
        SECURITY_DIRECTORY: 'Security Directory',
        TRADING_STATUS: 'Trading Status',
        OPERATIONAL_HALT_STATUS: 'Operational Halt Status',
        SHORT_SALE_PRICE_TEST_STATUS: 'Short Sale Price Test Status',
        SECURITY_EVENT: 'Security Event',
        QUOTE_UPDATE: 'Quote Update',
        PRICE_LEVEL_UPDATE_BUY: 'Price Level Update (Buy)',
        PRICE_LEVEL_UPDATE_SELL: 'Price Level Update (Sell)',
        TRADE_REPORT: 'Trade Report',
        TRADE_BREAK: 'Trade Break',
        OFFICIAL_PRICE: 'Official Price',
        AUCTION_INFORMATION: 'Auction Information',
    }

    @classmethod
    def name(cls, type_value: int) -> str:
        """Get human-readable name for a message type tag."""
        return cls.NAMES.get(type_value, f'UNKNOWN(0x{type_value:02x})')

    @classmethod
    def size(cls, type_value: int) -> int:
        """Fixed block size for a tag, 0 if unknown."""
        return cls.SIZES.get(type_value, 0)


class SystemEventType(IntEnum):
    """System event codes carried by SystemEvent.system_event."""
    START_OF_MESSAGES = 0x4F
    START_OF_SYSTEM_HOURS = 0x53
    START_OF_REGULAR_MARKET_HOURS = 0x52
    END_OF_REGULAR_MARKET_HOURS = 0x4D
    END_OF_SYSTEM_HOURS = 0x45
    END_OF_MESSAGES = 0x43


class LULDTier(IntEnum):
    """Limit Up-Limit Down price band tier."""
    NOT_APPLICABLE = 0x00
    TIER_1 = 0x01
    TIER_2 = 0x02


class SecurityEventType(IntEnum):
    """Security event codes (DEEP)."""
    OPENING_PROCESS_COMPLETE = 0x4F
    CLOSING_PROCESS_COMPLETE = 0x43


class PriceLevelSide(IntEnum):
    """Side of book, encoded in the PriceLevelUpdate tag itself."""
    BUY = 0x38
    SELL = 0x35
