"""
iextp v1.0 - Decoder for the IEX Transport Protocol (TOPS and DEEP feeds).

This package provides:
- formats: Primitive codecs, segment header, message type tags
- messages: Typed message blocks and per-feed dispatch tables
- decoder: decode_message, segment iteration, feed detection
- reader: Segment files
- config: YAML configuration with environment variable support
- cli: Command-line interface
"""

__version__ = "1.0.0"

from .errors import (
    ErrorCode,
    IEXTPError,
    TruncatedBufferError,
    TruncatedSegmentError,
    MalformedNumericError,
    UnknownProtocolError,
    ConfigError,
)
from .formats import (
    SegmentHeader,
    HEADER_SIZE,
    MessageProtocol,
    MessageType,
    decode_segment_header,
)
from .messages import (
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
from .decoder import (
    Feed,
    Framing,
    Segment,
    SegmentIterator,
    Decoder,
    decode_message,
    decode_segment,
    iter_segment,
    feed_for_protocol,
)
from .reader import SegmentReader, SegmentFile
from .config import DecoderConfig, load_config

__all__ = [
    # Version
    '__version__',
    # Errors
    'ErrorCode',
    'IEXTPError',
    'TruncatedBufferError',
    'TruncatedSegmentError',
    'MalformedNumericError',
    'UnknownProtocolError',
    'ConfigError',
    # Formats
    'SegmentHeader',
    'HEADER_SIZE',
    'MessageProtocol',
    'MessageType',
    'decode_segment_header',
    # Messages
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
    # Decoder
    'Feed',
    'Framing',
    'Segment',
    'SegmentIterator',
    'Decoder',
    'decode_message',
    'decode_segment',
    'iter_segment',
    'feed_for_protocol',
    # Reader
    'SegmentReader',
    'SegmentFile',
    # Config
    'DecoderConfig',
    'load_config',
]
