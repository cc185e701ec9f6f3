"""Wire format definitions: primitive codecs, segment header, type tags."""

from .primitives import (
    decode_ascii_trimmed,
    decode_price,
    decode_u32,
    decode_u64,
    decode_i64,
    decode_system_timestamp,
    decode_event_time,
)
from .segment_header import (
    SegmentHeader,
    HEADER_SIZE,
    CHANNEL_ID,
    MessageProtocol,
    decode_segment_header,
)
from .message_types import (
    MessageType,
    SystemEventType,
    LULDTier,
    SecurityEventType,
    PriceLevelSide,
)

__all__ = [
    'decode_ascii_trimmed',
    'decode_price',
    'decode_u32',
    'decode_u64',
    'decode_i64',
    'decode_system_timestamp',
    'decode_event_time',
    'SegmentHeader',
    'HEADER_SIZE',
    'CHANNEL_ID',
    'MessageProtocol',
    'decode_segment_header',
    'MessageType',
    'SystemEventType',
    'LULDTier',
    'SecurityEventType',
    'PriceLevelSide',
]
