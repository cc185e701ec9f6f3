"""
Primitive codecs for IEXTP fields.

Every IEXTP field is little-endian. The codecs here turn a byte slice of
known length into a Python value:

    Field            Width  Decoded as
    ---------------  -----  ------------------------------------------
    symbol / string  8 (4)  str, spaces removed
    price            8      int64 / 10000.0
    size             4      uint32
    timestamp        8      uint64 ns since epoch -> UTC pandas.Timestamp
    event time       4      uint32 s since epoch  -> UTC pandas.Timestamp

pandas.Timestamp is used because datetime.datetime stops at microseconds and
the feed carries nanoseconds.

CRITICAL: Every codec checks its length first. A short slice raises
TruncatedBufferError instead of returning garbage.
"""

import struct
from datetime import datetime, timedelta, timezone

import pandas as pd

from ..errors import TruncatedBufferError


PRICE_SCALE = 10000.0

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MAX_NANOS = pd.Timestamp.max.value

_U32 = struct.Struct('<I')
_U64 = struct.Struct('<Q')
_I64 = struct.Struct('<q')


def require_length(buf: bytes, size: int, what: str) -> None:
    """Raise TruncatedBufferError if buf holds fewer than size bytes."""
    if len(buf) < size:
        raise TruncatedBufferError(what, size, len(buf))


def decode_ascii_trimmed(buf: bytes) -> str:
    """
    Decode a space-padded ASCII field.

    Every byte maps to one character (latin-1 is total over 0x00-0xFF) and
    every space is dropped, not only the trailing padding.

    Example:
        decode_ascii_trimmed(b'ZIEXT   ') == 'ZIEXT'
    """
    return bytes(buf).decode('latin-1').replace(' ', '')


def decode_u32(buf: bytes) -> int:
    """Little-endian unsigned 32-bit integer from the first 4 bytes."""
    require_length(buf, _U32.size, 'u32')
    return _U32.unpack_from(buf)[0]


def decode_u64(buf: bytes) -> int:
    """Little-endian unsigned 64-bit integer from the first 8 bytes."""
    require_length(buf, _U64.size, 'u64')
    return _U64.unpack_from(buf)[0]


def decode_i64(buf: bytes) -> int:
    """Little-endian signed 64-bit integer from the first 8 bytes."""
    require_length(buf, _I64.size, 'i64')
    return _I64.unpack_from(buf)[0]


def decode_price(buf: bytes) -> float:
    """
    Decode a fixed-point price.

    Prices are int64 scaled by 10,000. The slice must be exactly 8 bytes.

    Example:
        decode_price(bytes.fromhex('241d0f0000000000')) == 99.05
    """
    if len(buf) != _I64.size:
        raise TruncatedBufferError('price', _I64.size, len(buf))
    return _I64.unpack(buf)[0] / PRICE_SCALE


def timestamp_from_nanos(value: int) -> pd.Timestamp:
    """
    Build a UTC timestamp from nanoseconds since the Unix epoch.

    Every u64 decodes. Values past pandas' nanosecond range (2262-04-11)
    come back at microsecond resolution, dropping the sub-microsecond digits.
    """
    if value <= _MAX_NANOS:
        return pd.Timestamp(value, unit='ns', tz='UTC')
    return pd.Timestamp(_EPOCH + timedelta(microseconds=value // 1000))


def decode_system_timestamp(buf: bytes) -> pd.Timestamp:
    """
    Decode an 8-byte nanosecond timestamp.

    Example:
        decode_system_timestamp(bytes.fromhex('ac63c02096866d14'))
        # Timestamp('2016-08-23 19:30:32.572715948+0000', tz='UTC')
    """
    return timestamp_from_nanos(decode_u64(buf))


def decode_event_time(buf: bytes) -> pd.Timestamp:
    """Decode a 4-byte whole-second timestamp."""
    return pd.Timestamp(decode_u32(buf), unit='s', tz='UTC')
