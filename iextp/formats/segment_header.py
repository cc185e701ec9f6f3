"""
IEX-TP segment header.

Every segment starts with a fixed 40-byte header followed by the payload of
message blocks. The header is captured as data only; stream offset and
sequence number are not acted upon.

Layout (40 bytes, little-endian):
    Byte 0:      version            u8   IEX-TP protocol version
    Byte 1:      reserved           u8   Skipped
    Bytes 2-3:   protocol_id        u16  Message protocol (TOPS/DEEP)
    Bytes 4-7:   channel_id         u32  Stream identifier
    Bytes 8-11:  session_id         u32  Session identifier
    Bytes 12-13: payload_length     u16  Payload bytes, header excluded
    Bytes 14-15: message_count      u16  Message blocks in the payload
    Bytes 16-23: stream_offset      i64  Byte offset of payload in stream
    Bytes 24-31: first_seq_no       i64  Sequence number of first message
    Bytes 32-39: send_time          u64  Nanoseconds since epoch
"""

import struct
from dataclasses import dataclass

import pandas as pd

from .primitives import require_length, timestamp_from_nanos


# Header size in bytes
HEADER_SIZE = 40

# Channel id used by both feeds
CHANNEL_ID = 1


class MessageProtocol:
    """Message protocol ids carried in the segment header."""

    TOPS_1_5 = 0x8002
    TOPS_1_6 = 0x8003
    DEEP_1_0 = 0x8004

    @classmethod
    def name(cls, protocol_id: int) -> str:
        """Get human-readable name for a protocol id."""
        names = {
            cls.TOPS_1_5: 'TOPS 1.5',
            cls.TOPS_1_6: 'TOPS 1.6',
            cls.DEEP_1_0: 'DEEP 1.0',
        }
        return names.get(protocol_id, f'UNKNOWN(0x{protocol_id:04X})')


@dataclass(frozen=True)
class SegmentHeader:
    """Decoded IEX-TP segment header."""

    version: int
    protocol_id: int
    channel_id: int
    session_id: int
    payload_length: int
    message_count: int
    stream_offset: int
    first_seq_no: int
    send_time_ns: int

    # B=version, x=reserved, H=protocol, I=channel, I=session,
    # H=payload_len, H=msg_count, q=stream_offset, q=first_seq, Q=send_time
    FORMAT = '<BxHIIHHqqQ'
    SIZE = HEADER_SIZE

    @property
    def send_time(self) -> pd.Timestamp:
        """Send time as a UTC timestamp with nanosecond resolution."""
        return timestamp_from_nanos(self.send_time_ns)

    @property
    def segment_length(self) -> int:
        """Total segment size on the wire, header included."""
        return HEADER_SIZE + self.payload_length

    @property
    def protocol_name(self) -> str:
        return MessageProtocol.name(self.protocol_id)

    @classmethod
    def decode(cls, data: bytes) -> 'SegmentHeader':
        """Decode header from bytes."""
        require_length(data, HEADER_SIZE, 'Segment header')

        (
            version,
            protocol_id,
            channel_id,
            session_id,
            payload_length,
            message_count,
            stream_offset,
            first_seq_no,
            send_time_ns,
        ) = struct.unpack_from(cls.FORMAT, data)

        return cls(
            version=version,
            protocol_id=protocol_id,
            channel_id=channel_id,
            session_id=session_id,
            payload_length=payload_length,
            message_count=message_count,
            stream_offset=stream_offset,
            first_seq_no=first_seq_no,
            send_time_ns=send_time_ns,
        )

    def encode(self) -> bytes:
        """Encode header to bytes."""
        return struct.pack(
            self.FORMAT,
            self.version,
            self.protocol_id,
            self.channel_id,
            self.session_id,
            self.payload_length,
            self.message_count,
            self.stream_offset,
            self.first_seq_no,
            self.send_time_ns,
        )

    def to_dict(self) -> dict:
        return {
            'version': self.version,
            'protocol_id': self.protocol_id,
            'protocol': self.protocol_name,
            'channel_id': self.channel_id,
            'session_id': self.session_id,
            'payload_length': self.payload_length,
            'message_count': self.message_count,
            'stream_offset': self.stream_offset,
            'first_seq_no': self.first_seq_no,
            'send_time': self.send_time.isoformat(),
        }


def decode_segment_header(buf: bytes) -> SegmentHeader:
    """Decode the 40-byte header at the start of buf."""
    return SegmentHeader.decode(buf)


# Verify struct size at module load
_computed_size = struct.calcsize(SegmentHeader.FORMAT)
assert _computed_size == HEADER_SIZE, \
    f"SegmentHeader format size mismatch: {_computed_size} != {HEADER_SIZE}"
