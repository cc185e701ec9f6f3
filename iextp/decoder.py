"""
IEXTP decoding entry points.

decode_message() routes one message block through the dispatch table of
the requested feed. Segments are walked by SegmentIterator, which frames
each block either from its tag's fixed size (the message blocks carry no
length of their own) or from a 2-byte length prefix when the capture
includes one.

Usage:
    header = decode_segment_header(data)
    for msg in iter_segment(Feed.DEEP, data):
        process(msg)

    # Or materialize everything
    segment = decode_segment(None, data)   # feed detected from header
"""

import logging
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union

from .errors import TruncatedSegmentError, UnknownProtocolError
from .formats.message_types import MessageType
from .formats.segment_header import HEADER_SIZE, SegmentHeader
from .messages import deep, tops
from .messages.types import Unsupported

logger = logging.getLogger(__name__)


class Feed(str, Enum):
    TOPS = "TOPS"
    DEEP = "DEEP"

    @classmethod
    def from_name(cls, name: Union[str, 'Feed']) -> 'Feed':
        """Case-insensitive lookup: 'tops', 'DEEP', Feed.TOPS."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            raise ValueError(f"Unknown feed: {name!r} (expected TOPS or DEEP)") from None

    @property
    def module(self):
        return _FEED_MODULES[self]


class Framing(str, Enum):
    IMPLIED = "implied"
    LENGTH_PREFIXED = "length_prefixed"


_FEED_MODULES = {
    Feed.TOPS: tops,
    Feed.DEEP: deep,
}

_BLOCK_LENGTH = struct.Struct('<H')


def feed_for_protocol(protocol_id: int) -> Feed:
    """Map a segment header's message protocol id to its feed."""
    for feed, module in _FEED_MODULES.items():
        if protocol_id in module.PROTOCOL_IDS:
            return feed
    raise UnknownProtocolError(protocol_id)


def block_size(feed: Feed, tag: int) -> int:
    """Fixed size of a block with this tag in this feed, 0 if not in its table."""
    if tag not in feed.module.DISPATCH:
        return 0
    return MessageType.size(tag)


def decode_message(
    feed: Union[Feed, str],
    buf: bytes,
    legacy_short_sale_status: bool = False,
):
    """
    Decode a single message block.

    Args:
        feed: Feed whose dispatch table applies
        buf: Message block, tag byte first
        legacy_short_sale_status: Read the short sale flag from byte 0

    Returns:
        Typed message, or Unsupported for tags outside the feed's table

    Raises:
        TruncatedBufferError: If buf is shorter than the type's block size
    """
    feed = Feed.from_name(feed)
    msg = feed.module.decode(buf, legacy_short_sale_status=legacy_short_sale_status)
    if isinstance(msg, Unsupported):
        logger.debug(f"{feed.value}: unsupported message type {msg.name}, {len(buf)} bytes kept")
    return msg


@dataclass
class Segment:
    """
    A decoded segment.

    Attributes:
        header: Segment header
        feed: Feed the messages were decoded with
        messages: Decoded messages in wire order
        truncated: True if decoding stopped before message_count (non-strict)
    """
    header: SegmentHeader
    feed: Feed
    messages: List = field(default_factory=list)
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)


class SegmentIterator:
    """
    Lazy iterator over the message blocks of one segment payload.

    Yields at most header.message_count messages. It is not restartable:
    once exhausted (or truncated) it stays exhausted.

    If the payload runs out before message_count blocks, strict mode raises
    TruncatedSegmentError after every complete message has been yielded;
    non-strict mode logs a warning, sets `truncated` and stops.
    """

    def __init__(
        self,
        feed: Union[Feed, str],
        header: SegmentHeader,
        payload: bytes,
        framing: Union[Framing, str] = Framing.IMPLIED,
        strict: bool = True,
        legacy_short_sale_status: bool = False,
    ):
        self.feed = Feed.from_name(feed)
        self.header = header
        self.payload = payload
        self.framing = Framing(framing)
        self.strict = strict
        self.legacy_short_sale_status = legacy_short_sale_status

        self.offset = 0
        self.decoded = 0
        self.truncated = False
        self._done = False

    def __iter__(self) -> 'SegmentIterator':
        return self

    def __next__(self):
        if self._done or self.decoded >= self.header.message_count:
            self._done = True
            raise StopIteration

        if self.framing == Framing.LENGTH_PREFIXED:
            block = self._next_prefixed_block()
        else:
            block = self._next_implied_block()

        msg = decode_message(
            self.feed, block,
            legacy_short_sale_status=self.legacy_short_sale_status,
        )
        self.decoded += 1
        return msg

    def _next_prefixed_block(self) -> bytes:
        start = self.offset + _BLOCK_LENGTH.size
        if start > len(self.payload):
            self._truncate(start)

        (length,) = _BLOCK_LENGTH.unpack_from(self.payload, self.offset)
        end = start + length
        if end > len(self.payload):
            self._truncate(end)

        self.offset = end
        return self.payload[start:end]

    def _next_implied_block(self) -> bytes:
        start = self.offset
        if start >= len(self.payload):
            self._truncate(start + 1)

        tag = self.payload[start]
        size = block_size(self.feed, tag)

        if size == 0:
            # Unknown length: the rest of the payload is one opaque block
            remaining = self.header.message_count - self.decoded - 1
            logger.warning(
                f"{self.feed.value}: cannot frame {MessageType.name(tag)} at offset {start}, "
                f"keeping {len(self.payload) - start} bytes raw and skipping {remaining} message(s)"
            )
            self._done = True
            self.offset = len(self.payload)
            return self.payload[start:]

        end = start + size
        if end > len(self.payload):
            self._truncate(end)

        self.offset = end
        return self.payload[start:end]

    def _truncate(self, required: int) -> None:
        """Stop iteration early; raises in strict mode."""
        self._done = True
        self.truncated = True
        error = TruncatedSegmentError(
            decoded=self.decoded,
            expected=self.header.message_count,
            required=required,
            available=len(self.payload),
        )
        if self.strict:
            raise error
        logger.warning(f"{self.feed.value}: {error.message}")
        raise StopIteration


def _resolve_feed(feed: Optional[Union[Feed, str]], header: SegmentHeader) -> Feed:
    if feed is None:
        return feed_for_protocol(header.protocol_id)
    return Feed.from_name(feed)


def iter_segment(
    feed: Optional[Union[Feed, str]],
    buf: bytes,
    framing: Union[Framing, str] = Framing.IMPLIED,
    strict: bool = True,
    legacy_short_sale_status: bool = False,
) -> SegmentIterator:
    """
    Decode the header of a segment and return an iterator over its messages.

    Args:
        feed: Feed to decode with, or None to detect it from the header
        buf: Raw segment bytes, header first

    Raises:
        TruncatedBufferError: If buf is shorter than the header
        UnknownProtocolError: If feed is None and the protocol id is unknown
    """
    header = SegmentHeader.decode(buf)
    payload = bytes(buf[HEADER_SIZE:HEADER_SIZE + header.payload_length])
    return SegmentIterator(
        _resolve_feed(feed, header),
        header,
        payload,
        framing=framing,
        strict=strict,
        legacy_short_sale_status=legacy_short_sale_status,
    )


def decode_segment(
    feed: Optional[Union[Feed, str]],
    buf: bytes,
    framing: Union[Framing, str] = Framing.IMPLIED,
    strict: bool = True,
    legacy_short_sale_status: bool = False,
) -> Segment:
    """Decode a whole segment into a Segment."""
    iterator = iter_segment(
        feed, buf,
        framing=framing,
        strict=strict,
        legacy_short_sale_status=legacy_short_sale_status,
    )
    messages = list(iterator)
    return Segment(
        header=iterator.header,
        feed=iterator.feed,
        messages=messages,
        truncated=iterator.truncated,
    )


class Decoder:
    """
    Decoder bound to a DecoderConfig.

    Example:
        decoder = Decoder.from_config(load_config())
        segment = decoder.decode_segment(data)
    """

    def __init__(
        self,
        feed: Optional[Union[Feed, str]] = None,
        framing: Union[Framing, str] = Framing.IMPLIED,
        strict: bool = True,
        legacy_short_sale_status: bool = False,
    ):
        self.feed = Feed.from_name(feed) if feed is not None else None
        self.framing = Framing(framing)
        self.strict = strict
        self.legacy_short_sale_status = legacy_short_sale_status

    @classmethod
    def from_config(cls, config) -> 'Decoder':
        dec = config.decoder
        return cls(
            feed=None if dec.feed == 'auto' else dec.feed,
            framing=dec.framing,
            strict=dec.strict,
            legacy_short_sale_status=dec.legacy_short_sale_status,
        )

    def decode_message(self, buf: bytes, feed: Optional[Union[Feed, str]] = None):
        feed = feed if feed is not None else self.feed
        if feed is None:
            raise ValueError("Feed required to decode a bare message block")
        return decode_message(feed, buf, legacy_short_sale_status=self.legacy_short_sale_status)

    def iter_segment(self, buf: bytes) -> SegmentIterator:
        return iter_segment(
            self.feed, buf,
            framing=self.framing,
            strict=self.strict,
            legacy_short_sale_status=self.legacy_short_sale_status,
        )

    def decode_segment(self, buf: bytes) -> Segment:
        return decode_segment(
            self.feed, buf,
            framing=self.framing,
            strict=self.strict,
            legacy_short_sale_status=self.legacy_short_sale_status,
        )
