"""
SegmentReader - read captured IEX-TP segments from a file.

A segment file is a plain concatenation of raw segments, each framed by its
own header's payload_length. No link-layer or pcap framing is handled here.

Usage:
    for segment in SegmentReader.read_path(path):
        for msg in segment:
            process(msg)
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from .decoder import Decoder, Feed, Segment, feed_for_protocol
from .errors import TruncatedBufferError, UnknownProtocolError
from .formats.segment_header import HEADER_SIZE, SegmentHeader

logger = logging.getLogger(__name__)


@dataclass
class SegmentFile:
    """
    Metadata about an opened segment file.

    Attributes:
        path: Path to the file
        first_header: Header of the first segment (None for empty files)
        feed: Feed detected from the first header (None if unknown)
        size: File size in bytes
    """
    path: Path
    first_header: Optional[SegmentHeader]
    feed: Optional[Feed]
    size: int

    @property
    def is_empty(self) -> bool:
        return self.first_header is None


class SegmentReader:
    """
    Iterate segments out of a file or byte buffer.

    A trailing partial segment raises TruncatedBufferError when the decoder
    is strict; otherwise it is logged and skipped.
    """

    @classmethod
    def open(cls, path: Path) -> SegmentFile:
        """
        Open a segment file and probe its first header.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Segment file not found: {path}")

        size = path.stat().st_size
        header = None
        feed = None

        if size >= HEADER_SIZE:
            with open(path, 'rb') as f:
                header = SegmentHeader.decode(f.read(HEADER_SIZE))
            try:
                feed = feed_for_protocol(header.protocol_id)
            except UnknownProtocolError:
                logger.warning(f"{path}: unknown protocol id 0x{header.protocol_id:04X}")

        logger.info(f"Opened {path}: {size} bytes, feed={feed.value if feed else 'unknown'}")
        return SegmentFile(path=path, first_header=header, feed=feed, size=size)

    @classmethod
    def iter_raw(cls, stream: BinaryIO, strict: bool = True) -> Iterator[bytes]:
        """Yield raw segment bytes (header + payload) from a binary stream."""
        index = 0
        while True:
            head = stream.read(HEADER_SIZE)
            if not head:
                return
            if len(head) < HEADER_SIZE:
                cls._partial(index, HEADER_SIZE, len(head), strict)
                return

            header = SegmentHeader.decode(head)
            payload = stream.read(header.payload_length)
            if len(payload) < header.payload_length:
                cls._partial(index, header.segment_length, HEADER_SIZE + len(payload), strict)
                return

            yield head + payload
            index += 1

    @classmethod
    def read(cls, segment_file: SegmentFile, decoder: Optional[Decoder] = None) -> Iterator[Segment]:
        """Decode every segment of an opened file."""
        decoder = decoder or Decoder()
        with open(segment_file.path, 'rb') as f:
            for raw in cls.iter_raw(f, strict=decoder.strict):
                yield decoder.decode_segment(raw)

    @classmethod
    def read_path(cls, path: Path, decoder: Optional[Decoder] = None) -> Iterator[Segment]:
        """Convenience method: open and read in one call."""
        segment_file = cls.open(path)
        yield from cls.read(segment_file, decoder)

    @classmethod
    def read_bytes(cls, data: bytes, decoder: Optional[Decoder] = None) -> Iterator[Segment]:
        """Decode every segment of an in-memory capture."""
        decoder = decoder or Decoder()
        for raw in cls.iter_raw(io.BytesIO(data), strict=decoder.strict):
            yield decoder.decode_segment(raw)

    @classmethod
    def count(cls, path: Path) -> int:
        """Count complete segments by walking headers only."""
        with open(Path(path), 'rb') as f:
            return sum(1 for _ in cls.iter_raw(f, strict=False))

    @staticmethod
    def _partial(index: int, required: int, actual: int, strict: bool) -> None:
        error = TruncatedBufferError(f"Segment {index}", required, actual)
        if strict:
            raise error
        logger.warning(f"Skipping trailing partial segment: {error.message}")
