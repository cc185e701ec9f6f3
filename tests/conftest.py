"""Shared fixtures: captured message blocks and a segment builder."""

from typing import List, Optional

import pytest

from iextp.formats.segment_header import CHANNEL_ID, MessageProtocol, SegmentHeader


# 2016-08-23 19:30:32.572715948 UTC
TS = 'ac63c02096866d14'
# 'ZIEXT   '
ZIEXT = '5a49455854202020'
# $99.05
PRICE = '241d0f0000000000'

BLOCKS = {
    'system_event': '53' '45' '00a09997e93db614',
    'security_directory': '44' '80' '0020897b5a1fb614' + ZIEXT + '64000000' + PRICE + '01',
    'trading_status': '48' '48' + TS + ZIEXT + '54312020',
    'operational_halt_status': '4f' '4f' + TS + ZIEXT,
    'short_sale_price_test_status': '50' '01' + TS + ZIEXT + '41',
    'quote_update': '51' '00' + TS + ZIEXT + 'e4250000' + PRICE + 'ec1d0f0000000000' + 'e8030000',
    'trade_report': '54' '00' + TS + ZIEXT + '64000000' + PRICE + '968f060000000000',
    'trade_break': '42' '00' 'b28fa5a0ab866d14' + ZIEXT + '64000000' + PRICE + '968f060000000000',
    'official_price': '58' '51' '00f0302a5b25b614' + ZIEXT + PRICE,
    'auction_information': (
        '41' '43' 'ddc7f09a1a3ab614' + ZIEXT
        + '186a0000' + PRICE + '181f0f0000000000'
        + '27100000' '42' '00' '80e6f458'
        + '0c210f0000000000' 'c01c0f0000000000' 'a4990d0000000000' 'dc9f100000000000'
    ),
    'security_event': '45' '4f' '00f0302a5b25b614' + ZIEXT,
    'price_level_update_buy': '38' '01' + TS + ZIEXT + 'e4250000' + PRICE,
    'price_level_update_sell': '35' '01' + TS + ZIEXT + 'e4250000' + PRICE,
}


@pytest.fixture
def blocks():
    """Message blocks keyed by name, as bytes."""
    return {name: bytes.fromhex(data) for name, data in BLOCKS.items()}


def build_segment(
    blocks: List[bytes],
    protocol_id: int = MessageProtocol.DEEP_1_0,
    message_count: Optional[int] = None,
    payload: Optional[bytes] = None,
    first_seq_no: int = 1,
    session_id: int = 1150681088,
) -> bytes:
    """Header plus concatenated blocks, counts taken from the blocks by default."""
    if payload is None:
        payload = b''.join(blocks)
    header = SegmentHeader(
        version=1,
        protocol_id=protocol_id,
        channel_id=CHANNEL_ID,
        session_id=session_id,
        payload_length=len(payload),
        message_count=len(blocks) if message_count is None else message_count,
        stream_offset=0,
        first_seq_no=first_seq_no,
        send_time_ns=int.from_bytes(bytes.fromhex(TS), 'little'),
    )
    return header.encode() + payload


@pytest.fixture
def make_segment():
    """Factory building raw segments from message blocks."""
    return build_segment
