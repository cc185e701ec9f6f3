"""
Tests for the TOPS dispatch table.

CRITICAL TESTS:
1. Every TOPS message type decodes its captured block exactly
2. One byte short fails with TruncatedBufferError for every type
3. DEEP-only tags decode to Unsupported with the raw bytes kept
"""

import pandas as pd
import pytest

from iextp.decoder import Feed, decode_message
from iextp.errors import TruncatedBufferError
from iextp.formats.message_types import LULDTier, MessageType, SystemEventType
from iextp.messages import tops
from iextp.messages.types import (
    AuctionInformation,
    OfficialPrice,
    OperationalHaltStatus,
    QuoteUpdate,
    SecurityDirectory,
    ShortSalePriceTestStatus,
    SystemEvent,
    TradeBreak,
    TradeReport,
    TradingStatus,
    Unsupported,
)


TS = pd.Timestamp('2016-08-23 19:30:32.572715948', tz='UTC')

TOPS_BLOCKS = [
    'system_event',
    'security_directory',
    'trading_status',
    'operational_halt_status',
    'short_sale_price_test_status',
    'quote_update',
    'trade_report',
    'trade_break',
    'official_price',
    'auction_information',
]


class TestAdministrative:
    """Administrative message formats."""

    def test_system_event(self, blocks):
        expected = SystemEvent(
            message_type=MessageType.SYSTEM_EVENT,
            system_event=SystemEventType.END_OF_SYSTEM_HOURS,
            timestamp=pd.Timestamp('2017-04-17 17:00:00', tz='UTC'),
        )
        assert tops.decode(blocks['system_event']) == expected

    def test_security_directory(self, blocks):
        expected = SecurityDirectory(
            message_type=MessageType.SECURITY_DIRECTORY,
            flags=0x80,
            timestamp=pd.Timestamp('2017-04-17 07:40:00', tz='UTC'),
            symbol='ZIEXT',
            round_lot_size=100,
            adjusted_poc_price=99.05,
            luld_tier=LULDTier.TIER_1,
        )
        msg = tops.decode(blocks['security_directory'])
        assert msg == expected
        assert msg.is_test_security
        assert not msg.is_when_issued
        assert not msg.is_etp

    def test_trading_status(self, blocks):
        expected = TradingStatus(
            message_type=MessageType.TRADING_STATUS,
            trading_status=0x48,
            timestamp=TS,
            symbol='ZIEXT',
            reason='T1',
        )
        assert tops.decode(blocks['trading_status']) == expected

    def test_operational_halt_status(self, blocks):
        expected = OperationalHaltStatus(
            message_type=MessageType.OPERATIONAL_HALT_STATUS,
            operational_halt_status=0x4f,
            timestamp=TS,
            symbol='ZIEXT',
        )
        assert tops.decode(blocks['operational_halt_status']) == expected

    def test_short_sale_price_test_status(self, blocks):
        expected = ShortSalePriceTestStatus(
            message_type=MessageType.SHORT_SALE_PRICE_TEST_STATUS,
            short_sale_price_test_status=True,
            timestamp=TS,
            symbol='ZIEXT',
            detail=0x41,
        )
        assert tops.decode(blocks['short_sale_price_test_status']) == expected


class TestShortSaleStatusByte:
    """The in-effect flag is byte 1; legacy mode reads byte 0."""

    def test_not_in_effect(self, blocks):
        raw = bytearray(blocks['short_sale_price_test_status'])
        raw[1] = 0x00
        msg = tops.decode(bytes(raw))
        assert msg.short_sale_price_test_status is False

    def test_legacy_reads_tag_byte(self, blocks):
        raw = bytearray(blocks['short_sale_price_test_status'])
        raw[1] = 0x00
        msg = tops.decode(bytes(raw), legacy_short_sale_status=True)
        assert msg.short_sale_price_test_status is True

    def test_legacy_through_decode_message(self, blocks):
        raw = bytearray(blocks['short_sale_price_test_status'])
        raw[1] = 0x00
        msg = decode_message(Feed.TOPS, bytes(raw), legacy_short_sale_status=True)
        assert msg.short_sale_price_test_status is True


class TestTrading:
    """Trading message formats."""

    def test_quote_update(self, blocks):
        expected = QuoteUpdate(
            message_type=MessageType.QUOTE_UPDATE,
            flags=0,
            timestamp=TS,
            symbol='ZIEXT',
            bid_size=9700,
            bid_price=99.05,
            ask_price=99.07,
            ask_size=1000,
        )
        assert tops.decode(blocks['quote_update']) == expected

    def test_trade_report(self, blocks):
        expected = TradeReport(
            message_type=MessageType.TRADE_REPORT,
            sale_condition_flags=0,
            timestamp=TS,
            symbol='ZIEXT',
            size=100,
            price=99.05,
            trade_id=429974,
        )
        assert tops.decode(blocks['trade_report']) == expected

    def test_trade_break(self, blocks):
        expected = TradeBreak(
            message_type=MessageType.TRADE_BREAK,
            sale_condition_flags=0,
            timestamp=pd.Timestamp('2016-08-23 19:32:04.912754610', tz='UTC'),
            symbol='ZIEXT',
            size=100,
            price=99.05,
            trade_id=429974,
        )
        msg = tops.decode(blocks['trade_break'])
        assert type(msg) is TradeBreak
        assert msg == expected

    def test_break_is_not_a_report(self, blocks):
        trade = tops.decode(blocks['trade_report'])
        broken = tops.decode(blocks['trade_break'])
        assert not isinstance(broken, TradeReport)
        assert not isinstance(trade, TradeBreak)

    def test_official_price(self, blocks):
        expected = OfficialPrice(
            message_type=MessageType.OFFICIAL_PRICE,
            price_type=0x51,
            timestamp=pd.Timestamp('2017-04-17 09:30:00', tz='UTC'),
            symbol='ZIEXT',
            official_price=99.05,
        )
        assert tops.decode(blocks['official_price']) == expected


class TestAuction:
    """Auction information."""

    def test_auction_information(self, blocks):
        expected = AuctionInformation(
            message_type=MessageType.AUCTION_INFORMATION,
            auction_type=0x43,
            timestamp=pd.Timestamp('2017-04-17 15:50:12.462929885', tz='UTC'),
            symbol='ZIEXT',
            paired_shares=27160,
            reference_price=99.05,
            indicative_clearing_price=99.10,
            imbalance_shares=4135,
            imbalance_side=0x42,
            extension_number=0,
            scheduled_auction_time=pd.Timestamp('2017-04-17 16:00:00', tz='UTC'),
            auction_book_clearing_price=99.15,
            collar_reference_price=99.04,
            lower_auction_collar=89.13,
            upper_auction_collar=108.95,
        )
        assert tops.decode(blocks['auction_information']) == expected

    def test_shares_are_little_endian(self, blocks):
        """The captured block holds 27,160 and 4,135 shares, not round numbers."""
        msg = tops.decode(blocks['auction_information'])
        assert msg.paired_shares == 0x6a18
        assert msg.imbalance_shares == 0x1027


class TestBoundaries:
    """Short and long buffers."""

    @pytest.mark.parametrize("name", TOPS_BLOCKS)
    def test_one_byte_short(self, blocks, name):
        with pytest.raises(TruncatedBufferError) as exc:
            tops.decode(blocks[name][:-1])
        assert exc.value.required == len(blocks[name])

    @pytest.mark.parametrize("name", TOPS_BLOCKS)
    def test_exact_size(self, blocks, name):
        msg_cls = tops.DISPATCH[blocks[name][0]]
        assert len(blocks[name]) == msg_cls.SIZE == MessageType.size(blocks[name][0])

    @pytest.mark.parametrize("name", TOPS_BLOCKS)
    def test_trailing_bytes_ignored(self, blocks, name):
        assert tops.decode(blocks[name] + b'\xff' * 4) == tops.decode(blocks[name])

    @pytest.mark.parametrize("name", TOPS_BLOCKS)
    def test_idempotent(self, blocks, name):
        assert tops.decode(blocks[name]) == tops.decode(blocks[name])

    def test_tag_only_block(self):
        with pytest.raises(TruncatedBufferError):
            tops.decode(b'\x53')

    def test_far_future_timestamp(self):
        """A full-length block decodes whatever its timestamp holds."""
        msg = decode_message(Feed.TOPS, b'\x53\x45' + b'\xff' * 8)
        assert isinstance(msg, SystemEvent)
        assert msg.timestamp.year == 2554
        assert msg.to_dict()['timestamp'].startswith('2554-07-21T23:34:33.709551')


class TestDispatch:
    """Tags outside the TOPS table."""

    def test_table_contents(self):
        assert set(tops.DISPATCH) == {
            0x53, 0x44, 0x48, 0x4f, 0x50, 0x51, 0x54, 0x42, 0x58, 0x41,
        }

    def test_protocol_ids(self):
        assert tops.PROTOCOL_IDS == (0x8002, 0x8003)

    def test_price_level_update_unsupported(self, blocks):
        data = blocks['price_level_update_buy']
        msg = tops.decode(data)
        assert isinstance(msg, Unsupported)
        assert msg.message_type == 0x38
        assert msg.data == data

    def test_security_event_unsupported(self, blocks):
        msg = tops.decode(blocks['security_event'])
        assert isinstance(msg, Unsupported)

    def test_unknown_tag_any_length(self):
        msg = tops.decode(b'\x99')
        assert msg == Unsupported(message_type=0x99, data=b'\x99')

    def test_empty_buffer(self):
        msg = tops.decode(b'')
        assert msg.message_type is None
        assert msg.data == b''

    def test_unsupported_copies_buffer(self):
        buf = bytearray(b'\x99\x01\x02')
        msg = tops.decode(buf)
        buf[1] = 0xff
        assert msg.data == b'\x99\x01\x02'

    def test_decode_message_by_name(self, blocks):
        msg = decode_message('tops', blocks['quote_update'])
        assert isinstance(msg, QuoteUpdate)


class TestToDict:
    """JSON-safe conversion."""

    def test_quote_update(self, blocks):
        d = tops.decode(blocks['quote_update']).to_dict()
        assert d['type'] == 'QuoteUpdate'
        assert d['symbol'] == 'ZIEXT'
        assert d['bid_price'] == 99.05
        assert d['timestamp'] == '2016-08-23T19:30:32.572715948+00:00'

    def test_unsupported(self):
        d = Unsupported.from_bytes(b'\x99\xab').to_dict()
        assert d == {'type': 'Unsupported', 'message_type': 0x99, 'data': '99ab'}
