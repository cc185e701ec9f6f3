"""
Tests for the CLI.

CRITICAL TESTS:
1. test_decode_json - decode writes one record per message
2. test_decode_truncated_strict - strict decoding fails the command
3. test_validate_invalid - bad configs exit non-zero
"""

import json

import pytest

pytest.importorskip("typer")

from typer.testing import CliRunner

from iextp import __version__
from iextp.cli.main import app
from iextp.formats.segment_header import MessageProtocol


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def deep_file(tmp_path, blocks, make_segment):
    path = tmp_path / "deep.bin"
    path.write_bytes(
        make_segment([blocks['security_event']], first_seq_no=10)
        + make_segment(
            [blocks['price_level_update_buy'], blocks['price_level_update_sell']],
            first_seq_no=11,
        )
    )
    return path


@pytest.fixture
def tops_file(tmp_path, blocks, make_segment):
    path = tmp_path / "tops.bin"
    path.write_bytes(make_segment(
        [blocks['quote_update'], blocks['trade_report']],
        protocol_id=MessageProtocol.TOPS_1_6,
    ))
    return path


class TestVersion:

    def test_version(self, runner):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"iextp v{__version__}" in result.output


class TestDecode:

    def test_decode_json(self, runner, deep_file, tmp_path):
        out = tmp_path / "out.json"
        result = runner.invoke(app, ["decode", str(deep_file), "-o", str(out), "-q"])
        assert result.exit_code == 0, result.output

        records = json.loads(out.read_text())
        assert [r['type'] for r in records] == [
            'SecurityEvent', 'PriceLevelUpdate', 'PriceLevelUpdate',
        ]
        assert [r['seq_no'] for r in records] == [10, 11, 12]
        assert records[1]['feed'] == 'DEEP'
        assert records[1]['price'] == 99.05
        assert records[1]['timestamp'] == '2016-08-23T19:30:32.572715948+00:00'

    def test_decode_tops(self, runner, tops_file, tmp_path):
        out = tmp_path / "out.json"
        result = runner.invoke(app, ["decode", str(tops_file), "-o", str(out), "-q"])
        assert result.exit_code == 0, result.output
        records = json.loads(out.read_text())
        assert [r['type'] for r in records] == ['QuoteUpdate', 'TradeReport']

    def test_decode_forced_feed(self, runner, tops_file, tmp_path):
        out = tmp_path / "out.json"
        result = runner.invoke(
            app, ["decode", str(tops_file), "--feed", "deep", "-o", str(out), "-q"],
        )
        assert result.exit_code == 0, result.output
        records = json.loads(out.read_text())
        assert records[0]['type'] == 'Unsupported'

    def test_decode_json_to_stdout(self, runner, deep_file):
        """Without -o, stdout is a single JSON document that can be piped."""
        result = runner.invoke(app, ["decode", str(deep_file)])
        assert result.exit_code == 0, result.output
        records = json.loads(result.output)
        assert len(records) == 3
        assert "Summary" not in result.output

    def test_decode_summary(self, runner, deep_file, tmp_path):
        out = tmp_path / "out.json"
        result = runner.invoke(app, ["decode", str(deep_file), "-o", str(out)])
        assert result.exit_code == 0
        assert "Summary" in result.output
        assert "Written to" in result.output

    def test_decode_table(self, runner, deep_file):
        result = runner.invoke(app, ["decode", str(deep_file), "-f", "table"])
        assert result.exit_code == 0
        assert "ZIEXT" in result.output

    def test_decode_truncated_strict(self, runner, deep_file):
        deep_file.write_bytes(deep_file.read_bytes()[:-5])
        result = runner.invoke(app, ["decode", str(deep_file), "-q"])
        assert result.exit_code == 1

    def test_decode_truncated_lenient(self, runner, deep_file, tmp_path):
        deep_file.write_bytes(deep_file.read_bytes()[:-5])
        out = tmp_path / "out.json"
        result = runner.invoke(
            app, ["decode", str(deep_file), "--no-strict", "-o", str(out), "-q"],
        )
        assert result.exit_code == 0
        assert len(json.loads(out.read_text())) == 1

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, ["decode", str(tmp_path / "nope.bin")])
        assert result.exit_code != 0


class TestHeader:

    def test_header(self, runner, deep_file):
        result = runner.invoke(app, ["header", str(deep_file)])
        assert result.exit_code == 0
        assert "DEEP" in result.output

    def test_header_limit(self, runner, deep_file):
        result = runner.invoke(app, ["header", str(deep_file), "-n", "1"])
        assert result.exit_code == 0


class TestConfigCommand:

    def test_init(self, runner):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert "feed: auto" in result.output

    def test_validate_valid(self, runner, tmp_path):
        path = tmp_path / "iextp.yml"
        path.write_text("decoder:\n  feed: deep\n")
        result = runner.invoke(app, ["config", "validate", str(path)])
        assert result.exit_code == 0
        assert "Valid" in result.output

    def test_validate_invalid(self, runner, tmp_path):
        path = tmp_path / "iextp.yml"
        path.write_text("decoder:\n  feed: itch\n")
        result = runner.invoke(app, ["config", "validate", str(path)])
        assert result.exit_code == 1

    def test_dump(self, runner, tmp_path):
        path = tmp_path / "iextp.yml"
        path.write_text("decoder:\n  framing: length_prefixed\n")
        result = runner.invoke(app, ["config", "dump", str(path)])
        assert result.exit_code == 0
        assert "length_prefixed" in result.output

    def test_unknown_action(self, runner):
        result = runner.invoke(app, ["config", "explode"])
        assert result.exit_code == 1

    def test_validate_list_yaml(self, runner, tmp_path):
        path = tmp_path / "iextp.yml"
        path.write_text("- feed\n- deep\n")
        result = runner.invoke(app, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output
