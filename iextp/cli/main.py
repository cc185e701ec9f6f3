"""
IEXTP CLI.

Commands:
- decode: Decode a file of captured segments
- header: List segment headers without decoding messages
- config: Configuration management
- version: Show version
"""

import json
import logging
import sys
from collections import Counter
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..config import DecoderConfig, load_config, generate_default_config
from ..decoder import Decoder, Feed, Framing
from ..errors import IEXTPError
from ..formats.segment_header import SegmentHeader
from ..reader import SegmentReader


app = typer.Typer(
    name="iextp",
    help="Decode IEX TOPS and DEEP market data segments",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    json = "json"
    table = "table"


class FeedOption(str, Enum):
    auto = "auto"
    tops = "tops"
    deep = "deep"


def _setup_logging(cfg: DecoderConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else cfg.logging.level_value
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load(config_path: Optional[Path]) -> DecoderConfig:
    try:
        cfg = load_config(config_path)
    except (IEXTPError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    errors = cfg.validate()
    if errors:
        console.print("[red]Invalid configuration:[/]")
        for e in errors:
            console.print(f"  - {e}")
        raise typer.Exit(1)
    return cfg


def _print_summary(counts: Counter, segments: int, truncated: int):
    """Print per-type message counts to stderr."""
    err_console.print()
    table = Table(title="Summary")
    table.add_column("Message type")
    table.add_column("Count", justify="right")

    for name, count in counts.most_common():
        table.add_row(name, f"{count:,}")

    table.add_row("Segments", f"{segments:,}")
    if truncated:
        table.add_row("[yellow]Truncated segments[/]", str(truncated))

    err_console.print(table)


# === DECODE COMMAND ===

@app.command()
def decode(
    segment_file: Path = typer.Argument(..., help="File of raw IEX-TP segments", exists=True),
    feed: Optional[FeedOption] = typer.Option(None, "--feed", help="Feed (default: from config)"),
    framing: Optional[Framing] = typer.Option(None, "--framing", help="Message block framing"),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict", help="Fail on truncated segments"),
    legacy_short_sale: bool = typer.Option(
        False, "--legacy-short-sale", help="Read the short sale flag from byte 0",
    ),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output file"),
    format: OutputFormat = typer.Option(OutputFormat.json, "-f", "--format"),
    config_path: Optional[Path] = typer.Option(None, "-c", "--config"),
    quiet: bool = typer.Option(False, "-q", "--quiet"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
):
    """Decode every segment of a capture file."""
    cfg = _load(config_path)
    _setup_logging(cfg, verbose)

    settings = cfg.decoder
    if feed is not None:
        settings.feed = feed.value
    if framing is not None:
        settings.framing = framing.value
    if strict is not None:
        settings.strict = strict
    if legacy_short_sale:
        settings.legacy_short_sale_status = True

    decoder = Decoder.from_config(cfg)

    records = []
    counts = Counter()
    segments = 0
    truncated = 0

    try:
        for segment in SegmentReader.read_path(segment_file, decoder):
            segments += 1
            truncated += int(segment.truncated)
            for i, msg in enumerate(segment.messages):
                counts[type(msg).__name__] += 1
                record = msg.to_dict()
                record['seq_no'] = segment.header.first_seq_no + i
                record['feed'] = segment.feed.value
                records.append(record)
    except IEXTPError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if format == OutputFormat.json:
        output_text = json.dumps(records, indent=2)
        if output:
            output.write_text(output_text)
        else:
            typer.echo(output_text)
    else:
        table = Table(title=str(segment_file))
        table.add_column("Seq", justify="right")
        table.add_column("Type")
        table.add_column("Symbol")
        table.add_column("Timestamp")
        table.add_column("Fields")
        for record in records:
            table.add_row(
                str(record['seq_no']),
                record['type'],
                record.get('symbol', ''),
                record.get('timestamp', ''),
                ' '.join(
                    f"{k}={v}" for k, v in record.items()
                    if k not in ('seq_no', 'feed', 'type', 'message_type', 'symbol', 'timestamp')
                ),
            )
        if output:
            with open(output, 'w') as f:
                Console(file=f, width=200).print(table)
        else:
            console.print(table)

    if output and not quiet:
        err_console.print(f"[green]Written to:[/] {output}")

    # stdout carries the JSON document itself
    json_on_stdout = format == OutputFormat.json and not output
    if not quiet and not json_on_stdout:
        _print_summary(counts, segments, truncated)


# === HEADER COMMAND ===

@app.command()
def header(
    segment_file: Path = typer.Argument(..., help="File of raw IEX-TP segments", exists=True),
    limit: int = typer.Option(0, "-n", "--limit", help="Show at most N headers (0 = all)"),
):
    """List segment headers."""
    table = Table(title=str(segment_file))
    table.add_column("#", justify="right")
    table.add_column("Protocol")
    table.add_column("Channel", justify="right")
    table.add_column("Session", justify="right")
    table.add_column("Messages", justify="right")
    table.add_column("Payload", justify="right")
    table.add_column("First seq", justify="right")
    table.add_column("Send time")

    try:
        with open(segment_file, 'rb') as f:
            for i, raw in enumerate(SegmentReader.iter_raw(f)):
                if limit and i >= limit:
                    break
                hdr = SegmentHeader.decode(raw)
                table.add_row(
                    str(i),
                    hdr.protocol_name,
                    str(hdr.channel_id),
                    str(hdr.session_id),
                    str(hdr.message_count),
                    str(hdr.payload_length),
                    str(hdr.first_seq_no),
                    hdr.send_time.isoformat(),
                )
    except IEXTPError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    console.print(table)


# === CONFIG COMMAND ===

@app.command("config")
def config_cmd(
    action: str = typer.Argument(..., help="Action: init|validate|dump"),
    path: Optional[Path] = typer.Argument(None, help="Config file path"),
):
    """Configuration management."""
    if action == "init":
        typer.echo(generate_default_config())

    elif action == "validate":
        if not path:
            console.print("[red]Path required for validate[/]")
            raise typer.Exit(1)
        try:
            cfg = DecoderConfig.load(path)
        except (IEXTPError, FileNotFoundError) as e:
            console.print(f"[red]Error:[/] {e}")
            raise typer.Exit(1)
        errors = cfg.validate()
        if errors:
            console.print("[red]Invalid configuration:[/]")
            for e in errors:
                console.print(f"  - {e}")
            raise typer.Exit(1)
        console.print(f"[green]Valid:[/] {path}")

    elif action == "dump":
        cfg = DecoderConfig.load(path) if path else load_config()
        typer.echo(cfg.to_yaml())

    else:
        console.print(f"[red]Unknown action:[/] {action}")
        console.print("Valid actions: init, validate, dump")
        raise typer.Exit(1)


# === VERSION COMMAND ===

@app.command()
def version():
    """Show version information."""
    console.print(f"[bold blue]iextp v{__version__}[/]")
    console.print(f"Feeds: {', '.join(f.value for f in Feed)}")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
