"""Command-line interface for binstream encoding and inspection."""

from __future__ import annotations

import json
import logging
import sys
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import click
from lark.exceptions import LarkError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from binstream.layout import LayoutCodecs, ValidationError, calculate_sizes, parse
from binstream.layout.types import LayoutType
from binstream.layout.values import from_json, to_json
from binstream.proto import (
    BinaryStream,
    GrowableBuffer,
    Permission,
    SerializationError,
    StreamError,
    decode_varint,
    encode_varint,
)

if TYPE_CHECKING:
    from binstream.layout.sizes import SizeInfo
    from binstream.layout.types import Layout, LayoutRecord


def _fail(message: str) -> NoReturn:
    print(message)
    sys.exit(1)


def _load_layout(input_file: str) -> Layout:
    with open(input_file, encoding="utf-8") as f:
        text = f.read()

    try:
        return parse(text)
    except (LarkError, ValidationError) as exc:
        _fail(f"Invalid layout {input_file}: {exc}")


def _find_record(layout: Layout, name: str) -> LayoutRecord:
    record = layout.find_record(name)
    if record is None:
        _fail(f"Unknown record: {name}")
    return record


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Binstream binary stream toolkit."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@cli.group()
def varint() -> None:
    """Encode and decode variable-length integers."""


@varint.command("encode")
@click.argument("value", type=int)
@click.option("--unsigned", "-u", is_flag=True, default=False, help="Use the unsigned form")
def varint_encode(value: int, unsigned: bool) -> None:
    """Print the wire bytes of VALUE as hex."""
    try:
        print(encode_varint(value, signed=not unsigned).hex())
    except SerializationError as exc:
        _fail(str(exc))


@varint.command("decode")
@click.argument("data")
@click.option("--unsigned", "-u", is_flag=True, default=False, help="Use the unsigned form")
def varint_decode(data: str, unsigned: bool) -> None:
    """Decode a varint from hex DATA."""
    try:
        value, consumed = decode_varint(bytes.fromhex(data), signed=not unsigned)
    except ValueError:
        _fail(f"Not a hex string: {data}")
    except StreamError as exc:
        _fail(f"Truncated varint: {exc}")
    print(f"{value} ({consumed} byte{'s' if consumed != 1 else ''})")


def _format_size(size: SizeInfo) -> str:
    """Format a size range, handling None for unbounded."""
    if size.max_size == size.min_size:
        return str(size.min_size)
    upper = "unbounded" if size.max_size is None else str(size.max_size)
    return f"{size.min_size}..{upper}"


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input layout file")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display layout records and their wire sizes."""
    layout = _load_layout(input_file)
    sizes = calculate_sizes(layout)

    if output_json:
        data: dict[str, Any] = {"layout": layout.to_dict(), "sizes": {}}
        for name, record_info in sizes.items():
            data["sizes"][name] = {
                "min_size": record_info.size.min_size,
                "max_size": record_info.size.max_size,
                "kind": record_info.size.kind.value,
            }
        print(json.dumps(data, indent=2))
        return

    console = Console()

    for enum in layout.enums:
        console.print(f"[bold cyan]enum {enum.name}[/bold cyan] [dim]({enum.type})[/dim]")
        enum_table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
        enum_table.add_column("Name", style="white")
        enum_table.add_column("Value", style="dim", justify="right")
        for value in enum.values:
            enum_table.add_row(value.name, str(value.value))
        console.print(enum_table)
        console.print()

    for record in layout.records:
        record_info = sizes[record.name]
        console.print(
            f"[bold cyan]record {record.name}[/bold cyan] "
            f"[dim]{_format_size(record_info.size)} bytes, {record_info.size.kind}[/dim]"
        )
        table = Table(box=None, padding=(0, 2, 0, 2))
        table.add_column("Field", style="white")
        table.add_column("Type", style="green")
        table.add_column("Size", justify="right")
        for f in record.fields:
            table.add_row(f.name, str(f.type), _format_size(record_info.fields[f.name]))
        console.print(table)
        console.print()


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input layout file")
@click.option("--record", "-r", "record_name", required=True, help="Record to decode")
@click.option("--data", "-d", "data_file", required=True, help="Binary data file")
@click.option("--count", "-n", type=int, default=None, help="Number of records to decode")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def decode(
    input_file: str, record_name: str, data_file: str, count: int | None, output_json: bool
) -> None:
    """Decode records from a binary file."""
    layout = _load_layout(input_file)
    record = _find_record(layout, record_name)
    codecs = LayoutCodecs(layout)
    codec = codecs.record(record)

    buffer = GrowableBuffer(Path(data_file).read_bytes(), Permission.READ)
    stream = BinaryStream(buffer)

    decoded: list[dict[str, Any]] = []
    try:
        while not buffer.is_end_of_stream and (count is None or len(decoded) < count):
            decoded.append(stream.read(codec))
    except (SerializationError, StreamError, zlib.error) as exc:
        _fail(f"Failed to decode {record_name} #{len(decoded)} at byte {buffer.position}: {exc}")

    rows = [to_json(codecs, LayoutType(record.name), value) for value in decoded]

    if output_json:
        print(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    console = Console()
    table = Table()
    table.add_column("#", style="dim", justify="right")
    for f in record.fields:
        table.add_column(f.name)
    for index, row in enumerate(rows):
        cells = (json.dumps(row[f.name], ensure_ascii=False) for f in record.fields)
        table.add_row(str(index), *cells)
    console.print(table)
    console.print(f"{record_name}: {len(rows)} decoded, {buffer.position} bytes")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input layout file")
@click.option("--record", "-r", "record_name", required=True, help="Record to encode")
@click.option("--values", "-v", "values_file", required=True, help="JSON object or list of objects")
@click.option("--output", "-o", "output_file", required=True, help="Output binary file")
def encode(input_file: str, record_name: str, values_file: str, output_file: str) -> None:
    """Encode JSON values as records into a binary file."""
    layout = _load_layout(input_file)
    record = _find_record(layout, record_name)
    codecs = LayoutCodecs(layout)
    codec = codecs.record(record)

    with open(values_file, encoding="utf-8") as f:
        data = json.load(f)
    items = data if isinstance(data, list) else [data]

    stream = BinaryStream()
    try:
        for item in items:
            stream.write(codec, from_json(codecs, LayoutType(record.name), item))
    except SerializationError as exc:
        _fail(f"Failed to encode {record_name}: {exc}")

    assert isinstance(stream.transport, GrowableBuffer)
    Path(output_file).write_bytes(stream.transport.to_bytes())
    print(f"Wrote {len(items)} {record_name} record(s), {stream.position} bytes to {output_file}")
