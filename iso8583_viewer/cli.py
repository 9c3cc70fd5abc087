"""Headless CLI for ISO8583 Viewer.

This module intentionally avoids importing Qt/PySide6 so it can be used in
non-GUI contexts (CI, scripts, console exe).

Usage:
  python -m iso8583_viewer.cli parse -m 0200400000000000000006123456
  python -m iso8583_viewer.cli parse -i -t < message.txt
  python -m iso8583_viewer.cli fields --format json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Optional

import app_config
from iso8583_viewer.errors import ISO8583Error
from iso8583_viewer.field_dictionary import export_field_names
from iso8583_viewer.hexutil import clean_message
from iso8583_viewer.iso_parser import ParsedMessage, parse
from iso8583_viewer.log_setup import setup_logging

logger = logging.getLogger(__name__)


def render_text(result: ParsedMessage) -> str:
    """Render a parsed message the way the console tool prints it."""
    lines: list[str] = []
    if result.message_length is not None:
        lines.append(f"Length Of Message: {result.message_length}")
    if result.header is not None:
        lines.append(f"Header: {result.header}")
    lines.append(f"MTI: {result.mti}")
    lines.append(f"Primary Bitmap: {result.primary_bitmap}")
    if result.secondary_bitmap is not None:
        lines.append(f"Secondary Bitmap: {result.secondary_bitmap}")
    lines.append(f"Fields: {list(result.bitmap)}")
    lines.append("")
    for f in result.fields.values():
        lines.append(f"Field {f.id:3} | Length: {f.length:3} | {f.name:<25} | {f.value}")
        for sub in f.subfields or ():
            lines.append(str(sub))
        for tag in _walk_icc(f.emv_tags or ()):
            lines.append(str(tag))
    lines.append("")
    return "\n".join(lines)


def _walk_icc(tags):
    for t in tags:
        yield t
        if t.children:
            yield from _walk_icc(t.children)


def _write_output(text: str, out_path: Optional[str]) -> None:
    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        sys.stdout.write(text)


def _read_message() -> str:
    if sys.stdin.isatty():
        return input("Please enter a message to parse: ")
    return sys.stdin.read()


def _resolve_options(args: argparse.Namespace, cfg: dict[str, Any]) -> dict[str, bool]:
    opts = app_config.parse_options({} if args.no_config else cfg)
    if args.including_header_length:
        opts["including_header_length"] = True
    if args.tpdu:
        opts["tpdu"] = True
    if args.emv:
        opts["emv"] = True
    # Explicit private format flags replace the configured one
    if args.tlv_private or args.ltv_private:
        opts["tlv_private"] = args.tlv_private
        opts["ltv_private"] = args.ltv_private
    return opts


def cmd_parse(args: argparse.Namespace) -> int:
    cfg = args.config
    opts = _resolve_options(args, cfg)
    fmt = args.format or cfg["output"]["format"]

    raw = args.message if args.message is not None else _read_message()
    message = clean_message(raw)
    logger.info("Parsing message of %d characters with options %s", len(message), opts)

    try:
        result = parse(message, **opts)
    except ISO8583Error as e:
        sys.stderr.write(f"Error parsing message: {e}\n")
        return 1

    if fmt == "json":
        _write_output(json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n", args.out)
    else:
        _write_output(render_text(result), args.out)
    return 0


def cmd_fields(args: argparse.Namespace) -> int:
    names = export_field_names()
    if (args.format or args.config["output"]["format"]) == "json":
        _write_output(json.dumps({"fields": names}, indent=2, ensure_ascii=False) + "\n", args.out)
        return 0
    lines = [f"{entry['id']:3}  {entry['name']}" for entry in names]
    lines.append("")
    _write_output("\n".join(lines), args.out)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="iso8583-viewer",
        description="Headless CLI for ISO8583 Viewer (message decoding / field dictionary)",
    )
    ap.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: from config.json)",
    )

    sub = ap.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--format",
            choices=["text", "json"],
            default=None,
            help="Output format (default: from config.json, else text)",
        )
        p.add_argument(
            "--out",
            default=None,
            help="Write output to a file instead of stdout",
        )

    p_parse = sub.add_parser("parse", help="Decode a hex encoded ISO8583 message")
    add_common(p_parse)
    p_parse.add_argument(
        "-m",
        "--message",
        default=None,
        help="Message in hex (read from stdin when omitted)",
    )
    p_parse.add_argument(
        "-i",
        "--including-header-length",
        action="store_true",
        help="Message starts with a 2-byte length header",
    )
    p_parse.add_argument(
        "-t",
        "--tlv-private",
        action="store_true",
        help="Decode private fields (48, 121) as tag-length-value",
    )
    p_parse.add_argument(
        "-l",
        "--ltv-private",
        action="store_true",
        help="Decode private fields (48, 121) as length-tag-value",
    )
    p_parse.add_argument(
        "--tpdu",
        action="store_true",
        help="A 5-byte TPDU header precedes the MTI",
    )
    p_parse.add_argument(
        "--emv",
        action="store_true",
        help="Decode ICC data (field 55) as BER-TLV",
    )
    p_parse.add_argument(
        "--no-config",
        action="store_true",
        help="Ignore parser defaults from config.json",
    )
    p_parse.set_defaults(func=cmd_parse)

    p_fields = sub.add_parser("fields", help="Print the field dictionary")
    add_common(p_fields)
    p_fields.set_defaults(func=cmd_fields)

    return ap


def main(argv: Optional[list[str]] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)
    args.config = app_config.load_config()
    logging_cfg = args.config["logging"]
    setup_logging(args.log_level or logging_cfg["level"], logging_cfg["file"])
    try:
        return int(args.func(args))
    except BrokenPipeError:
        # e.g. piping to `head`/`more` and downstream closes
        return 0
    except Exception as e:
        sys.stderr.write(f"Error: {e}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
