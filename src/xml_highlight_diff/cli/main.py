"""Main CLI entry point for the xml-highlight-diff command-line tool.

Formats a single XML file as highlight-ready markup, or compares two files and
writes a side-by-side HTML page (or a JSON object) with the differences
highlighted.
"""

import argparse
import codecs
import html
import json
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from xml_highlight_diff import __version__
from xml_highlight_diff.api import XMLComparer
from xml_highlight_diff.shared.config import ComparerConfig, ConfigError
from xml_highlight_diff.shared.result import ComparisonResult
from xml_highlight_diff.tree import XMLParseError

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
table {{ width: 100%; border-collapse: collapse; table-layout: fixed; }}
th, td {{ border: 1px solid #ccc; padding: 8px; vertical-align: top; }}
td {{ font-family: monospace; white-space: nowrap; overflow-x: auto; }}
</style>
</head>
<body>
<table>
<tr><th>{left_title}</th><th>{right_title}</th></tr>
<tr><td>{left}</td><td>{right}</td></tr>
</table>
</body>
</html>
"""


# UTF-32 marks first, the UTF-16 LE mark is a prefix of the UTF-32 LE one
_BYTE_ORDER_MARKS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)
_ENCODING_DECLARATION_RE = re.compile(
    rb"<\?xml[^>]*?encoding\s*=\s*[\"']([A-Za-z][A-Za-z0-9._-]*)[\"']"
)


def load_config(args: argparse.Namespace) -> ComparerConfig:
    """Build the comparer configuration from a file and command-line flags."""
    config = ComparerConfig()
    config_path = getattr(args, "config", None)
    if config_path is not None:
        config = ComparerConfig.from_json(config_path.read_text(encoding="utf-8"))

    overrides = {}
    if getattr(args, "highlight_unmatched_elements", False):
        overrides["render__highlight_unmatched_elements"] = True
    if getattr(args, "fallback_on_parse_error", False):
        overrides["fallback_on_parse_error"] = True
    if overrides:
        config = config.override(**overrides)
    return config


def render_page(result: ComparisonResult, left_title: str, right_title: str) -> str:
    """Embed a comparison result in a standalone two-column HTML page."""
    return PAGE_TEMPLATE.format(
        title=html.escape(f"{left_title} vs {right_title}"),
        left_title=html.escape(left_title),
        right_title=html.escape(right_title),
        left=result.left,
        right=result.right,
    )


def read_xml_file(path: Path) -> str:
    """Read an XML file, decoding it by byte order mark or declared encoding.

    Files without either are read as UTF-8.

    Raises:
        UnicodeError: If the content cannot be decoded
    """
    data = path.read_bytes()
    for bom, bom_encoding in _BYTE_ORDER_MARKS:
        if data.startswith(bom):
            encoding = bom_encoding
            break
    else:
        match = _ENCODING_DECLARATION_RE.match(data)
        encoding = match.group(1).decode("ascii") if match else "utf-8"

    try:
        return data.decode(encoding)
    except LookupError as e:
        raise UnicodeError(f"Unknown encoding {encoding!r} declared in {path}") from e
    except UnicodeDecodeError as e:
        raise UnicodeError(f"Cannot decode {path} as {encoding}: {e.reason}") from e


def write_output(text: str, output: Optional[Path]) -> None:
    """Write ``text`` to ``output`` or to stdout."""
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print(f"Output written to {output}", file=sys.stderr)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-highlight-diff",
        description="Compare XML documents and render them side by side with "
                    "differences highlighted"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Format command
    format_parser = subparsers.add_parser(
        "format", help="Format one XML file as highlight-ready markup"
    )
    format_parser.add_argument("path", type=Path, help="XML file to format")
    format_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    format_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    # Compare command
    compare_parser = subparsers.add_parser(
        "compare", help="Compare two XML files side by side"
    )
    compare_parser.add_argument("left", type=Path, help="Left-hand XML file")
    compare_parser.add_argument("right", type=Path, help="Right-hand XML file")
    compare_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    compare_parser.add_argument(
        "--format", "-f",
        choices=["html", "json"],
        default="html",
        help="Output format (default: html)"
    )
    compare_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    compare_parser.add_argument(
        "--highlight-unmatched-elements",
        action="store_true",
        help="Also highlight the tag names of elements without counterpart"
    )
    compare_parser.add_argument(
        "--fallback-on-parse-error",
        action="store_true",
        help="Show malformed input unchanged instead of failing"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def cmd_format(args: argparse.Namespace) -> int:
    """Handle format command."""
    config = load_config(args)
    text = read_xml_file(args.path)
    write_output(XMLComparer(config).format_xml(text), args.output)
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Handle compare command."""
    config = load_config(args)
    left_text = read_xml_file(args.left)
    right_text = read_xml_file(args.right)

    try:
        result = XMLComparer(config).compare(left_text, right_text)
    except XMLParseError as e:
        path = args.left if e.side == "left" else args.right
        print(f"Error: {path} is not well-formed XML: {e.message}", file=sys.stderr)
        return 1

    for diagnostic in result.diagnostics:
        print(f"Warning: {diagnostic.message}", file=sys.stderr)

    if args.format == "json":
        output = json.dumps(result.to_dict(), indent=2)
    else:
        output = render_page(result, str(args.left), str(args.right))
    write_output(output, args.output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    # Route to appropriate command handler
    try:
        if args.command == "format":
            return cmd_format(args)
        if args.command == "compare":
            return cmd_compare(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except FileNotFoundError as e:
        print(f"File not found: {e.filename}", file=sys.stderr)
        return 1
    except (OSError, UnicodeError) as e:
        print(f"Cannot read input: {e}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
