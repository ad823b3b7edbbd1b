"""Main CLI entry point for the simple-xml-tree command-line tool.

Provides parse, validate, search and merge commands over XML files.
"""

import argparse
import json
import logging
import sys
from functools import reduce
from pathlib import Path
from typing import Any, Dict, List, Optional

from simple_xml_tree import __version__
from simple_xml_tree.api import XmlTreeParser, save
from simple_xml_tree.shared.config import ConfigError, ParserConfig
from simple_xml_tree.shared.logging import get_logger
from simple_xml_tree.tokenization import strip_formatting, strip_header
from simple_xml_tree.tree import ParseResult, XmlTree, is_tree, merge

logger = get_logger(__name__, None, "cli")


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from ``--config`` and command options.

    ``--verbose`` and ``--quiet`` set the logging level; without either, a
    configuration file keeps its own level and the default is WARNING.
    """
    config = ParserConfig()
    config_path: Optional[Path] = getattr(args, "config", None)
    if config_path is not None:
        config = ParserConfig.from_json(config_path.read_text(encoding="utf-8"))

    overrides: Dict[str, Any] = {}
    if getattr(args, "verbose", False):
        overrides["global___logging_level"] = "DEBUG"
    elif getattr(args, "quiet", False):
        overrides["global___logging_level"] = "ERROR"
    elif config_path is None:
        overrides["global___logging_level"] = "WARNING"
    if getattr(args, "merge_siblings", False):
        overrides["tree__merge_unseparated_roots"] = True
    indent = getattr(args, "indent", None)
    if indent is not None:
        overrides["serialization__indent"] = " " * indent
    return config.override(**overrides) if overrides else config


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="simple-xml-tree",
        description="Parse, check, search and merge small XML documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse XML files and print their trees")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to parse"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    parse_parser.add_argument(
        "--indent",
        type=int,
        help="Spaces per nesting level in text output"
    )
    parse_parser.add_argument(
        "--merge-siblings",
        action="store_true",
        help="Merge several root elements instead of failing"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check that files are usable trees")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to validate"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format"
    )

    # Search command
    search_parser = subparsers.add_parser("search", help="Find every element with a tag name")
    search_parser.add_argument("path", type=Path, help="XML file to search")
    search_parser.add_argument("tag", help="Tag name to look for")
    search_parser.add_argument(
        "--indent",
        type=int,
        help="Spaces per nesting level in output"
    )

    # Merge command
    merge_parser = subparsers.add_parser("merge", help="Merge several XML files into one tree")
    merge_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to merge, left to right"
    )
    merge_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    merge_parser.add_argument(
        "--no-overwrite",
        action="store_true",
        help="Fail instead of replacing an existing output file"
    )
    merge_parser.add_argument(
        "--indent",
        type=int,
        help="Spaces per nesting level in output"
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


def describe_result(path: Path, result: ParseResult) -> Dict[str, Any]:
    """Flatten a parse result into a JSON-ready record."""
    record: Dict[str, Any] = {"file": str(path), **result.summary()}
    if result.tree is not None:
        record["tree"] = result.tree.to_dict()
    return record


def format_failure(path: Path, result: ParseResult) -> str:
    """Human-readable failure report, listing separated fragments if any."""
    kind = result.failure_kind.name if result.failure_kind else "UNKNOWN"
    message = result.error.message if result.error else ""
    lines = [f"✗ {path}: {kind}: {message}"]
    for index, fragment in enumerate(result.fragments, start=1):
        lines.append(f"   Fragment {index}: {fragment}")
    return "\n".join(lines)


def _parse_paths(parser: XmlTreeParser, paths: List[Path]) -> List[ParseResult]:
    return [parser.parse(path) for path in paths]


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    parser = XmlTreeParser(load_config(args))
    results = _parse_paths(parser, args.paths)

    if args.format == "json":
        records = [describe_result(path, result) for path, result in zip(args.paths, results)]
        print(json.dumps(records, indent=2))
    else:
        for path, result in zip(args.paths, results):
            if result.success:
                print(parser.to_text(result.unwrap()))
            else:
                print(format_failure(path, result), file=sys.stderr)

    return 0 if all(result.success for result in results) else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    records = []
    for path in args.paths:
        if not path.exists():
            records.append({"file": str(path), "valid": False, "error": "File not found"})
            continue
        xml = strip_formatting(strip_header(path.read_text(encoding="utf-8")))
        records.append({"file": str(path), "valid": is_tree(xml)})

    if args.format == "json":
        print(json.dumps(records, indent=2))
    else:
        valid_count = sum(1 for record in records if record["valid"])
        print(f"Validated {len(records)} files, {valid_count} valid")
        print("-" * 50)
        for record in records:
            status = "✓" if record["valid"] else "✗"
            suffix = f" ({record['error']})" if "error" in record else ""
            print(f"{status} {record['file']}{suffix}")

    return 0 if all(record["valid"] for record in records) else 1


def cmd_search(args: argparse.Namespace) -> int:
    """Handle search command."""
    parser = XmlTreeParser(load_config(args))
    result = parser.parse(args.path)
    if not result.success:
        print(format_failure(args.path, result), file=sys.stderr)
        return 1

    matches = result.unwrap().search(args.tag)
    print(parser.to_text(matches))
    return 0 if not matches.is_empty else 1


def cmd_merge(args: argparse.Namespace) -> int:
    """Handle merge command."""
    parser = XmlTreeParser(load_config(args))
    trees: List[XmlTree] = []
    for path in args.paths:
        result = parser.parse(path)
        if not result.success:
            print(format_failure(path, result), file=sys.stderr)
            return 1
        trees.append(result.unwrap())

    merged = reduce(merge, trees)
    if args.output is None:
        print(parser.to_text(merged))
        return 0

    try:
        save(merged, args.output, not args.no_overwrite, parser.config.serialization.indent)
    except FileExistsError:
        print(f"Output file already exists: {args.output}", file=sys.stderr)
        return 1
    print(f"Merged tree written to {args.output}", file=sys.stderr)
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
    else:
        logging.basicConfig(level=logging.WARNING)

    handlers = {
        "parse": cmd_parse,
        "validate": cmd_validate,
        "search": cmd_search,
        "merge": cmd_merge,
    }
    try:
        return handlers[args.command](args)
    except ConfigError as e:
        logger.error("Invalid configuration", exc_info=False)
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
