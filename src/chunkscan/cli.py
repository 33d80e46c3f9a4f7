"""CLI entry point for chunkscan."""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from chunkscan.config import load_options
from chunkscan.errors import ConfigError
from chunkscan.models import AnalysisOptions
from chunkscan.pipeline import DocumentAnalyzer
from chunkscan.utils import classify_file

logger = logging.getLogger(__name__)


def _options(config: str | None, thread: bool = False) -> AnalysisOptions:
    try:
        options = load_options(config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)
    if thread:
        options = dataclasses.replace(options, worker_mode="thread")
    return options


def analyze(
    source: str,
    chunks: int = 4,
    config: str | None = None,
    as_json: bool = False,
    output: str | None = None,
    thread: bool = False,
) -> int:
    """Analyze a document and print (or write) the report.

    Args:
        source: Path to a spreadsheet or PDF
        chunks: Number of byte-range chunks
        config: Optional YAML/JSON options file
        as_json: Print the full JSON report instead of a summary
        output: Write the JSON report to this path
        thread: Run jobs on threads instead of processes

    Returns:
        Process exit code
    """
    if chunks < 1:
        logger.error("Chunk count must be at least 1")
        return 2

    options = _options(config, thread)
    analyzer = DocumentAnalyzer(options)

    logger.info(f"Analyzing {source} ({chunks} chunks, {options.worker_mode} workers)")
    report = analyzer.analyze_path(source, chunks)

    if output:
        Path(output).write_text(report.to_json(), encoding="utf-8")
        logger.info(f"Report written to {output}")

    if as_json:
        print(report.to_json())
    elif report.error_kind is not None:
        logger.error(f"{report.error_kind.value}: {report.error}")
    else:
        structure = report.structure
        print(f"File: {report.file_path}")
        print(f"  Success: {report.success}")
        if report.metadata.get("title"):
            print(f"  Title: {report.metadata['title']}")
        print(f"  Sheets: {structure.sheets}")
        print(f"  Rows: {structure.total_rows}")
        print(f"  Cells: {structure.total_cells}")
        if report.quality is not None:
            print(f"  Quality: {report.quality.tier.value} ({report.quality.kind.value})")
        if report.failed_chunks:
            print(f"  Failed chunks: {report.failed_chunks}")
        if report.skipped_chunks:
            print(f"  Skipped chunks: {report.skipped_chunks}")
        if report.ocr_pages:
            print(f"  OCR pages: {len(report.ocr_pages)}")
        for chunk in report.chunks:
            kind = chunk.container_kind.value if chunk.container_kind else "-"
            status = "ok" if chunk.success else chunk.error_kind.value
            print(f"    [{chunk.chunk_index}] {kind:<16} {status:<14} attempts={chunk.attempts}")

    return 0 if report.success else 1


def detect(source: str) -> int:
    """Print the container kind detected from a file's leading bytes."""
    path = Path(source)
    if not path.is_file():
        logger.error(f"File not found: {source}")
        return 1
    print(classify_file(path).value)
    return 0


def show_config(config: str | None = None) -> int:
    """Print the effective options as JSON."""
    options = _options(config)
    print(json.dumps(options.to_mapping(), indent=2))
    return 0


def serve(config: str | None = None, transport: str = "stdio") -> None:
    """Start the MCP server.

    Args:
        config: Optional YAML/JSON options file
        transport: Transport protocol (stdio or sse)
    """
    options = _options(config)

    # Import here to avoid loading MCP unless needed
    from chunkscan.server import create_mcp_server

    from typing import cast, Literal

    logger.info(f"Serving chunkscan via {transport}")
    mcp = create_mcp_server(options)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunkscan",
        description="chunkscan - chunked spreadsheet and PDF analysis",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a spreadsheet or PDF",
    )
    analyze_parser.add_argument("source", help="Path to the document")
    analyze_parser.add_argument(
        "-n",
        "--chunks",
        type=int,
        default=4,
        help="Number of byte-range chunks (default: 4)",
    )
    analyze_parser.add_argument("-c", "--config", help="YAML or JSON options file")
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the full JSON report",
    )
    analyze_parser.add_argument("-o", "--output", help="Write the JSON report to a file")
    analyze_parser.add_argument(
        "--thread",
        action="store_true",
        help="Use threads instead of worker processes",
    )

    # detect command
    detect_parser = subparsers.add_parser(
        "detect",
        help="Detect a file's container format",
    )
    detect_parser.add_argument("source", help="Path to the file")

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Print the effective options",
    )
    config_parser.add_argument("-c", "--config", help="YAML or JSON options file")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the MCP server",
    )
    serve_parser.add_argument("-c", "--config", help="YAML or JSON options file")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    if args.command == "analyze":
        code = analyze(
            args.source,
            chunks=args.chunks,
            config=args.config,
            as_json=args.as_json,
            output=args.output,
            thread=args.thread,
        )
    elif args.command == "detect":
        code = detect(args.source)
    elif args.command == "config":
        code = show_config(args.config)
    else:
        serve(args.config, args.transport)
        code = 0

    sys.exit(code)


if __name__ == "__main__":
    main()
