#!/usr/bin/env python
"""
Command-line interface for the OCR markdown layout engine.

Usage:
    ocr-layout --input <ocr.md> --output <file> [options]

Examples:
    # Plain sequential layout to PDF
    ocr-layout --input scan.md --output scan.pdf

    # Keep the original positions from bounding boxes
    ocr-layout --input scan.md --output scan.pdf --use-coordinates

    # Strip every OCR tag and write the markdown back
    ocr-layout --input scan.md --output clean.md --format markdown --clean
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import TableStyle, get_config
from .utils.assembler import DocumentAssembler
from .utils.io import DocumentIOError

logger = logging.getLogger("ocr_layout")


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="ocr-layout",
        description="OCR markdown layout - rebuild a paginated document from OCR markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Plain layout to PDF:
    ocr-layout --input scan.md --output scan.pdf

  Coordinate layout with ASCII tables:
    ocr-layout --input scan.md --output scan.pdf --use-coordinates --table-style ascii

  Dump the laid-out page model:
    ocr-layout --input scan.md --output scan.json --format json
        """
    )

    # Required arguments
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input OCR markdown file"
    )

    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Output file"
    )

    # Optional arguments
    parser.add_argument(
        "--format", "-f",
        default="pdf",
        choices=["pdf", "json", "markdown"],
        help="Output format (default: pdf)"
    )

    parser.add_argument(
        "--use-coordinates",
        action="store_true",
        help="Place blocks using their bounding boxes (preserves original layout)"
    )

    parser.add_argument(
        "--table-style",
        choices=[s.value for s in TableStyle],
        default=None,
        help="Table rendering (default: bordered)"
    )

    parser.add_argument(
        "--clean",
        action="store_true",
        help="With --format markdown, remove bounding boxes and all OCR tags"
    )

    parser.add_argument(
        "--title",
        default=None,
        help="Document title stored in the PDF metadata"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (re-raise unexpected errors)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def run_pipeline(args) -> int:
    """Run the conversion."""
    config = get_config()
    if args.use_coordinates:
        config.use_coordinates = True
    if args.table_style:
        config.table.style = TableStyle(args.table_style)
    if args.title:
        config.title = args.title
    if args.debug:
        config.debug_mode = True

    input_path = Path(args.input)
    output_path = Path(args.output)

    assembler = DocumentAssembler(config)
    result = assembler.convert_file(
        input_path,
        output_path,
        output_format=args.format,
        clean=args.clean
    )

    if result is not None and not args.quiet:
        metrics = result.metrics
        print("\n" + "=" * 60)
        print("LAYOUT COMPLETE")
        print("=" * 60)
        print(f"Source: {input_path}")
        print(f"Output: {output_path}")
        print(f"Layout mode: {result.mode_used.value}")
        print(f"Pages: {metrics.pages}")
        print(f"Processing time: {metrics.processing_time:.2f}s")
        print()
        print("Content:")
        print(f"  Blocks parsed: {metrics.blocks_parsed}")
        print(f"  Text groups: {metrics.text_groups}")
        print(f"  Headers: {metrics.headers}")
        print(f"  List items: {metrics.list_items}")
        print(f"  Tables: {metrics.tables_rendered} (skipped: {metrics.tables_skipped})")
        print("=" * 60)

    return 0


def main():
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    try:
        exit_code = run_pipeline(args)
        sys.exit(exit_code)
    except DocumentIOError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
