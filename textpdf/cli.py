"""
Command-line interface for TextPDF.

Usage:
    textpdf render template.xml --data data.json --format pdf --output out.pdf
    textpdf render template.xml --format html --css style.css
    textpdf version
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .exceptions import TextPDFError
from .utils.logger import LOG_LEVELS, add_file_handler
from .utils.rich_logger import setup_logging

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_DIAGNOSTICS = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="textpdf",
        description="TextPDF - render XML document templates to PDF or HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  textpdf render contract.xml --data contract.json --output contract.pdf
  textpdf render contract.xml --format html --css form.css --value-mode combo
  textpdf version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render a template")
    render_parser.add_argument("template", help="Template XML file")
    render_parser.add_argument("-d", "--data", help="JSON data file with 'title' and 'data'")
    render_parser.add_argument(
        "-f", "--format",
        choices=["pdf", "html"],
        default="pdf",
        help="Output format (default: pdf)"
    )
    render_parser.add_argument(
        "-o", "--output",
        help="Output file path (default: template name with new extension)"
    )
    render_parser.add_argument(
        "--css",
        action="append",
        default=[],
        metavar="URL",
        help="Stylesheet linked from the HTML head (repeatable)"
    )
    render_parser.add_argument(
        "--js",
        action="append",
        default=[],
        metavar="URL",
        help="Script linked from the HTML head (repeatable)"
    )
    render_parser.add_argument(
        "--value-mode",
        choices=["input", "combo"],
        default="input",
        help="How placeholders are rendered in HTML (default: input)"
    )
    render_parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Log level (default: WARNING)"
    )
    render_parser.add_argument(
        "--log-file",
        help="Also write log records to a rotating log file"
    )
    render_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 2 when any diagnostic was reported"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def cmd_render(args) -> int:
    """Handle render command."""
    from .api import Template
    from .renderers.html_renderer import HTMLRendererConfig, HtmlValueMode

    setup_logging(args.log_level)
    if args.log_file:
        add_file_handler(logging.getLogger(), args.log_file, args.log_level)

    template_path = Path(args.template)
    if not template_path.exists():
        print(f"Error: File not found: {template_path}", file=sys.stderr)
        return EXIT_FAILURE
    if args.data and not Path(args.data).exists():
        print(f"Error: File not found: {args.data}", file=sys.stderr)
        return EXIT_FAILURE

    output_path = Path(args.output) if args.output else template_path.with_suffix(f".{args.format}")

    template = Template(template_path, data=args.data)
    try:
        if args.format == "html":
            config = HTMLRendererConfig(
                css_links=tuple(args.css),
                js_links=tuple(args.js),
                value_mode=HtmlValueMode(args.value_mode),
            )
            diagnostics = template.to_html(output_path, config)
        else:
            diagnostics = template.to_pdf(output_path)
    except TextPDFError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    print(f"Saved: {output_path}")
    if diagnostics:
        print(f"{len(diagnostics)} diagnostic(s):")
        for diagnostic in diagnostics:
            print(f"  {diagnostic}")
        if args.strict:
            return EXIT_DIAGNOSTICS
    return EXIT_OK


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"TextPDF v{__version__}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "render":
        return cmd_render(args)
    if args.command == "version":
        return cmd_version(args)

    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
