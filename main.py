#!/usr/bin/env python3
"""
Markup Module Diff
Command line entry point: compares same-named modules across HTML sources.
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.config import DiffOptions, load_options
from core.errors import MarkupDiffError
from core.markup_diff import MarkupDiff
from comparator.report_builder import ReportBuilder

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='markup-diff',
        description='Detect structural drift between modules embedded in HTML documents.'
    )
    parser.add_argument('sources', nargs='+',
                        help='Glob pattern or http(s) url, compared in the given order')
    parser.add_argument('--attributes', nargs='+', metavar='PATTERN',
                        help='Attribute name patterns to compare (default: all)')
    parser.add_argument('--no-inner-text', action='store_true',
                        help='Ignore the presence of text nodes')
    parser.add_argument('--all-errors', action='store_true',
                        help='Show every mismatching line, not only the first per module')
    parser.add_argument('--config', metavar='FILE', help='JSON options file')
    parser.add_argument('--json-report', metavar='FILE', help='Write a JSON report')
    parser.add_argument('--html-report', metavar='FILE', help='Write an HTML report')
    parser.add_argument('--quiet', action='store_true', help='No console report')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    return parser


def options_from_args(args: argparse.Namespace) -> DiffOptions:
    overrides = {}
    if args.attributes:
        overrides['attributes'] = args.attributes
    if args.no_inner_text:
        overrides['process_inner_text'] = False
    if args.all_errors:
        overrides['console_out_first_error_only'] = False
    if args.quiet:
        overrides['console_out'] = False

    if args.config:
        return load_options(args.config, overrides)
    return DiffOptions.from_mapping(overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    reporter = ReportBuilder()
    try:
        options = options_from_args(args)
        result = MarkupDiff(options, reporter=reporter).compare(args.sources)
    except MarkupDiffError as e:
        print(f'Error {e.code}: {e.description}', file=sys.stderr)
        return 1

    if args.json_report:
        path = reporter.generate_json_report(args.json_report)
        print(f'JSON report written to {path}')
    if args.html_report:
        path = reporter.generate_html_report(args.html_report)
        print(f'HTML report written to {path}')
    return 0


if __name__ == "__main__":
    sys.exit(main())
