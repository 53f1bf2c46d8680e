"""Command line entry point for datadiff."""

import argparse
import logging
import sys

from . import __version__
from .config import resolve
from .engine import DatadiffEngine
from .exceptions import DatadiffError, UsageError
from .logging_ import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="datadiff",
        description="Find structural differences between two JSON or YAML documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  datadiff -c old.json new.json -k -t -v -a
  datadiff -c old.yaml new.yaml -v -o -x '$.metadata.timestamp'
  datadiff -c old.json new.json -k -v -w session.json
  datadiff -r session.json -b report.html -p
  datadiff -r session.json -v -a
        """
    )

    source = parser.add_argument_group("source")
    source.add_argument("-c", "--check-files", nargs=2, metavar=("LEFT", "RIGHT"),
                        dest="check_files", help="Compare two documents")
    source.add_argument("-r", "--read-from", metavar="SESSION", dest="read_from",
                        help="Replay a saved session file")

    output = parser.add_argument_group("output")
    output.add_argument("-w", "--write-to", metavar="PATH", dest="write_to",
                        help="Save the session to a file (wins over -b)")
    output.add_argument("-b", "--browser-view", metavar="PATH", dest="browser_view",
                        help="Write an HTML report and open it in a browser")
    output.add_argument("-p", "--printer-friendly", action="store_true",
                        dest="printer_friendly", help="Use the printer friendly theme with -b")
    output.add_argument("-n", "--no-browser-show", action="store_true",
                        dest="no_browser_show", help="Do not open the report written by -b")

    kinds = parser.add_argument_group("difference kinds")
    kinds.add_argument("-k", "--key-diffs", action="store_true", dest="key_diffs",
                       help="Report keys present on only one side")
    kinds.add_argument("-t", "--type-diffs", action="store_true", dest="type_diffs",
                       help="Report values whose types differ")
    kinds.add_argument("-v", "--value-diffs", action="store_true", dest="value_diffs",
                       help="Report scalar values that differ")
    kinds.add_argument("-a", "--array-diffs", action="store_true", dest="array_diffs",
                       help="Report array elements present on only one side")

    parser.add_argument("-o", "--array-same-order", action="store_true",
                        dest="array_same_order",
                        help="Treat array order as significant")
    parser.add_argument("-x", "--exclude", action="append", metavar="JSONPATH",
                        dest="exclude", help="Ignore locations matching a JSONPath (repeatable)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-V", "--version", action="version",
                        version=f"%(prog)s {__version__}")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        config = resolve(args)
        return DatadiffEngine().run(config)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"error: {e.message}", file=sys.stderr)
        return e.exit_code
    except DatadiffError as e:
        logger.debug("Run failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
