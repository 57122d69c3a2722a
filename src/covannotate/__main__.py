import sys
import os
import json
import warnings
from pathlib import Path
import covannotate as ca


def read_candidates(args, messages):
    """Scans each input report, returning all their annotation candidates, or None on error."""
    candidates = []
    for f in args.report:
        try:
            coverage_map = ca.load_coverage_map(f)
            candidates.extend(ca.scan_coverage_map(coverage_map, cwd=args.cwd, messages=messages))
        except (OSError, json.JSONDecodeError, ca.CoverageFormatError) as e:
            warnings.warn(f"Error reading {f}: {e}")
            return None

    return candidates


def main():
    import argparse

    ap = argparse.ArgumentParser(prog='covannotate',
                                 description="Creates code review annotations for code not covered by tests, " +
                                             "from Istanbul/Jest JSON coverage reports.")
    ap.add_argument('report', nargs='+', type=Path,
                    help="coverage-final.json or `jest --json --coverage' output; '-' reads stdin")
    ap.add_argument('--table', action='store_true', help="select tabular (non-JSON) output")
    ap.add_argument('--pretty-print', action='store_true', help="pretty-print JSON output")
    ap.add_argument('--out', type=Path, help="specify output file name")
    ap.add_argument('--cwd', type=Path, default=Path.cwd(),
                    help="directory that annotation paths are made relative to (default: current directory)")
    ap.add_argument('--locale', default=os.environ.get('COVANNOTATE_LOCALE', ca.DEFAULT_LOCALE),
                    help="locale for annotation titles and messages")
    ap.add_argument('--messages', type=Path, metavar="FILE",
                    help="JSON file with annotation titles and messages, overriding the built-in ones")
    ap.add_argument('--fail-on-uncovered', action='store_true',
                    help="fail execution with RC 2 if any annotations are produced")
    ap.add_argument('--message-width', type=int, default=60, metavar="WIDTH",
                    help="maximum width for `message' column")
    ap.add_argument('--version', action='version',
                    version=f"%(prog)s v{ca.__version__} (Python {'.'.join(map(str, sys.version_info[:3]))})")

    args = ap.parse_args(sys.argv[1:])

    messages = ca.MessageCatalog(args.locale)
    if args.messages:
        try:
            messages.load(args.messages)
        except (OSError, ValueError) as e:
            warnings.warn(f"Error reading {args.messages}: {e}")
            return 1

    candidates = read_candidates(args, messages)
    if candidates is None:
        return 1

    annotations = ca.filter_valid_annotations(ca.deduplicate_annotations(candidates))

    def printit(outfile):
        if args.table:
            ca.print_annotations(annotations, outfile=outfile, message_width=args.message_width)
        else:
            print(json.dumps(annotations, indent=(4 if args.pretty_print else None), ensure_ascii=False),
                  file=outfile)

    if args.out:
        with open(args.out, "w", encoding='utf-8') as outfile:
            printit(outfile)
    else:
        printit(sys.stdout)

    if args.fail_on_uncovered and annotations:
        return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
