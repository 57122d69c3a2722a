from __future__ import annotations
import sys
import os
import math
import functools
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, List, Optional, Tuple

from .messages import default_messages

if TYPE_CHECKING:
    from .schemas import Annotation, CoverageMap, FileCoverage, LineRange, Location


ANNOTATION_LEVEL = 'warning'

# comparison order for annotations, with the value used when a field is absent
ANNOTATION_FIELDS = (
    ('path', ''),
    ('start_line', 1),
    ('end_line', 1),
    ('start_column', 1),
    ('end_column', 1),
    ('annotation_level', ''),
    ('title', ''),
    ('message', ''),
)

# fields every file record must have, once unwrapped
FILE_COVERAGE_FIELDS = ('statementMap', 's', 'branchMap', 'b', 'fnMap', 'f')

STATEMENT_MESSAGES = ('notCoveredStatementTitle', 'notCoveredStatementMessage')
BRANCH_MESSAGES = ('notCoveredBranchTitle', 'notCoveredBranchMessage')
FUNCTION_MESSAGES = ('notCoveredFunctionTitle', 'notCoveredFunctionMessage')


class CoverageFormatError(ValueError):
    """Raised when coverage data doesn't have the structure of an Istanbul coverage map."""


class PathSimplifier:
    def __init__(self, cwd: Optional[str | Path] = None):
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()

    def simplify(self, path : str) -> str:
        f = Path(path)
        if not f.is_absolute():
            f = self.cwd / f

        try:
            return os.path.relpath(f, self.cwd)
        except ValueError:
            # on Windows, a path on another drive can't be made relative
            return path


def is_number(value: Any) -> bool:
    # bool is an int subclass, but never a line number or hit count
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_number(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


def _line_of(location: Any) -> float:
    line = location.get('line') if isinstance(location, Mapping) else None
    return line if is_number(line) else math.nan


def _column_of(location: Any) -> Optional[int]:
    column = location.get('column') if isinstance(location, Mapping) else None
    return column if is_number(column) else None


def get_location(start: Optional[Location] = None, end: Optional[Location] = None) -> LineRange:
    """Converts a start/end location pair into an annotation's line (and column) range.

    Absent locations count as line 0.  `end_line' is always the end location's
    line, even if the start comes after it: such inverted ranges are passed on
    as they are.  Columns are only given for ranges within a single line, and
    only if both locations have one.
    """
    if start is None:
        start = {'line': 0}
    if end is None:
        end = {'line': 0}

    start_line = _line_of(start)
    end_line = _line_of(end)

    location: LineRange = {
        'start_line': math.nan if math.isnan(start_line) or math.isnan(end_line)
                      else min(start_line, end_line),
        'end_line': end_line,
    }

    start_column = _column_of(start)
    end_column = _column_of(end)
    if start_line == end_line and start_column is not None and end_column is not None:
        location['start_column'] = max(1, min(start_column, end_column))
        location['end_column'] = max(1, start_column, end_column)

    return location


def normalize_file_coverage(file_name: str, file_coverage: Any) -> FileCoverage:
    """Returns a file's coverage record, unwrapping it from under `data' if needed."""

    if not isinstance(file_coverage, Mapping):
        raise CoverageFormatError(f"{file_name}: coverage record is not an object")

    if 'statementMap' not in file_coverage:
        if not isinstance(file_coverage.get('data'), Mapping):
            raise CoverageFormatError(f"{file_name}: coverage record has neither 'statementMap' nor 'data'")
        file_coverage = file_coverage['data']

    missing = [field for field in FILE_COVERAGE_FIELDS if file_coverage.get(field) is None]
    if missing:
        raise CoverageFormatError(f"{file_name}: coverage record is missing {', '.join(missing)}")

    return file_coverage


def _entries(container: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(container, Mapping):
        yield from container.items()
    elif isinstance(container, Sequence) and not isinstance(container, str):
        yield from enumerate(container)


def _as_int(index: Any) -> Optional[int]:
    try:
        return int(index)
    except (TypeError, ValueError):
        return None


def _hit_count(counts: Any, index: Any) -> Any:
    """Looks up a hit count by index, which may be an int or (as in JSON) a string."""
    if isinstance(counts, Mapping):
        if index in counts:
            return counts[index]
        if isinstance(index, int):
            return counts.get(str(index))
        return counts.get(_as_int(index))

    if isinstance(counts, Sequence) and not isinstance(counts, str):
        i = _as_int(index)
        if i is not None and 0 <= i < len(counts):
            return counts[i]

    return None


def _is_uncovered(count: Any) -> bool:
    return is_number(count) and count == 0


def _make_annotation(path: str, code_range: Any, message_keys: Tuple[str, str],
                     messages: Callable[[str], str]) -> dict:
    if not isinstance(code_range, Mapping):
        code_range = {}

    title_key, message_key = message_keys
    return {
        **get_location(code_range.get('start'), code_range.get('end')),
        'path': path,
        'annotation_level': ANNOTATION_LEVEL,
        'title': messages(title_key),
        'message': messages(message_key),
    }


def scan_coverage_map(coverage_map: CoverageMap, *, cwd: Optional[str | Path] = None,
                      messages: Optional[Callable[[str], str]] = None) -> List[dict]:
    """Creates an annotation for each statement, branch and function never executed.

    The result is unsorted and may contain duplicates, as well as annotations
    with invalid (NaN) lines where the coverage data lacks them.
    """
    messages = messages or default_messages
    simp = PathSimplifier(cwd)
    annotations = []

    for file_name, file_coverage in coverage_map.items():
        path = simp.simplify(file_name)
        file_coverage = normalize_file_coverage(file_name, file_coverage)

        for index, statement in _entries(file_coverage['statementMap']):
            if _is_uncovered(_hit_count(file_coverage['s'], index)):
                annotations.append(_make_annotation(path, statement, STATEMENT_MESSAGES, messages))

        for index, branch in _entries(file_coverage['branchMap']):
            locations = branch.get('locations') if isinstance(branch, Mapping) else None
            if not locations:
                continue

            counts = _hit_count(file_coverage['b'], index)
            for loc_index, location in enumerate(locations):
                if _is_uncovered(_hit_count(counts, loc_index)):
                    annotations.append(_make_annotation(path, location, BRANCH_MESSAGES, messages))

        for index, function in _entries(file_coverage['fnMap']):
            if _is_uncovered(_hit_count(file_coverage['f'], index)):
                # older Istanbul versions only record the whole function's `loc'
                decl = (function.get('decl') or function.get('loc')) if isinstance(function, Mapping) else None
                annotations.append(_make_annotation(path, decl, FUNCTION_MESSAGES, messages))

    return annotations


def compare_annotations(a: Mapping[str, Any], b: Mapping[str, Any]) -> int:
    """Compares two annotations field by field, in ANNOTATION_FIELDS order."""
    for field, default in ANNOTATION_FIELDS:
        a_value = a.get(field)
        b_value = b.get(field)
        if a_value is None:
            a_value = default
        if b_value is None:
            b_value = default

        if a_value < b_value:
            return -1
        if a_value > b_value:
            return 1

    return 0


def deduplicate_annotations(annotations: Iterable[dict]) -> List[dict]:
    """Sorts annotations, dropping any that equal the one just before them."""

    ordered = sorted(annotations, key=functools.cmp_to_key(compare_annotations))

    return [annotation for i, annotation in enumerate(ordered)
            if i == 0 or compare_annotations(annotation, ordered[i-1]) != 0]


def filter_valid_annotations(annotations: Iterable[dict]) -> List[Annotation]:
    """Keeps only annotations whose start and end lines are actual numbers."""
    return [annotation for annotation in annotations
            if is_valid_number(annotation.get('start_line')) and is_valid_number(annotation.get('end_line'))]


def create_coverage_annotations(coverage_map: CoverageMap, *, cwd: Optional[str | Path] = None,
                                messages: Optional[Callable[[str], str]] = None) -> List[Annotation]:
    """Returns sorted, deduplicated annotations for the code a coverage map shows as not covered.

    `cwd' is the directory file paths are made relative to (the current
    directory by default); `messages' maps message keys to the titles and
    messages shown (English by default).
    """
    candidates = scan_coverage_map(coverage_map, cwd=cwd, messages=messages)
    return filter_valid_annotations(deduplicate_annotations(candidates))


def format_range(first, last) -> str:
    if first is None:
        return ""

    return str(first) if first == last else f"{first}-{last}"


def print_annotations(annotations: List[Annotation], outfile=sys.stdout, *,
                      message_width: Optional[int] = None) -> None:
    from tabulate import tabulate

    def table():
        for a in annotations:
            yield [a['path'], format_range(a['start_line'], a['end_line']),
                   format_range(a.get('start_column'), a.get('end_column')),
                   a['annotation_level'], a['title'], a['message']]

    print("", file=outfile)
    headers = ["File", "Lines", "Columns", "Level", "Title", "Message"]
    rows = list(table())
    maxcolwidths = [None] * (len(headers)-1) + [message_width] if rows else None
    print(tabulate(rows, headers=headers, maxcolwidths=maxcolwidths), file=outfile)
    print(f"\n{len(annotations)} annotation{'' if len(annotations) == 1 else 's'}", file=outfile)
