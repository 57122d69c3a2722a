"""Reading coverage maps from Istanbul's and Jest's JSON output."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from .annotations import CoverageFormatError

if TYPE_CHECKING:
    from .schemas import CoverageMap


def extract_coverage_map(report: Any) -> CoverageMap:
    """Returns the coverage map within a decoded report.

    `report' may be a coverage map itself (as in Istanbul's coverage-final.json)
    or the output of `jest --json --coverage', which holds it under `coverageMap'.
    """
    if not isinstance(report, dict):
        raise CoverageFormatError("coverage report is not a JSON object")

    if 'coverageMap' in report:
        report = report['coverageMap']
        if not isinstance(report, dict):
            raise CoverageFormatError("coverageMap is not a JSON object")

    return report


def load_coverage_map(path: Union[str, Path]) -> CoverageMap:
    """Reads a coverage map from a JSON file; "-" reads from stdin."""
    if str(path) == '-':
        return extract_coverage_map(json.load(sys.stdin))

    with Path(path).open(encoding='utf-8') as f:
        return extract_coverage_map(json.load(f))
