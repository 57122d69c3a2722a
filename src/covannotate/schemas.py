from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Dict, List, Literal, Mapping, NotRequired, Optional, Sequence, TypedDict, Union

    # Istanbul / Jest coverage map schemas

    class Location(TypedDict):
        line: int
        column: NotRequired[Optional[int]]

    class Range(TypedDict):
        start: NotRequired[Location]
        end: NotRequired[Location]

    class BranchMapping(TypedDict, total=False):
        """A branch site; each entry in `locations' is one alternative (e.g., if/else arm)."""
        type: str
        line: int
        loc: Range
        locations: Optional[List[Range]]

    class FunctionMapping(TypedDict, total=False):
        name: str
        line: int
        decl: Range
        loc: Range

    # index keys are strings when decoded from JSON
    Index = Union[str, int]

    class FileCoverage(TypedDict):
        """Coverage for a single file; hit counts are aligned by index with the maps."""
        statementMap: Mapping[Index, Range]
        s: Mapping[Index, int]
        branchMap: Mapping[Index, BranchMapping]
        b: Mapping[Index, Sequence[int]]
        fnMap: Mapping[Index, FunctionMapping]
        f: Mapping[Index, int]
        path: NotRequired[str]

    class WrappedFileCoverage(TypedDict):
        """Older serialization of istanbul-lib-coverage's FileCoverage objects."""
        data: FileCoverage

    CoverageMap = Dict[str, Union[FileCoverage, WrappedFileCoverage]]

    class JestReport(TypedDict, total=False):
        """Output of `jest --json --coverage'; only the coverage map is used."""
        success: bool
        numTotalTests: int
        coverageMap: CoverageMap

    # Annotation schemas, as accepted by GitHub's check run API

    class LineRange(TypedDict):
        start_line: float  # NaN when the coverage data had no usable line
        end_line: float
        start_column: NotRequired[int]
        end_column: NotRequired[int]

    class Annotation(TypedDict):
        path: str
        start_line: int
        end_line: int
        start_column: NotRequired[int]
        end_column: NotRequired[int]
        annotation_level: Literal['warning']
        title: str
        message: str
