from .version import __version__
from .annotations import (
    CoverageFormatError, PathSimplifier,
    get_location, normalize_file_coverage, scan_coverage_map,
    compare_annotations, deduplicate_annotations, filter_valid_annotations,
    create_coverage_annotations, print_annotations
)
from .messages import MessageCatalog, DEFAULT_LOCALE, MESSAGE_KEYS, default_messages
from .report import extract_coverage_map, load_coverage_map
