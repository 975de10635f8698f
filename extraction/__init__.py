"""
Java chunk extraction engine.

Tree-sitter-based Java source parser and chunk extractor. Emits one chunk per
type declaration (class level) or one chunk per method and constructor
(method level), with reconstructed signatures, symbol tables and complexity
metrics.
"""

from extraction.models import (
    AnalysisSummary,
    ChunkLevel,
    ClassInfo,
    CodeChunk,
    FileChunks,
    Kind,
    MethodChunk,
    ProjectAnalysisResult,
    Symbols,
)
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from extraction.signatures import get_signature
from extraction.symbols import extract_symbols
from extraction.metrics import calculate_complexity, calculate_cyclomatic_complexity
from extraction.traversal import (
    ExtractionOptions,
    extract_class_chunks,
    extract_method_chunks,
    extract_method_groups,
    extract_type_artifacts,
    find_or_create_class_info,
    truncate_code,
)
from extraction.extractor import (
    ExtractionStats,
    analyze_at_class_level,
    analyze_at_method_level,
    discover_java_files,
    generate_class_files,
    generate_method_files,
)

__all__ = [
    # Data models
    "AnalysisSummary",
    "ChunkLevel",
    "ClassInfo",
    "CodeChunk",
    "FileChunks",
    "Kind",
    "MethodChunk",
    "ProjectAnalysisResult",
    "Symbols",
    "ExtractionStats",
    "ExtractionOptions",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    # Per-declaration analysis
    "get_signature",
    "extract_symbols",
    "calculate_complexity",
    "calculate_cyclomatic_complexity",
    # Per-file extraction
    "extract_class_chunks",
    "extract_method_chunks",
    "extract_method_groups",
    "extract_type_artifacts",
    "find_or_create_class_info",
    "truncate_code",
    # Project-level orchestration
    "analyze_at_class_level",
    "analyze_at_method_level",
    "discover_java_files",
    "generate_class_files",
    "generate_method_files",
]
