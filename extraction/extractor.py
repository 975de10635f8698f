"""
High-level orchestrator for Java chunk extraction.

This module discovers Java source files under a project root, runs the
per-file extraction modes over them with per-file error isolation, and
assembles the project-wide reports. It also drives the per-artifact output
mode, which writes one JSON document per class plus a project summary.
"""

import logging
import os
import re
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, List, Optional, Pattern, Sequence, Tuple

from tree_sitter import Tree

from core.id_contract import PROJECT_SUMMARY_FILE, ChunkIdSequence, generate_file_name
from core.run_artifacts import write_chunk_artifact
from core.settings import DEFAULT_EXCLUDE_DIRECTORIES
from core.structured_logging import file_scope, phase_scope
from extraction.config import JAVA_EXTENSION, PROGRESS_LOG_INTERVAL
from extraction.models import (
    AnalysisSummary,
    ClassInfo,
    CodeChunk,
    MethodChunk,
    ProjectAnalysisResult,
)
from extraction.parser import parse_file
from extraction.traversal import (
    ExtractionOptions,
    extract_class_chunks,
    extract_method_chunks,
    extract_method_groups,
    extract_type_artifacts,
)

logger = logging.getLogger(__name__)

CLASS_LEVEL_ANALYSIS = "CLASS_LEVEL"
METHOD_LEVEL_ANALYSIS = "METHOD_LEVEL"
CLASS_ONLY_ANALYSIS = "CLASS_ONLY"
METHODS_ONLY_ANALYSIS = "METHODS_ONLY"


class ExtractionStats:
    """Run counters for one analysis."""

    def __init__(self, total_files: int = 0):
        self.total_files = total_files
        self.files_processed = 0
        self.files_failed = 0
        self.entities_extracted = 0
        self.parse_errors = 0

    def to_dict(self) -> dict:
        """Convert stats to dictionary."""
        return {
            "total_files": self.total_files,
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "entities_extracted": self.entities_extracted,
            "parse_errors": self.parse_errors,
        }

    def __str__(self) -> str:
        return (
            f"ExtractionStats(total={self.total_files}, "
            f"processed={self.files_processed}, failed={self.files_failed}, "
            f"entities={self.entities_extracted}, parse_errors={self.parse_errors})"
        )


# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------

def _compile_patterns(patterns: Optional[Iterable[str]]) -> List[Pattern]:
    compiled = []
    for pattern in patterns or ():
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ValueError(f"Invalid file pattern '{pattern}': {e}") from e
    return compiled


def discover_java_files(
    directory: str,
    include_patterns: Optional[Sequence[str]] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
    exclude_directories: Iterable[str] = DEFAULT_EXCLUDE_DIRECTORIES,
) -> List[str]:
    """Recursively discover Java source files under a directory.

    Args:
        directory: Project root to search.
        include_patterns: Regular expressions; when given, a file is kept only
            if one of them matches its full absolute path.
        exclude_patterns: Regular expressions matched against the full
            absolute path; a match drops the file.
        exclude_directories: Directory names never descended into.

    Returns:
        Sorted list of absolute paths to ``.java`` files.

    Raises:
        FileNotFoundError: If the directory does not exist.
        NotADirectoryError: If the path is not a directory.
        ValueError: If a pattern is not a valid regular expression.

    Example:
        >>> files = discover_java_files("/path/to/project", exclude_patterns=[r".*Test\\.java"])
    """
    directory = os.path.abspath(directory)
    if not os.path.exists(directory):
        raise FileNotFoundError(f"Project directory not found: {directory}")
    if not os.path.isdir(directory):
        raise NotADirectoryError(f"Project path is not a directory: {directory}")

    includes = _compile_patterns(include_patterns)
    excludes = _compile_patterns(exclude_patterns)
    skipped_dirs = set(exclude_directories)

    logger.info("Discovering Java files in %s", directory)

    java_files = []
    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if d not in skipped_dirs]

        for file in files:
            if not file.endswith(JAVA_EXTENSION):
                continue
            path = os.path.join(root, file)
            if includes and not any(p.fullmatch(path) for p in includes):
                continue
            if any(p.fullmatch(path) for p in excludes):
                logger.debug("Excluded by pattern: %s", path)
                continue
            java_files.append(path)

    logger.info("Found %d Java files", len(java_files))
    return sorted(java_files)


# ---------------------------------------------------------------------------
# Per-file processing
# ---------------------------------------------------------------------------

def _process_file(
    file_path: str,
    extract: Callable[[Tree, str], List[Any]],
    stats: ExtractionStats,
    count: Callable[[List[Any]], int] = len,
) -> Optional[List[Any]]:
    """Parse and extract one file, recording the outcome in ``stats``.

    Returns the extracted items, or None when the file failed. No exception
    escapes this function.
    """
    logger.debug("Processing file: %s", file_path)
    try:
        outcome = parse_file(file_path)
        if not outcome.successful or outcome.tree is None:
            logger.warning(
                "Failed to parse file: %s (%d error nodes)",
                file_path,
                outcome.error_count,
            )
            stats.files_failed += 1
            stats.parse_errors += outcome.error_count
            return None
        items = extract(outcome.tree, file_path)

    except OSError as e:
        logger.error("Cannot read file %s: %s", file_path, e)
        stats.files_failed += 1
        return None

    except ValueError as e:
        logger.error("Invalid file %s: %s", file_path, e)
        stats.files_failed += 1
        return None

    except Exception as e:
        logger.error("Error processing file %s: %s", file_path, e, exc_info=True)
        stats.files_failed += 1
        return None

    stats.files_processed += 1
    stats.entities_extracted += count(items)
    if stats.files_processed % PROGRESS_LOG_INTERVAL == 0:
        logger.info(
            "Processed %d files, %d entities so far...",
            stats.files_processed,
            stats.entities_extracted,
        )
    return items


def iter_file_results(
    files: Sequence[str],
    extract: Callable[[Tree, str], List[Any]],
    stats: ExtractionStats,
    count: Callable[[List[Any]], int] = len,
) -> Iterator[Tuple[str, List[Any]]]:
    """Yield ``(file_path, items)`` for every file that extracted cleanly.

    Failed files are counted in ``stats`` and skipped.
    """
    for file_path in files:
        with file_scope(file_path):
            items = _process_file(file_path, extract, stats, count)
        if items is not None:
            yield file_path, items


def _count_grouped_members(groups: List[ClassInfo]) -> int:
    return sum(len(group.methods) for group in groups)


# ---------------------------------------------------------------------------
# Single-report mode
# ---------------------------------------------------------------------------

def analyze_at_class_level(
    project_path: str,
    include_patterns: Optional[Sequence[str]] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
    exclude_directories: Iterable[str] = DEFAULT_EXCLUDE_DIRECTORIES,
    options: Optional[ExtractionOptions] = None,
    sequence: Optional[ChunkIdSequence] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ProjectAnalysisResult:
    """Emit one chunk per type declaration across a project.

    Args:
        project_path: Project root directory.
        include_patterns: Full-path include regexes.
        exclude_patterns: Full-path exclude regexes.
        exclude_directories: Directory names to skip.
        options: Chunking policy.
        sequence: Run-level id sequence; a fresh one is used if omitted.
        clock: Source of the report timestamp.

    Returns:
        The project-wide class-level report.

    Raises:
        FileNotFoundError: If the project directory does not exist.
        NotADirectoryError: If the project path is not a directory.
    """
    sequence = sequence or ChunkIdSequence()
    with phase_scope("discover"):
        files = discover_java_files(
            project_path, include_patterns, exclude_patterns, exclude_directories
        )

    logger.info("Starting class-level analysis of %d files", len(files))
    stats = ExtractionStats(total_files=len(files))
    chunks: List[CodeChunk] = []

    def extract(tree: Tree, file_path: str) -> List[CodeChunk]:
        return extract_class_chunks(tree, file_path, sequence, options).chunks

    with phase_scope("class-level"):
        for _, file_chunks in iter_file_results(files, extract, stats):
            chunks.extend(file_chunks)

    logger.info("Class-level analysis complete: %s", stats)
    return ProjectAnalysisResult(
        project_path=project_path,
        analysis_level=CLASS_LEVEL_ANALYSIS,
        timestamp=clock(),
        total_files=stats.total_files,
        processed_files=stats.files_processed,
        error_files=stats.files_failed,
        chunks=tuple(chunks),
        total_classes=len(chunks),
    )


def analyze_at_method_level(
    project_path: str,
    include_patterns: Optional[Sequence[str]] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
    exclude_directories: Iterable[str] = DEFAULT_EXCLUDE_DIRECTORIES,
    options: Optional[ExtractionOptions] = None,
    sequence: Optional[ChunkIdSequence] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ProjectAnalysisResult:
    """Emit one record per method or constructor across a project.

    Arguments and errors are the same as for ``analyze_at_class_level``.
    """
    sequence = sequence or ChunkIdSequence()
    with phase_scope("discover"):
        files = discover_java_files(
            project_path, include_patterns, exclude_patterns, exclude_directories
        )

    logger.info("Starting method-level analysis of %d files", len(files))
    stats = ExtractionStats(total_files=len(files))
    methods: List[MethodChunk] = []

    def extract(tree: Tree, file_path: str) -> List[MethodChunk]:
        return extract_method_chunks(tree, file_path, sequence, options)

    with phase_scope("method-level"):
        for _, file_methods in iter_file_results(files, extract, stats):
            methods.extend(file_methods)

    logger.info("Method-level analysis complete: %s", stats)
    return ProjectAnalysisResult(
        project_path=project_path,
        analysis_level=METHOD_LEVEL_ANALYSIS,
        timestamp=clock(),
        total_files=stats.total_files,
        processed_files=stats.files_processed,
        error_files=stats.files_failed,
        chunks=tuple(methods),
        total_methods=len(methods),
    )


# ---------------------------------------------------------------------------
# Per-artifact mode
# ---------------------------------------------------------------------------

def generate_class_files(
    project_path: str,
    output_dir: str,
    include_patterns: Optional[Sequence[str]] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
    exclude_directories: Iterable[str] = DEFAULT_EXCLUDE_DIRECTORIES,
    options: Optional[ExtractionOptions] = None,
    sequence: Optional[ChunkIdSequence] = None,
    pretty: bool = True,
    clock: Callable[[], datetime] = datetime.now,
) -> AnalysisSummary:
    """Write one JSON artifact per type declaration plus a project summary.

    Artifacts are named ``<fqn>_class.json``; the summary is written to
    ``project-summary.json`` in the same directory.

    Raises:
        FileNotFoundError: If the project directory does not exist.
        OSError: If an artifact cannot be written.
    """
    sequence = sequence or ChunkIdSequence()
    logger.info("Generating class files for project: %s", project_path)
    logger.info("Output directory: %s", output_dir)

    with phase_scope("discover"):
        files = discover_java_files(
            project_path, include_patterns, exclude_patterns, exclude_directories
        )

    stats = ExtractionStats(total_files=len(files))
    summary = AnalysisSummary(
        project_path=project_path,
        analysis_type=CLASS_ONLY_ANALYSIS,
        output_directory=output_dir,
        timestamp=clock(),
        total_files=len(files),
    )

    def extract(tree: Tree, file_path: str):
        return extract_type_artifacts(tree, file_path, sequence, options)

    with phase_scope("class-files"):
        for _, artifacts in iter_file_results(files, extract, stats):
            for chunk, member_count in artifacts:
                file_name = generate_file_name(chunk.fully_qualified_name, "class")
                write_chunk_artifact(chunk.to_dict(), output_dir, file_name, pretty=pretty)
                summary.add_output_file(
                    file_name=file_name,
                    fully_qualified_name=chunk.fully_qualified_name,
                    type=chunk.kind.value,
                    count=member_count,
                    file_type="CLASS",
                )

    summary.processed_files = stats.files_processed
    summary.error_files = stats.files_failed
    summary.total_classes = len(summary.output_files)
    write_chunk_artifact(summary.to_dict(), output_dir, PROJECT_SUMMARY_FILE, pretty=pretty)

    logger.info("Class file generation complete: %s", stats)
    return summary


def generate_method_files(
    project_path: str,
    output_dir: str,
    include_patterns: Optional[Sequence[str]] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
    exclude_directories: Iterable[str] = DEFAULT_EXCLUDE_DIRECTORIES,
    options: Optional[ExtractionOptions] = None,
    sequence: Optional[ChunkIdSequence] = None,
    pretty: bool = True,
    clock: Callable[[], datetime] = datetime.now,
) -> AnalysisSummary:
    """Write one JSON artifact per class holding its member chunks.

    Classes without any method or constructor produce no artifact.
    Artifacts are named ``<fqn>_methods.json``.
    """
    sequence = sequence or ChunkIdSequence()
    logger.info("Generating method files for project: %s", project_path)
    logger.info("Output directory: %s", output_dir)

    with phase_scope("discover"):
        files = discover_java_files(
            project_path, include_patterns, exclude_patterns, exclude_directories
        )

    stats = ExtractionStats(total_files=len(files))
    summary = AnalysisSummary(
        project_path=project_path,
        analysis_type=METHODS_ONLY_ANALYSIS,
        output_directory=output_dir,
        timestamp=clock(),
        total_files=len(files),
        total_methods=0,
    )

    def extract(tree: Tree, file_path: str) -> List[ClassInfo]:
        return extract_method_groups(tree, file_path, sequence, options, clock)

    with phase_scope("method-files"):
        for _, groups in iter_file_results(files, extract, stats, _count_grouped_members):
            for group in groups:
                if not group.methods:
                    continue
                file_name = generate_file_name(group.fully_qualified_name, "methods")
                write_chunk_artifact(group.to_dict(), output_dir, file_name, pretty=pretty)
                summary.total_methods += len(group.methods)
                summary.add_output_file(
                    file_name=file_name,
                    fully_qualified_name=group.fully_qualified_name,
                    type=group.type,
                    count=len(group.methods),
                    file_type="METHODS",
                )

    summary.processed_files = stats.files_processed
    summary.error_files = stats.files_failed
    summary.total_classes = len(summary.output_files)
    write_chunk_artifact(summary.to_dict(), output_dir, PROJECT_SUMMARY_FILE, pretty=pretty)

    logger.info("Method file generation complete: %s", stats)
    return summary
