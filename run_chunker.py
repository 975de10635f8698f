#!/usr/bin/env python3
"""
Command-line entry point for Java code chunking.

Analyzes a Java project at class or method level and writes either one
project-wide JSON report or, with ``--per-class``, one JSON artifact per class
plus a project summary.

Usage:
    python run_chunker.py -p /path/to/java/project -o out/chunks.json
    python run_chunker.py -p ./src -o out/methods.json --method
    python run_chunker.py -p ./src -o out/classes --per-class -e ".*Test\\.java"
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from core.id_contract import ChunkIdSequence
from core.run_artifacts import write_json
from core.settings import ChunkerSettings, ConfigValidationError, load_settings
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from extraction.extractor import (
    analyze_at_class_level,
    analyze_at_method_level,
    generate_class_files,
    generate_method_files,
)
from extraction.models import AnalysisSummary, ChunkLevel, ProjectAnalysisResult
from extraction.traversal import ExtractionOptions

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        prog="java-code-chunker",
        description="Java source chunk extraction at class or method level",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_chunker.py -p ./my-project -o out/chunks.json\n"
            "  python run_chunker.py -p ./my-project -o out/methods.json --method\n"
            "  python run_chunker.py -p ./my-project -o out/classes --per-class\n"
        ),
    )

    parser.add_argument(
        "-p", "--project",
        required=True,
        help="Path to the Java project directory.",
    )
    parser.add_argument(
        "-o", "--output",
        required=True,
        help="Output JSON file, or output directory with --per-class.",
    )
    parser.add_argument(
        "-m", "--method",
        action="store_true",
        default=False,
        help="Analyze at method level (default: level from settings, CLASS).",
    )
    parser.add_argument(
        "-i", "--include",
        action="append",
        default=[],
        metavar="REGEX",
        help="Only analyze files whose full path matches REGEX. Repeatable.",
    )
    parser.add_argument(
        "-e", "--exclude",
        action="append",
        default=[],
        metavar="REGEX",
        help="Skip files whose full path matches REGEX. Repeatable.",
    )
    parser.add_argument(
        "--per-class",
        action="store_true",
        default=False,
        help="Write one JSON file per class plus project-summary.json.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML settings file. Default: $CHUNKER_CONFIG if set.",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=False,
        help="Fail on invalid settings instead of falling back to defaults.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO",
    )

    return parser.parse_args(argv)


def resolve_level(args: argparse.Namespace, settings: ChunkerSettings) -> ChunkLevel:
    """``--method`` wins; otherwise the configured default level applies."""
    if args.method:
        return ChunkLevel.METHOD_LEVEL
    return ChunkLevel.from_string(settings.default_level)


def print_summary(result) -> None:
    """Print a short run summary to stdout."""
    print()
    print("=" * 60)
    print(" Analysis summary")
    print("=" * 60)
    if isinstance(result, ProjectAnalysisResult):
        print(f"  Project         : {result.project_path}")
        print(f"  Level           : {result.analysis_level}")
        print(f"  Total files     : {result.total_files}")
        print(f"  Processed files : {result.processed_files}")
        print(f"  Error files     : {result.error_files}")
        if result.total_classes is not None:
            print(f"  Total classes   : {result.total_classes}")
        if result.total_methods is not None:
            print(f"  Total methods   : {result.total_methods}")
        print(f"  Chunks          : {len(result.chunks)}")
    elif isinstance(result, AnalysisSummary):
        print(f"  Project         : {result.project_path}")
        print(f"  Mode            : {result.analysis_type}")
        print(f"  Total files     : {result.total_files}")
        print(f"  Processed files : {result.processed_files}")
        print(f"  Error files     : {result.error_files}")
        print(f"  Total classes   : {result.total_classes}")
        if result.total_methods is not None:
            print(f"  Total methods   : {result.total_methods}")
        print(f"  Files written   : {len(result.output_files)}")
        print(f"  Output directory: {result.output_directory}")
    print("=" * 60)


def run(args: argparse.Namespace, settings: ChunkerSettings):
    """Run one analysis and write its output.

    Returns:
        The ProjectAnalysisResult or AnalysisSummary of the run.
    """
    level = resolve_level(args, settings)
    include_patterns = list(args.include)
    exclude_patterns = list(settings.exclude_patterns) + list(args.exclude)
    options = ExtractionOptions(
        max_snippet_length=settings.max_snippet_length,
        include_code_snippets=settings.include_code_snippets,
    )
    sequence = ChunkIdSequence()

    logger.info("Starting analysis with configuration:")
    logger.info("  Project: %s", args.project)
    logger.info("  Output: %s", args.output)
    logger.info("  Level: %s", level.value)
    logger.info("  Include patterns: %s", include_patterns or "none")
    logger.info("  Exclude patterns: %s", exclude_patterns or "none")

    common = dict(
        include_patterns=include_patterns,
        exclude_patterns=exclude_patterns,
        exclude_directories=settings.exclude_directories,
        options=options,
        sequence=sequence,
    )

    if args.per_class:
        if level is ChunkLevel.CLASS_LEVEL:
            return generate_class_files(
                args.project, args.output, pretty=settings.pretty_print, **common
            )
        return generate_method_files(
            args.project, args.output, pretty=settings.pretty_print, **common
        )

    if level is ChunkLevel.CLASS_LEVEL:
        result = analyze_at_class_level(args.project, **common)
    else:
        result = analyze_at_method_level(args.project, **common)

    with phase_scope("write"):
        path = write_json(result.to_dict(), args.output, pretty=settings.pretty_print)
    logger.info("Report written: %s", os.path.abspath(path))
    return result


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the chunker."""
    args = parse_args(argv)
    configure_structured_logging(level=getattr(logging, args.log_level))
    run_id = set_run_id()

    logger.info("*" * 80)
    logger.info(" Java Code Chunker")
    logger.info(" Run ID: %s", run_id)
    logger.info("*" * 80)

    try:
        settings = load_settings(args.config, strict=args.strict_config)
        result = run(args, settings)
        print_summary(result)
        logger.info("Analysis completed successfully!")

    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except (FileNotFoundError, NotADirectoryError) as e:
        logger.error(f"File error: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid argument: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Analysis failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
