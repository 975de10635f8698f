"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the Java parser and parse source files.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser, Tree

from extraction.config import ERROR_NODE

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
JAVA_LANGUAGE = Language(tsjava.language())


@dataclass
class ParseOutcome:
    """Result of parsing one source file.

    Attributes:
        tree: The parsed syntax tree, or None when parsing failed outright.
        source_bytes: Raw file content.
        successful: False if the tree contains syntax errors.
        error_count: Number of ERROR/MISSING nodes in the tree.
    """

    tree: Optional[Tree]
    source_bytes: bytes
    successful: bool
    error_count: int = 0


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for Java.

    Returns:
        A Parser instance configured with the Java language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"class A {}")
    """
    parser = Parser(JAVA_LANGUAGE)
    logger.debug("Created tree-sitter Java parser")
    return parser


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree.

    Args:
        tree: A parsed tree.

    Returns:
        Number of error nodes found.
    """
    count = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == ERROR_NODE or node.is_missing:
            count += 1
        if node.has_error:
            stack.extend(node.children)
    return count


def parse_bytes(source: bytes) -> ParseOutcome:
    """Parse raw bytes of Java source code.

    Args:
        source: UTF-8 encoded bytes of Java source code.

    Returns:
        A ParseOutcome whose ``successful`` flag is False when the tree
        contains syntax errors.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> outcome = parse_bytes(b"class A {}")
        >>> outcome.tree.root_node.type
        'program'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    error_count = 0
    if tree.root_node.has_error:
        error_count = count_error_nodes(tree)
        logger.warning("Parsed tree contains syntax errors (%d error nodes)", error_count)

    logger.debug("Parsed %d bytes of Java code", len(source))
    return ParseOutcome(
        tree=tree,
        source_bytes=source,
        successful=not tree.root_node.has_error,
        error_count=error_count,
    )


def parse_file(file_path: str) -> ParseOutcome:
    """Parse a Java source file from disk.

    Args:
        file_path: Path to the .java file.

    Returns:
        A ParseOutcome for the file content.

    Raises:
        FileNotFoundError: If the file does not exist.
        IOError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except IOError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise

    outcome = parse_bytes(source_bytes)

    if not outcome.successful:
        logger.warning("File %s contains syntax errors", file_path)
    else:
        logger.debug("Successfully parsed file: %s", file_path)
    return outcome
