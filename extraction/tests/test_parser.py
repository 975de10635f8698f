"""
Unit tests for parser.py

Tests parser initialization, byte/file parsing and syntax error detection.
"""

import os
import tempfile
import unittest
from pathlib import Path

from extraction.parser import count_error_nodes, create_parser, parse_bytes, parse_file


class TestParserInitialization(unittest.TestCase):
    """Test parser creation."""

    def test_create_parser(self):
        """A fresh parser parses a trivial class."""
        parser = create_parser()
        tree = parser.parse(b"class A {}")
        self.assertEqual(tree.root_node.type, "program")


class TestParseBytes(unittest.TestCase):
    """Test parsing source bytes."""

    def test_valid_source_is_successful(self):
        """Valid Java yields a successful outcome with no error nodes."""
        outcome = parse_bytes(b"package a.b;\nclass A { void m() {} }\n")
        self.assertTrue(outcome.successful)
        self.assertEqual(outcome.error_count, 0)
        self.assertIsNotNone(outcome.tree)

    def test_invalid_source_is_unsuccessful(self):
        """Syntax errors mark the outcome unsuccessful."""
        outcome = parse_bytes(b"class A { void m( { int x = ; }")
        self.assertFalse(outcome.successful)
        self.assertGreater(outcome.error_count, 0)

    def test_empty_source(self):
        """An empty file parses to an empty program."""
        outcome = parse_bytes(b"")
        self.assertTrue(outcome.successful)
        self.assertEqual(outcome.tree.root_node.named_child_count, 0)

    def test_rejects_str(self):
        """Text input must be encoded first."""
        with self.assertRaises(TypeError):
            parse_bytes("class A {}")


class TestCountErrorNodes(unittest.TestCase):
    """Test error node counting."""

    def test_clean_tree_has_no_errors(self):
        """A clean tree has zero error nodes."""
        tree = create_parser().parse(b"interface I { int x(); }")
        self.assertEqual(count_error_nodes(tree), 0)

    def test_broken_tree_has_errors(self):
        """A broken tree has at least one error node."""
        tree = create_parser().parse(b"class { ]")
        self.assertGreaterEqual(count_error_nodes(tree), 1)


class TestParseFile(unittest.TestCase):
    """Test parsing files from disk."""

    def test_parse_fixture(self):
        """The order service fixture parses cleanly."""
        path = Path(__file__).parent / "fixtures" / "OrderService.java"
        outcome = parse_file(str(path))
        self.assertTrue(outcome.successful)
        self.assertEqual(outcome.source_bytes, path.read_bytes())

    def test_missing_file(self):
        """A missing file raises FileNotFoundError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(FileNotFoundError):
                parse_file(os.path.join(tmpdir, "Missing.java"))


if __name__ == "__main__":
    unittest.main()
