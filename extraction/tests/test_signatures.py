"""
Unit tests for signatures.py

Tests signature reconstruction for types, methods and constructors.
"""

import unittest

from extraction.parser import parse_bytes
from extraction.signatures import get_signature
from extraction.syntax import iter_descendants


def _first(source: bytes, node_type: str):
    tree = parse_bytes(source).tree
    for node in iter_descendants(tree.root_node):
        if node.type == node_type:
            return node
    raise AssertionError(f"no {node_type} in source")


class TestTypeSignatures(unittest.TestCase):
    """Test class and interface signatures."""

    def test_plain_class(self):
        """A class without modifiers renders as ``class Name``."""
        node = _first(b"class A {}", "class_declaration")
        self.assertEqual(get_signature(node), "class A")

    def test_class_with_hierarchy(self):
        """Modifiers, type parameters, extends and implements are rendered."""
        source = b"public final class Repo<T, K extends Comparable<K>> extends Base<T> implements Store, java.io.Serializable {}"
        node = _first(source, "class_declaration")
        self.assertEqual(
            get_signature(node),
            "public final class Repo<T, K> extends Base implements Store, Serializable",
        )

    def test_interface_extends(self):
        """Interfaces render their extended interfaces."""
        node = _first(b"public interface Shape extends Named, Sized {}", "interface_declaration")
        self.assertEqual(get_signature(node), "public interface Shape extends Named, Sized")

    def test_annotations_are_not_modifiers(self):
        """Annotations do not appear in the signature."""
        node = _first(b"@Deprecated public class Old {}", "class_declaration")
        self.assertEqual(get_signature(node), "public class Old")

    def test_enum_has_no_signature(self):
        """Enums yield no signature."""
        node = _first(b"enum Color { RED }", "enum_declaration")
        self.assertIsNone(get_signature(node))

    def test_annotation_type_has_no_signature(self):
        """Annotation types yield no signature."""
        node = _first(b"@interface Marker {}", "annotation_type_declaration")
        self.assertIsNone(get_signature(node))


class TestMemberSignatures(unittest.TestCase):
    """Test method and constructor signatures."""

    def test_method_without_modifiers(self):
        """A bare method renders ``Type name(params)``."""
        node = _first(b"class A { int size() { return 0; } }", "method_declaration")
        self.assertEqual(get_signature(node), "int size()")

    def test_method_modifiers_are_double_spaced(self):
        """Each member modifier is followed by two spaces."""
        node = _first(
            b"class A { public static void main(String[] args) {} }",
            "method_declaration",
        )
        self.assertEqual(get_signature(node), "public  static  void main(String[] args)")

    def test_method_with_throws_and_generics(self):
        """Type parameters and throws clauses are rendered."""
        source = b"class A { <T> List<T> load(Map<String, T> source, int n) throws IOException, SQLException { return null; } }"
        node = _first(source, "method_declaration")
        self.assertEqual(
            get_signature(node),
            "<T> List<T> load(Map<String, T> source, int n) throws IOException, SQLException",
        )

    def test_variadic_parameter(self):
        """Varargs render as ``Type... name``."""
        node = _first(b"class A { void log(String... parts) {} }", "method_declaration")
        self.assertEqual(get_signature(node), "void log(String... parts)")

    def test_constructor(self):
        """Constructors render modifiers, name and parameters."""
        node = _first(
            b"class A { protected A(int x, String y) throws Exception {} }",
            "constructor_declaration",
        )
        self.assertEqual(get_signature(node), "protected  A(int x, String y) throws Exception")

    def test_signature_is_deterministic(self):
        """Rendering the same declaration twice yields identical strings."""
        node = _first(
            b"class A { public synchronized <T> T pick(T[] items, int... idx) { return null; } }",
            "method_declaration",
        )
        self.assertEqual(get_signature(node), get_signature(node))


if __name__ == "__main__":
    unittest.main()
