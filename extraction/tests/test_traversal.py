"""
Unit tests for traversal.py

Tests class-level chunk building, method-level chunk building and grouping,
code truncation and chunk identifiers.
"""

import unittest
from datetime import datetime
from pathlib import Path

from core.id_contract import ChunkIdSequence
from extraction.models import Kind, Symbols
from extraction.parser import parse_bytes, parse_file
from extraction.traversal import (
    ExtractionOptions,
    count_lines,
    extract_class_chunks,
    extract_method_chunks,
    extract_method_groups,
    extract_type_artifacts,
    find_or_create_class_info,
    truncate_code,
)

FIXTURE = Path(__file__).parent / "fixtures" / "OrderService.java"
FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5)


def _fixed_clock():
    return FIXED_TIME


class TestTruncateCode(unittest.TestCase):
    """Test code excerpt truncation."""

    def test_longer_than_limit(self):
        """A 15-character body with limit 10 keeps 10 characters plus ``...``."""
        self.assertEqual(truncate_code("abcdefghijklmno", 10), "abcdefghij...")

    def test_exactly_limit(self):
        """A body of exactly the limit is unchanged."""
        self.assertEqual(truncate_code("abcdefghij", 10), "abcdefghij")

    def test_shorter_than_limit(self):
        """A short body is unchanged."""
        self.assertEqual(truncate_code("{ }", 10), "{ }")

    def test_count_lines(self):
        """Line counting treats empty text as one line."""
        self.assertEqual(count_lines("a\nb\nc"), 3)
        self.assertEqual(count_lines(""), 1)


class TestClassLevelExtraction(unittest.TestCase):
    """Test one-chunk-per-type extraction."""

    def setUp(self):
        self.tree = parse_file(str(FIXTURE)).tree
        self.result = extract_class_chunks(self.tree, str(FIXTURE), ChunkIdSequence())
        self.chunks = self.result.chunks

    def test_one_chunk_per_type(self):
        """Top-level and nested types each get exactly one chunk, outer first."""
        self.assertEqual([c.name for c in self.chunks], ["OrderService", "Status", "Auditable"])
        self.assertEqual(
            [c.kind for c in self.chunks],
            [Kind.CLASS, Kind.ENUM, Kind.INTERFACE],
        )

    def test_empty_file_has_no_chunks(self):
        """A file with no type declarations gives no chunks."""
        tree = parse_bytes(b"package a.b;\nimport java.util.List;\n").tree
        result = extract_class_chunks(tree, "Empty.java")
        self.assertEqual(result.chunks, [])
        self.assertEqual(result.symbols, Symbols())

    def test_chunk_id_is_package(self):
        """Class-level chunk ids collide on the package name; keys stay unique."""
        self.assertEqual({c.chunk_id for c in self.chunks}, {"com.example.shop"})
        self.assertEqual(
            [c.chunk_key for c in self.chunks],
            [
                "com.example.shop.OrderService#1",
                "com.example.shop.OrderService$Status#2",
                "com.example.shop.Auditable#3",
            ],
        )

    def test_chunk_fields(self):
        """The outer class carries signature, location, imports and hierarchy."""
        chunk = self.chunks[0]
        self.assertEqual(chunk.language, "java")
        self.assertEqual(chunk.package, "com.example.shop")
        self.assertEqual(chunk.fully_qualified_name, "com.example.shop.OrderService")
        self.assertEqual(
            chunk.signature,
            "public class OrderService extends BaseService implements Auditable, Comparable",
        )
        self.assertEqual(chunk.location.start_line, 8)
        self.assertEqual(chunk.location.end_line, 43)
        self.assertEqual(
            chunk.imports,
            ["java.util.List", "java.util.ArrayList", "java.io.IOException"],
        )
        self.assertEqual(chunk.modifiers, ["public"])
        self.assertEqual(chunk.parent.namespace, "com.example.shop")
        self.assertEqual(chunk.parent.classes, ["BaseService", "Auditable", "Comparable"])
        self.assertTrue(chunk.code.startswith("public class OrderService"))
        self.assertTrue(chunk.code.endswith("}"))
        self.assertEqual(chunk.complexity_score, 10)

    def test_enum_and_interface_parents(self):
        """Enums have no signature; interfaces list their extended interfaces."""
        status, auditable = self.chunks[1], self.chunks[2]
        self.assertIsNone(status.signature)
        self.assertEqual(status.parent.classes, [])
        self.assertEqual(auditable.signature, "interface Auditable extends Named")
        self.assertEqual(auditable.parent.classes, ["Named"])

    def test_symbols_attached_to_first_chunk_only(self):
        """The file-wide symbol table rides on the first chunk."""
        first = self.chunks[0]
        self.assertIs(first.symbols, self.result.symbols)
        self.assertEqual(first.symbols.classes, ["OrderService", "Auditable"])
        for chunk in self.chunks[1:]:
            self.assertEqual(chunk.symbols, Symbols())

    def test_to_dict_shape(self):
        """Serialized chunks use camelCase keys and drop unset fields."""
        payload = self.chunks[0].to_dict()
        self.assertEqual(payload["chunkId"], "com.example.shop")
        self.assertEqual(payload["kind"], "CLASS")
        self.assertEqual(payload["location"], {"startLine": 8, "endLine": 43})
        self.assertEqual(payload["notes"], {})
        self.assertIn("complexityScore", payload)
        self.assertNotIn("returnType", payload)

    def test_record_chunk(self):
        """Records are type chunks of kind RECORD."""
        tree = parse_bytes(b"package p; record R(int a) implements Comparable<R> {}").tree
        chunk = extract_class_chunks(tree, "R.java").chunks[0]
        self.assertEqual(chunk.kind, Kind.RECORD)
        self.assertEqual(chunk.fully_qualified_name, "p.R")
        self.assertIsNone(chunk.signature)
        self.assertEqual(chunk.parent.classes, ["Comparable"])

    def test_type_artifacts_carry_member_counts(self):
        """Per-artifact extraction pairs each chunk with its direct member count."""
        artifacts = extract_type_artifacts(self.tree, str(FIXTURE), ChunkIdSequence())
        self.assertEqual(
            [(chunk.name, count) for chunk, count in artifacts],
            [("OrderService", 3), ("Status", 1), ("Auditable", 1)],
        )


class TestMethodLevelExtraction(unittest.TestCase):
    """Test one-chunk-per-member extraction and grouping."""

    def setUp(self):
        self.tree = parse_file(str(FIXTURE)).tree

    def test_groups_by_enclosing_type(self):
        """Members are grouped under their nearest enclosing type."""
        groups = extract_method_groups(
            self.tree, str(FIXTURE), ChunkIdSequence(), clock=_fixed_clock
        )
        self.assertEqual(
            [(g.fully_qualified_name, g.type, len(g.methods)) for g in groups],
            [
                ("com.example.shop.OrderService", "CLASS", 3),
                ("com.example.shop.OrderService$Status", "ENUM", 1),
                ("com.example.shop.Auditable", "INTERFACE", 1),
            ],
        )
        self.assertEqual(groups[0].timestamp, FIXED_TIME)

    def test_member_chunk_fields(self):
        """Member chunks carry the class name in ``name`` and member facts."""
        groups = extract_method_groups(self.tree, str(FIXTURE), ChunkIdSequence())
        constructor, add_order, total = groups[0].methods

        self.assertEqual(constructor.kind, Kind.CONSTRUCTOR)
        self.assertEqual(constructor.name, "OrderService")
        self.assertEqual(constructor.signature, "public  OrderService()")
        self.assertIsNone(constructor.return_type)
        self.assertEqual(
            constructor.chunk_id,
            "com.example.shop.OrderService.OrderService:OrderService_OrderService_CONSTRUCTOR_1",
        )

        self.assertEqual(add_order.kind, Kind.METHOD)
        self.assertEqual(add_order.name, "OrderService")
        self.assertEqual(add_order.fully_qualified_name, "com.example.shop.OrderService.addOrder")
        self.assertEqual(add_order.signature, "public  void addOrder(String order) throws IOException")
        self.assertEqual(add_order.return_type, "void")
        self.assertEqual(add_order.parameter_count, 1)
        self.assertEqual(add_order.parameters[0].name, "order")
        self.assertEqual(add_order.parameters[0].type, "String")
        self.assertEqual(add_order.throws_declarations, ["IOException"])
        self.assertEqual(add_order.method_calls, ["log", "add"])
        self.assertEqual(add_order.cyclomatic_complexity, 3)
        self.assertEqual(add_order.parent.classes, ["BaseService", "Auditable", "Comparable"])

        self.assertEqual(total.signature, "public  static  int sum(int... values)")
        self.assertEqual(total.modifiers, ["public", "static"])
        self.assertEqual(total.cyclomatic_complexity, 2)

    def test_code_truncation_and_suppression(self):
        """Member code honours the snippet limit and can be turned off."""
        options = ExtractionOptions(max_snippet_length=10)
        groups = extract_method_groups(self.tree, str(FIXTURE), options=options)
        code = groups[0].methods[1].code
        self.assertEqual(code, "public voi...")

        options = ExtractionOptions(include_code_snippets=False)
        groups = extract_method_groups(self.tree, str(FIXTURE), options=options)
        self.assertIsNone(groups[0].methods[1].code)
        self.assertNotIn("code", groups[0].methods[1].to_dict())

    def test_method_records(self):
        """Method records list every member once with token ids."""
        records = extract_method_chunks(self.tree, str(FIXTURE), ChunkIdSequence())
        self.assertEqual(
            [r.method_name for r in records],
            ["OrderService", "addOrder", "sum", "isOpen", "audit"],
        )
        self.assertEqual(records[0].chunk_id, "OrderService_OrderService_CONSTRUCTOR_1")
        self.assertEqual(records[1].chunk_id, "OrderService_addOrder_METHOD_2")
        self.assertEqual(records[0].chunk_type, "CONSTRUCTOR")
        self.assertEqual(records[3].class_name, "Status")

        add_order = records[1]
        self.assertEqual(add_order.start_line, 18)
        self.assertEqual(add_order.end_line, 26)
        self.assertEqual(add_order.total_lines, 9)
        self.assertTrue(add_order.code_snippet.startswith("{"))
        self.assertEqual(add_order.to_dict()["package"], "com.example.shop")

    def test_abstract_member_has_no_calls(self):
        """Interface methods without a body have no calls and one line."""
        records = extract_method_chunks(self.tree, str(FIXTURE))
        audit = records[-1]
        self.assertEqual(audit.method_calls, [])
        self.assertEqual(audit.line_count, 1)
        self.assertEqual(audit.code_snippet, "")

    def test_overloads_get_distinct_ids(self):
        """Overloaded members sharing a name get distinct chunk ids."""
        source = b"package p;\nclass A { void f() {} void f(int x) {} }\n"
        records = extract_method_chunks(parse_bytes(source).tree, "A.java", ChunkIdSequence())
        self.assertEqual(len({r.chunk_id for r in records}), 2)

    def test_record_members_group_under_record(self):
        """Members of a record are grouped under the record itself."""
        source = b"package p; record R(int a) { int twice() { return a * 2; } }"
        groups = extract_method_groups(parse_bytes(source).tree, "R.java")
        self.assertEqual(
            [(g.fully_qualified_name, g.class_name, g.type) for g in groups],
            [("p.R", "R", "RECORD")],
        )
        self.assertEqual(groups[0].methods[0].fully_qualified_name, "p.R.twice")

    def test_same_named_nested_types_group_apart(self):
        """Nested types sharing a simple name are qualified by their outer type."""
        source = (
            b"package p;\n"
            b"class A { static class Node { void f() {} } }\n"
            b"class B { static class Node { void g() {} } }\n"
        )
        groups = extract_method_groups(parse_bytes(source).tree, "Nodes.java")
        self.assertEqual(
            [g.fully_qualified_name for g in groups],
            ["p.A$Node", "p.B$Node"],
        )
        self.assertEqual(groups[1].class_name, "Node")
        self.assertEqual(groups[1].methods[0].fully_qualified_name, "p.B$Node.g")

    def test_anonymous_class_members_visited_once(self):
        """Members of anonymous classes are emitted once under the outer type."""
        source = b"""
class Outer {
    Runnable make() {
        return new Runnable() {
            public void run() { go(); }
        };
    }
}
"""
        records = extract_method_chunks(parse_bytes(source).tree, "Outer.java")
        self.assertEqual([r.method_name for r in records], ["make", "run"])
        self.assertEqual(records[0].method_calls, ["go"])
        self.assertEqual(records[1].class_name, "Outer")


class TestFindOrCreateClassInfo(unittest.TestCase):
    """Test the group lookup-or-create operation."""

    def test_idempotent_lookup(self):
        """Looking up the same key twice returns one group and never duplicates."""
        groups = []
        first = find_or_create_class_info(
            groups, "a.b.C", "C", "a.b", "CLASS", "C.java", clock=_fixed_clock
        )
        second = find_or_create_class_info(
            groups, "a.b.C", "C", "a.b", "CLASS", "C.java", clock=_fixed_clock
        )
        self.assertIs(first, second)
        self.assertEqual(len(groups), 1)

    def test_distinct_keys(self):
        """Different names create separate groups in encounter order."""
        groups = []
        find_or_create_class_info(groups, "a.C", "C", "a", "CLASS", "C.java")
        find_or_create_class_info(groups, "a.D", "D", "a", "ENUM", "D.java")
        self.assertEqual([g.class_name for g in groups], ["C", "D"])


if __name__ == "__main__":
    unittest.main()
