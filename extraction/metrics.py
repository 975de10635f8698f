"""
Complexity metrics for type and member declarations.
"""

from tree_sitter import Node

from extraction.config import (
    BRANCH_NODE_TYPES,
    METHOD_NODE,
    SWITCH_BLOCK_NODE,
    SWITCH_LABEL_NODE,
    TYPE_DECLARATION_TYPES,
)
from extraction.syntax import DeclarationKind, classify_node, iter_descendants, iter_type_members


def calculate_complexity(type_node: Node) -> int:
    """Structural complexity of a type declaration.

    ``2 * direct methods + 3 * nested types + direct fields``. Nested types are
    counted at any depth below the type (the type itself excluded); a field
    declaration statement counts once however many names it binds.
    """
    method_count = 0
    field_count = 0
    for member in iter_type_members(type_node):
        if member.type == METHOD_NODE:
            method_count += 1
        elif classify_node(member) is DeclarationKind.FIELD:
            field_count += 1

    nested_type_count = sum(
        1 for node in iter_descendants(type_node) if node.type in TYPE_DECLARATION_TYPES
    )
    return 2 * method_count + 3 * nested_type_count + field_count


def calculate_cyclomatic_complexity(member_node: Node) -> int:
    """Cyclomatic complexity of a method or constructor.

    Starts at 1 and adds one per if/for/for-each/while/do-while, catch clause
    and ternary expression, and one per label of every switch block (switch
    statements and switch expressions alike), anywhere below the member
    (lambdas and anonymous class bodies included).
    """
    complexity = 1
    for node in iter_descendants(member_node):
        if node.type in BRANCH_NODE_TYPES:
            complexity += 1
        elif node.type == SWITCH_BLOCK_NODE:
            complexity += count_switch_labels(node)
    return complexity


def count_switch_labels(switch_block: Node) -> int:
    """Number of case/default labels directly owned by one switch block."""
    count = 0
    for arm in switch_block.named_children:
        for child in arm.named_children:
            if child.type == SWITCH_LABEL_NODE:
                count += 1
    return count
