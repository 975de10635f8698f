"""
File-wide symbol table extraction.

Walks a parsed file once and collects declared type, member, field and local
variable names. Local variables are only recorded while the walk is inside a
method or constructor; the enclosing member is tracked as walk state and
restored when a nested member finishes.
"""

import logging
from typing import List, Optional

from tree_sitter import Node

from extraction.config import (
    CLASS_NODE,
    ENHANCED_FOR_NODE,
    INTERFACE_NODE,
    LOCAL_VARIABLE_NODE,
    RESOURCE_NODE,
)
from extraction.models import Symbols
from extraction.syntax import DeclarationKind, classify_node, get_name

logger = logging.getLogger(__name__)

# Only classes and interfaces are recorded as type symbols
_CLASS_SYMBOL_TYPES = (CLASS_NODE, INTERFACE_NODE)


def _declarator_names(node: Node) -> List[str]:
    names = []
    for declarator in node.children_by_field_name("declarator"):
        name = get_name(declarator)
        if name:
            names.append(name)
    return names


class _SymbolCollector:
    """Accumulates names into a Symbols table during one walk."""

    def __init__(self, symbols: Symbols):
        self.symbols = symbols
        self.current_member = ""

    def visit(self, node: Node) -> None:
        kind = classify_node(node)

        if node.type in _CLASS_SYMBOL_TYPES:
            self.symbols.classes.append(get_name(node) or "")
        elif kind is not None and kind.is_member:
            self._visit_member(node)
            return
        elif kind is DeclarationKind.FIELD:
            self.symbols.fields.extend(_declarator_names(node))
        elif self.current_member:
            self._collect_local(node)

        for child in node.named_children:
            self.visit(child)

    def _visit_member(self, node: Node) -> None:
        name = get_name(node) or ""
        self.symbols.methods.append(name)

        previous = self.current_member
        self.current_member = name
        try:
            for child in node.named_children:
                self.visit(child)
        finally:
            self.current_member = previous

    def _collect_local(self, node: Node) -> None:
        if node.type == LOCAL_VARIABLE_NODE:
            self.symbols.variables.extend(_declarator_names(node))
        elif node.type in (ENHANCED_FOR_NODE, RESOURCE_NODE):
            name = get_name(node)
            if name:
                self.symbols.variables.append(name)


def extract_symbols(root: Node, symbols: Optional[Symbols] = None) -> Symbols:
    """Collect the symbol table of a whole file.

    Failures during the walk are logged and the names gathered so far are
    returned; extraction never raises.

    Args:
        root: Root node of the parsed file.
        symbols: Optional table to append into. A new one is created if omitted.

    Returns:
        The (possibly partial) symbol table.
    """
    if symbols is None:
        symbols = Symbols()
    try:
        _SymbolCollector(symbols).visit(root)
    except Exception as e:
        logger.error("Symbol extraction stopped early: %s", e, exc_info=True)
    return symbols
