"""
Syntax-tree helpers shared by the chunk builder, signature reconstructor,
symbol extractor and metrics calculator.

Nodes are classified into a closed ``DeclarationKind`` set once, here, so the
rest of the engine dispatches on the kind instead of on raw node type strings.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from tree_sitter import Node

from extraction.config import (
    ANNOTATION_NODE_TYPES,
    ANNOTATION_TYPE_NODE,
    CLASS_NODE,
    CONSTRUCTOR_NODE,
    ENUM_NODE,
    FIELD_DECLARATION_TYPES,
    IMPORT_NODE,
    INTERFACE_NODE,
    METHOD_NODE,
    MODIFIERS_NODE,
    PACKAGE_NODE,
    RECORD_NODE,
    TYPE_BODY_TYPES,
    TYPE_DECLARATION_TYPES,
)
from extraction.models import Location

_SPACE_RE = re.compile(r"\s+")
_NAME_NODE_TYPES = ("identifier", "scoped_identifier")


class DeclarationKind(Enum):
    """Declarations the engine knows how to handle."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ANNOTATION = "annotation"
    RECORD = "record"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    FIELD = "field"

    @property
    def is_type(self) -> bool:
        return self in _TYPE_KINDS

    @property
    def is_member(self) -> bool:
        return self in (DeclarationKind.METHOD, DeclarationKind.CONSTRUCTOR)


_TYPE_KINDS = {
    DeclarationKind.CLASS,
    DeclarationKind.INTERFACE,
    DeclarationKind.ENUM,
    DeclarationKind.ANNOTATION,
    DeclarationKind.RECORD,
}

_NODE_KIND_MAP = {
    CLASS_NODE: DeclarationKind.CLASS,
    INTERFACE_NODE: DeclarationKind.INTERFACE,
    ENUM_NODE: DeclarationKind.ENUM,
    ANNOTATION_TYPE_NODE: DeclarationKind.ANNOTATION,
    RECORD_NODE: DeclarationKind.RECORD,
    METHOD_NODE: DeclarationKind.METHOD,
    CONSTRUCTOR_NODE: DeclarationKind.CONSTRUCTOR,
}
for _field_type in FIELD_DECLARATION_TYPES:
    _NODE_KIND_MAP[_field_type] = DeclarationKind.FIELD


@dataclass(frozen=True)
class ParameterInfo:
    """A formal parameter as declared."""

    name: str
    type: str
    variadic: bool = False


def classify_node(node: Node) -> Optional[DeclarationKind]:
    """Return the declaration kind of a node, or None for any other node."""
    return _NODE_KIND_MAP.get(node.type)


def node_text(node: Optional[Node]) -> str:
    """Verbatim source text of a node (empty string for None)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def normalize_space(text: str) -> str:
    """Collapse whitespace runs into single spaces."""
    return _SPACE_RE.sub(" ", text).strip()


def iter_descendants(node: Node) -> Iterator[Node]:
    """Yield every descendant of ``node`` in depth-first pre-order."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def get_name(node: Node) -> Optional[str]:
    """Simple declared name of a declaration node."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    return node_text(name_node)


def get_location(node: Node) -> Location:
    """1-based inclusive line range of a node."""
    return Location(
        start_line=node.start_point[0] + 1,
        end_line=node.end_point[0] + 1,
    )


def _find_child(node: Node, node_type: str) -> Optional[Node]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def get_modifiers(node: Node) -> List[str]:
    """Modifier keywords of a declaration in source order (annotations excluded)."""
    modifiers_node = _find_child(node, MODIFIERS_NODE)
    if modifiers_node is None:
        return []
    return [
        node_text(child)
        for child in modifiers_node.children
        if child.type not in ANNOTATION_NODE_TYPES
        and not child.type.endswith("comment")
    ]


def get_annotations(node: Node) -> List[str]:
    """Annotation names attached to a declaration, in source order."""
    modifiers_node = _find_child(node, MODIFIERS_NODE)
    if modifiers_node is None:
        return []
    names = []
    for child in modifiers_node.children:
        if child.type in ANNOTATION_NODE_TYPES:
            name_node = child.child_by_field_name("name")
            names.append(node_text(name_node))
    return names


def _qualified_name_child(node: Node) -> Optional[str]:
    for child in node.named_children:
        if child.type in _NAME_NODE_TYPES:
            return node_text(child)
    return None


def get_package_name(root: Node) -> str:
    """Declared package of a file, or an empty string."""
    for child in root.named_children:
        if child.type == PACKAGE_NODE:
            return _qualified_name_child(child) or ""
    return ""


def get_imports(root: Node) -> List[str]:
    """Imported names of a file in declaration order.

    Wildcard imports yield the package name (``import a.b.*;`` -> ``a.b``).
    """
    imports = []
    for child in root.named_children:
        if child.type == IMPORT_NODE:
            name = _qualified_name_child(child)
            if name:
                imports.append(name)
    return imports


def type_text(node: Optional[Node]) -> str:
    """Declared type as written, whitespace-normalized."""
    return normalize_space(node_text(node))


def type_simple_name(node: Node) -> str:
    """Simple name of a type reference, without scope or type arguments."""
    if node.type == "generic_type":
        return type_simple_name(node.named_children[0])
    if node.type == "scoped_type_identifier":
        return type_simple_name(node.named_children[-1])
    return type_text(node)


def _type_list_names(container: Optional[Node]) -> List[str]:
    if container is None:
        return []
    type_list = _find_child(container, "type_list")
    if type_list is None:
        return []
    return [type_simple_name(t) for t in type_list.named_children]


def get_extended_types(node: Node) -> List[str]:
    """Simple names after ``extends`` (superclass or extended interfaces)."""
    superclass = node.child_by_field_name("superclass")
    if superclass is not None and superclass.named_children:
        return [type_simple_name(superclass.named_children[-1])]
    return _type_list_names(_find_child(node, "extends_interfaces"))


def get_implemented_types(node: Node) -> List[str]:
    """Simple names after ``implements``."""
    interfaces = node.child_by_field_name("interfaces")
    if interfaces is None:
        interfaces = _find_child(node, "super_interfaces")
    return _type_list_names(interfaces)


def get_type_parameter_names(node: Node) -> List[str]:
    """Names of declared type parameters (bounds dropped)."""
    params = node.child_by_field_name("type_parameters")
    if params is None:
        return []
    names = []
    for param in params.named_children:
        if param.type != "type_parameter":
            continue
        for child in param.named_children:
            if child.type in ("type_identifier", "identifier"):
                names.append(node_text(child))
                break
    return names


def get_parameters(node: Node) -> List[ParameterInfo]:
    """Formal parameters of a method or constructor."""
    params_node = node.child_by_field_name("parameters")
    if params_node is None:
        return []

    params = []
    for child in params_node.named_children:
        if child.type == "formal_parameter":
            declared = type_text(child.child_by_field_name("type"))
            dims = child.child_by_field_name("dimensions")
            if dims is not None:
                declared += type_text(dims)
            params.append(
                ParameterInfo(name=get_name(child) or "", type=declared)
            )
        elif child.type == "spread_parameter":
            declared = ""
            name = ""
            for part in child.named_children:
                if part.type == "variable_declarator":
                    name = get_name(part) or ""
                elif part.type != MODIFIERS_NODE and not declared:
                    declared = type_text(part)
            params.append(ParameterInfo(name=name, type=declared, variadic=True))
    return params


def get_thrown_types(node: Node) -> List[str]:
    """Declared thrown exception types as written."""
    throws = _find_child(node, "throws")
    if throws is None:
        return []
    return [type_text(t) for t in throws.named_children]


def get_return_type(node: Node) -> Optional[str]:
    """Declared return type of a method; None for constructors."""
    return_node = node.child_by_field_name("type")
    if return_node is None:
        return None
    return type_text(return_node)


def find_enclosing_type(node: Node) -> Optional[Node]:
    """Nearest enclosing type declaration of a node, if any."""
    current = node.parent
    while current is not None:
        if current.type in TYPE_DECLARATION_TYPES:
            return current
        current = current.parent
    return None


def iter_type_members(type_node: Node) -> Iterator[Node]:
    """Direct member declarations of a type body.

    Enum bodies are flattened through their ``enum_body_declarations``
    section, so enum methods and fields count as direct members.
    """
    body = type_node.child_by_field_name("body")
    if body is None:
        return
    stack = [body]
    while stack:
        container = stack.pop()
        for child in container.named_children:
            if child.type in TYPE_BODY_TYPES:
                stack.append(child)
            else:
                yield child
