"""
Signature reconstruction for type, method and constructor declarations.

Signatures are the canonical one-line, human-readable identity of a chunk.
Rendering is pure: the same declaration always yields the same string.
"""

import logging
from typing import List, Optional

from tree_sitter import Node

from extraction.syntax import (
    DeclarationKind,
    ParameterInfo,
    classify_node,
    get_extended_types,
    get_implemented_types,
    get_modifiers,
    get_name,
    get_parameters,
    get_return_type,
    get_thrown_types,
    get_type_parameter_names,
)

logger = logging.getLogger(__name__)


def _render_parameter(param: ParameterInfo) -> str:
    if param.variadic:
        return f"{param.type.replace('[]', '')}... {param.name}"
    return f"{param.type} {param.name}"


def _render_parameters(params: List[ParameterInfo]) -> str:
    return "(" + ", ".join(_render_parameter(p) for p in params) + ")"


def _render_member_modifiers(node: Node) -> str:
    # Each modifier token prints with its own trailing space and is then
    # followed by a separator space.
    return "".join(f"{modifier.lower()}  " for modifier in get_modifiers(node))


def _render_throws(node: Node) -> str:
    thrown = get_thrown_types(node)
    if not thrown:
        return ""
    return " throws " + ", ".join(thrown)


def get_type_signature(node: Node) -> str:
    """Render ``[modifiers] class|interface Name[<T>][ extends ..][ implements ..]``.

    Args:
        node: A class or interface declaration node.

    Returns:
        The reconstructed type signature.
    """
    parts: List[str] = []

    modifiers = [m.strip() for m in get_modifiers(node)]
    if modifiers:
        parts.append(" ".join(modifiers) + " ")

    if classify_node(node) is DeclarationKind.INTERFACE:
        parts.append("interface ")
    else:
        parts.append("class ")

    parts.append(get_name(node) or "")

    type_params = get_type_parameter_names(node)
    if type_params:
        parts.append("<" + ", ".join(type_params) + ">")

    extended = get_extended_types(node)
    if extended:
        parts.append(" extends " + ", ".join(extended))

    implemented = get_implemented_types(node)
    if implemented:
        parts.append(" implements " + ", ".join(implemented))

    return "".join(parts)


def get_method_signature(node: Node) -> str:
    """Render ``[modifiers ][<T> ]ReturnType name(Type arg, ...)[ throws E]``.

    Args:
        node: A method declaration node.

    Returns:
        The reconstructed method signature.
    """
    signature = _render_member_modifiers(node)

    type_params = get_type_parameter_names(node)
    if type_params:
        signature += "<" + ", ".join(type_params) + "> "

    signature += f"{get_return_type(node) or ''} {get_name(node) or ''}"
    signature += _render_parameters(get_parameters(node))
    signature += _render_throws(node)
    return signature


def get_constructor_signature(node: Node) -> str:
    """Render ``[modifiers ]Name(Type arg, ...)[ throws E]``.

    Args:
        node: A constructor declaration node.

    Returns:
        The reconstructed constructor signature.
    """
    signature = _render_member_modifiers(node)
    signature += get_name(node) or ""
    signature += _render_parameters(get_parameters(node))
    signature += _render_throws(node)
    return signature


def get_signature(node: Node) -> Optional[str]:
    """Dispatch to the renderer matching the node's declaration kind.

    Enums and annotation types have no reconstructed signature.
    """
    kind = classify_node(node)
    if kind in (DeclarationKind.CLASS, DeclarationKind.INTERFACE):
        return get_type_signature(node)
    if kind is DeclarationKind.METHOD:
        return get_method_signature(node)
    if kind is DeclarationKind.CONSTRUCTOR:
        return get_constructor_signature(node)
    logger.debug("No signature renderer for node type %s", node.type)
    return None
