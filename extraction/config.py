"""
Configuration constants for Java AST chunk extraction.

Defines the tree-sitter node type strings used for chunk extraction and the
extraction output constants.
"""

from typing import Dict, Set

PACKAGE_NODE: str = "package_declaration"
IMPORT_NODE: str = "import_declaration"
MODIFIERS_NODE: str = "modifiers"

# Type declarations emitted as class-level chunks
CLASS_NODE: str = "class_declaration"
INTERFACE_NODE: str = "interface_declaration"
ENUM_NODE: str = "enum_declaration"
ANNOTATION_TYPE_NODE: str = "annotation_type_declaration"
RECORD_NODE: str = "record_declaration"

TYPE_DECLARATION_TYPES: Set[str] = {
    CLASS_NODE,
    INTERFACE_NODE,
    ENUM_NODE,
    ANNOTATION_TYPE_NODE,
    RECORD_NODE,
}

# Member declarations emitted as method-level chunks
METHOD_NODE: str = "method_declaration"
CONSTRUCTOR_NODE: str = "constructor_declaration"

# Field declarations (interface constants are fields too)
FIELD_DECLARATION_TYPES: Set[str] = {
    "field_declaration",
    "constant_declaration",
}

# Body containers whose direct children are type members
TYPE_BODY_TYPES: Set[str] = {
    "class_body",
    "interface_body",
    "enum_body",
    "enum_body_declarations",
    "annotation_type_body",
}

# Local variable binders inside member bodies
LOCAL_VARIABLE_NODE: str = "local_variable_declaration"
ENHANCED_FOR_NODE: str = "enhanced_for_statement"
RESOURCE_NODE: str = "resource"

ANNOTATION_NODE_TYPES: Set[str] = {
    "marker_annotation",
    "annotation",
}

# Branching constructs, each adding one to cyclomatic complexity
BRANCH_NODE_TYPES: Set[str] = {
    "if_statement",
    "for_statement",
    "enhanced_for_statement",
    "while_statement",
    "do_statement",
    "catch_clause",
    "ternary_expression",
}

# Each label in a switch block adds one to cyclomatic complexity
SWITCH_BLOCK_NODE: str = "switch_block"
SWITCH_LABEL_NODE: str = "switch_label"

METHOD_INVOCATION_NODE: str = "method_invocation"

# Node types that mark a syntax error in the tree
ERROR_NODE: str = "ERROR"

JAVA_EXTENSION: str = ".java"
LANGUAGE_NAME: str = "java"

# Kind name per type declaration node (class-level chunk kind / ClassInfo type)
TYPE_KIND_MAP: Dict[str, str] = {
    CLASS_NODE: "CLASS",
    INTERFACE_NODE: "INTERFACE",
    ENUM_NODE: "ENUM",
    ANNOTATION_TYPE_NODE: "ANNOTATION",
    RECORD_NODE: "RECORD",
}

SNIPPET_ELLIPSIS: str = "..."
PROGRESS_LOG_INTERVAL: int = 10
