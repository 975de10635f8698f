"""
AST traversal and chunk construction.

This module walks a parsed Java file and builds chunk records at two
granularities: one chunk per type declaration (class level) and one chunk per
method or constructor, grouped by containing class (method level).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from tree_sitter import Node, Tree

from core.id_contract import (
    NESTED_TYPE_SEPARATOR,
    ChunkIdSequence,
    make_chunk_key,
    make_member_chunk_id,
    make_member_token,
    qualify_name,
)
from core.settings import DEFAULT_INCLUDE_CODE_SNIPPETS, DEFAULT_MAX_SNIPPET_LENGTH
from extraction.config import (
    LANGUAGE_NAME,
    METHOD_INVOCATION_NODE,
    SNIPPET_ELLIPSIS,
    TYPE_KIND_MAP,
)
from extraction.metrics import calculate_complexity, calculate_cyclomatic_complexity
from extraction.models import (
    ClassInfo,
    CodeChunk,
    FileChunks,
    Kind,
    MethodChunk,
    Notes,
    Parameter,
    ParentRef,
    Symbols,
)
from extraction.signatures import get_signature
from extraction.symbols import extract_symbols
from extraction.syntax import (
    DeclarationKind,
    classify_node,
    find_enclosing_type,
    get_annotations,
    get_extended_types,
    get_implemented_types,
    get_imports,
    get_location,
    get_modifiers,
    get_name,
    get_package_name,
    get_parameters,
    get_return_type,
    get_thrown_types,
    iter_descendants,
    iter_type_members,
    node_text,
)

logger = logging.getLogger(__name__)

_TYPE_KINDS = {
    DeclarationKind.CLASS: Kind.CLASS,
    DeclarationKind.INTERFACE: Kind.INTERFACE,
    DeclarationKind.ENUM: Kind.ENUM,
    DeclarationKind.ANNOTATION: Kind.ANNOTATION,
    DeclarationKind.RECORD: Kind.RECORD,
}
_MEMBER_KINDS = {
    DeclarationKind.METHOD: Kind.METHOD,
    DeclarationKind.CONSTRUCTOR: Kind.CONSTRUCTOR,
}


@dataclass(frozen=True)
class ExtractionOptions:
    """Per-run chunking policy."""

    max_snippet_length: int = DEFAULT_MAX_SNIPPET_LENGTH
    include_code_snippets: bool = DEFAULT_INCLUDE_CODE_SNIPPETS


@dataclass
class FileContext:
    """Facts shared by every chunk built from one file."""

    file_path: str
    package_name: str
    imports: List[str]
    sequence: ChunkIdSequence
    options: ExtractionOptions = field(default_factory=ExtractionOptions)


def create_file_context(
    tree: Tree,
    file_path: str,
    sequence: Optional[ChunkIdSequence] = None,
    options: Optional[ExtractionOptions] = None,
) -> FileContext:
    """Resolve package and imports of a parsed file."""
    root = tree.root_node
    return FileContext(
        file_path=file_path,
        package_name=get_package_name(root),
        imports=get_imports(root),
        sequence=sequence or ChunkIdSequence(),
        options=options or ExtractionOptions(),
    )


def truncate_code(code: str, max_length: int) -> str:
    """Clip code to ``max_length`` characters, marking the cut with ``...``."""
    if len(code) > max_length:
        return code[:max_length] + SNIPPET_ELLIPSIS
    return code


def qualify_type_name(type_node: Node, package_name: str) -> str:
    """Fully qualified name of a type declaration.

    Nested types are joined to their enclosing types with ``$``, so
    ``Node`` inside ``A`` in package ``p`` is ``p.A$Node``.
    """
    names = []
    current: Optional[Node] = type_node
    while current is not None:
        names.append(get_name(current) or "")
        current = find_enclosing_type(current)
    return qualify_name(package_name, NESTED_TYPE_SEPARATOR.join(reversed(names)))


def _owner_name(enclosing: Optional[Node], package_name: str) -> str:
    if enclosing is None:
        return qualify_name(package_name, "")
    return qualify_type_name(enclosing, package_name)


def _parent_ref(type_node: Optional[Node], package_name: str) -> ParentRef:
    if type_node is None:
        return ParentRef(namespace=package_name, classes=[])
    kind = classify_node(type_node)
    classes: List[str] = []
    if kind in (DeclarationKind.CLASS, DeclarationKind.INTERFACE):
        classes.extend(get_extended_types(type_node))
    if kind in (DeclarationKind.CLASS, DeclarationKind.ENUM, DeclarationKind.RECORD):
        classes.extend(get_implemented_types(type_node))
    return ParentRef(namespace=package_name, classes=classes)


# ---------------------------------------------------------------------------
# Class level
# ---------------------------------------------------------------------------

def build_type_chunk(node: Node, kind: DeclarationKind, ctx: FileContext) -> CodeChunk:
    """Build the class-level chunk of one type declaration.

    Args:
        node: A class, interface, enum or annotation type declaration.
        kind: The node's declaration kind.
        ctx: Context of the containing file.

    Returns:
        A chunk with an empty symbol table.
    """
    name = get_name(node) or ""
    fully_qualified_name = qualify_type_name(node, ctx.package_name)

    chunk = CodeChunk(
        language=LANGUAGE_NAME,
        file_path=ctx.file_path,
        chunk_id=ctx.package_name,
        chunk_key=make_chunk_key(fully_qualified_name, ctx.sequence),
        fully_qualified_name=fully_qualified_name,
        package=ctx.package_name,
        kind=_TYPE_KINDS[kind],
        name=name,
        parent=_parent_ref(node, ctx.package_name),
        signature=get_signature(node),
        location=get_location(node),
        imports=list(ctx.imports),
        modifiers=get_modifiers(node),
        symbols=Symbols(),
        code=node_text(node),
        notes=Notes(),
        complexity_score=calculate_complexity(node),
    )
    logger.debug("Extracted %s: %s at %s:%s", chunk.kind.value, fully_qualified_name,
                 ctx.file_path, chunk.location.start_line)
    return chunk


def traverse_types(node: Node, ctx: FileContext) -> List[CodeChunk]:
    """Recursively collect a chunk for every type declaration below ``node``.

    Declarations are visited depth-first in source order, so an outer type
    always precedes the types nested in it.
    """
    chunks = []
    for child in node.named_children:
        kind = classify_node(child)
        if kind is not None and kind.is_type:
            chunks.append(build_type_chunk(child, kind, ctx))
        chunks.extend(traverse_types(child, ctx))
    return chunks


def extract_class_chunks(
    tree: Tree,
    file_path: str,
    sequence: Optional[ChunkIdSequence] = None,
    options: Optional[ExtractionOptions] = None,
) -> FileChunks:
    """Extract one chunk per type declaration of a parsed file.

    The file-wide symbol table is collected once after the traversal,
    into the table of the first chunk only.

    Args:
        tree: The parsed tree.
        file_path: Path of the originating file.
        sequence: Run-level id sequence.
        options: Chunking policy.

    Returns:
        The chunks of the file plus its symbol table.
    """
    ctx = create_file_context(tree, file_path, sequence, options)
    chunks = traverse_types(tree.root_node, ctx)

    if chunks:
        symbols = extract_symbols(tree.root_node, chunks[0].symbols)
    else:
        symbols = extract_symbols(tree.root_node)

    logger.debug("Extracted %d type chunks from %s", len(chunks), file_path)
    return FileChunks(file_path=file_path, chunks=chunks, symbols=symbols)


def count_type_members(type_node: Node) -> int:
    """Number of methods and constructors declared directly in a type."""
    count = 0
    for member in iter_type_members(type_node):
        kind = classify_node(member)
        if kind is not None and kind.is_member:
            count += 1
    return count


def extract_type_artifacts(
    tree: Tree,
    file_path: str,
    sequence: Optional[ChunkIdSequence] = None,
    options: Optional[ExtractionOptions] = None,
) -> List[Tuple[CodeChunk, int]]:
    """Class-level chunks of a file paired with their direct member counts.

    Chunks are built as in ``extract_class_chunks``, including the file-wide
    symbol table on the first chunk.
    """
    ctx = create_file_context(tree, file_path, sequence, options)
    artifacts = []
    for node in iter_descendants(tree.root_node):
        kind = classify_node(node)
        if kind is not None and kind.is_type:
            artifacts.append((build_type_chunk(node, kind, ctx), count_type_members(node)))

    if artifacts:
        extract_symbols(tree.root_node, artifacts[0][0].symbols)
    return artifacts


# ---------------------------------------------------------------------------
# Method level
# ---------------------------------------------------------------------------

@dataclass
class _MemberDetails:
    name: str
    kind: Kind
    class_name: str
    fully_qualified_name: str
    token: str
    body_text: str
    return_type: Optional[str]
    parameters: List[Parameter]
    annotations: List[str]
    throws_declarations: List[str]
    method_calls: List[str]
    line_count: int
    cyclomatic_complexity: int


def collect_method_calls(node: Node) -> List[str]:
    """Names of every method invocation below ``node``, in source order."""
    calls = []
    for descendant in iter_descendants(node):
        if descendant.type == METHOD_INVOCATION_NODE:
            calls.append(node_text(descendant.child_by_field_name("name")))
    return calls


def count_lines(text: str) -> int:
    """Line count of a text; an empty text counts as one line."""
    return len(text.splitlines()) or 1


def _member_details(
    node: Node,
    kind: DeclarationKind,
    enclosing: Optional[Node],
    ctx: FileContext,
) -> _MemberDetails:
    name = get_name(node) or ""
    member_kind = _MEMBER_KINDS[kind]
    class_name = (get_name(enclosing) or "") if enclosing is not None else ""
    body = node.child_by_field_name("body")
    body_text = node_text(body)

    return _MemberDetails(
        name=name,
        kind=member_kind,
        class_name=class_name,
        fully_qualified_name=f"{_owner_name(enclosing, ctx.package_name)}.{name}",
        token=make_member_token(ctx.file_path, name, member_kind.value, ctx.sequence),
        body_text=body_text,
        return_type=get_return_type(node) if kind is DeclarationKind.METHOD else None,
        parameters=[Parameter(name=p.name, type=p.type) for p in get_parameters(node)],
        annotations=get_annotations(node),
        throws_declarations=get_thrown_types(node),
        method_calls=collect_method_calls(body) if body is not None else [],
        line_count=count_lines(body_text),
        cyclomatic_complexity=calculate_cyclomatic_complexity(node),
    )


def build_member_chunk(
    node: Node,
    kind: DeclarationKind,
    enclosing: Optional[Node],
    ctx: FileContext,
) -> CodeChunk:
    """Build the method-level chunk of one method or constructor."""
    details = _member_details(node, kind, enclosing, ctx)

    code = None
    if ctx.options.include_code_snippets:
        code = truncate_code(node_text(node), ctx.options.max_snippet_length)

    return CodeChunk(
        language=LANGUAGE_NAME,
        file_path=ctx.file_path,
        chunk_id=make_member_chunk_id(details.fully_qualified_name, details.token),
        chunk_key=make_chunk_key(details.fully_qualified_name, ctx.sequence),
        fully_qualified_name=details.fully_qualified_name,
        package=ctx.package_name,
        kind=details.kind,
        name=details.class_name,
        parent=_parent_ref(enclosing, ctx.package_name),
        signature=get_signature(node),
        location=get_location(node),
        imports=list(ctx.imports),
        modifiers=get_modifiers(node),
        symbols=Symbols(),
        code=code,
        notes=Notes(),
        return_type=details.return_type,
        parameters=details.parameters,
        parameter_count=len(details.parameters),
        annotations=details.annotations,
        throws_declarations=details.throws_declarations,
        method_calls=details.method_calls,
        line_count=details.line_count,
        cyclomatic_complexity=details.cyclomatic_complexity,
    )


def build_method_record(
    node: Node,
    kind: DeclarationKind,
    enclosing: Optional[Node],
    ctx: FileContext,
) -> MethodChunk:
    """Build the lightweight aggregate-report record of one member."""
    details = _member_details(node, kind, enclosing, ctx)
    location = get_location(node)

    snippet = None
    if ctx.options.include_code_snippets:
        snippet = truncate_code(details.body_text, ctx.options.max_snippet_length)

    return MethodChunk(
        chunk_id=details.token,
        chunk_type=details.kind.value,
        method_name=details.name,
        class_name=details.class_name,
        package_name=ctx.package_name,
        file_path=ctx.file_path,
        fully_qualified_name=details.fully_qualified_name,
        start_line=location.start_line,
        end_line=location.end_line,
        total_lines=location.end_line - location.start_line + 1,
        return_type=details.return_type,
        modifiers=get_modifiers(node),
        parameters=details.parameters,
        parameter_count=len(details.parameters),
        annotations=details.annotations,
        throws_declarations=details.throws_declarations,
        line_count=details.line_count,
        cyclomatic_complexity=details.cyclomatic_complexity,
        method_calls=details.method_calls,
        code_snippet=snippet,
    )


def traverse_members(node: Node) -> List[Node]:
    """Recursively collect every method and constructor below ``node``.

    Members of enum bodies, nested types, local classes and anonymous class
    bodies are all included, each exactly once, in source order.
    """
    members = []
    for child in node.named_children:
        kind = classify_node(child)
        if kind is not None and kind.is_member:
            members.append(child)
        members.extend(traverse_members(child))
    return members


def find_or_create_class_info(
    groups: List[ClassInfo],
    fully_qualified_name: str,
    class_name: str,
    package_name: str,
    type_name: str,
    source_file: str,
    clock: Callable[[], datetime] = datetime.now,
) -> ClassInfo:
    """Return the group keyed by ``fully_qualified_name``, creating it on a miss.

    Lookup is a linear scan; the first exact match wins.
    """
    for group in groups:
        if group.fully_qualified_name == fully_qualified_name:
            return group

    group = ClassInfo(
        fully_qualified_name=fully_qualified_name,
        class_name=class_name,
        package_name=package_name,
        type=type_name,
        source_file=source_file,
        timestamp=clock(),
        methods=[],
    )
    groups.append(group)
    return group


def extract_method_groups(
    tree: Tree,
    file_path: str,
    sequence: Optional[ChunkIdSequence] = None,
    options: Optional[ExtractionOptions] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> List[ClassInfo]:
    """Extract member chunks of a parsed file grouped by containing class.

    Args:
        tree: The parsed tree.
        file_path: Path of the originating file.
        sequence: Run-level id sequence.
        options: Chunking policy.
        clock: Source of group creation timestamps.

    Returns:
        One ClassInfo per enclosing type, in first-encounter order.
    """
    ctx = create_file_context(tree, file_path, sequence, options)
    groups: List[ClassInfo] = []

    for member in traverse_members(tree.root_node):
        enclosing = find_enclosing_type(member)
        class_name = (get_name(enclosing) or "") if enclosing is not None else ""
        type_name = TYPE_KIND_MAP.get(enclosing.type, "CLASS") if enclosing is not None else "CLASS"

        group = find_or_create_class_info(
            groups,
            fully_qualified_name=_owner_name(enclosing, ctx.package_name),
            class_name=class_name,
            package_name=ctx.package_name,
            type_name=type_name,
            source_file=file_path,
            clock=clock,
        )
        group.methods.append(
            build_member_chunk(member, classify_node(member), enclosing, ctx)
        )

    logger.debug("Grouped members of %s into %d classes", file_path, len(groups))
    return groups


def extract_method_chunks(
    tree: Tree,
    file_path: str,
    sequence: Optional[ChunkIdSequence] = None,
    options: Optional[ExtractionOptions] = None,
) -> List[MethodChunk]:
    """Extract one lightweight record per method or constructor of a file."""
    ctx = create_file_context(tree, file_path, sequence, options)
    return [
        build_method_record(member, classify_node(member), find_enclosing_type(member), ctx)
        for member in traverse_members(tree.root_node)
    ]
