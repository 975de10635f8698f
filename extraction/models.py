"""
Data models for extracted Java chunks and run reports.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class Kind(Enum):
    """What a chunk represents."""

    UNKNOWN = "UNKNOWN"
    FILE = "FILE"
    # Type kinds
    INTERFACE = "INTERFACE"
    CLASS = "CLASS"
    STRUCT = "STRUCT"
    ENUM = "ENUM"
    ANNOTATION = "ANNOTATION"
    DELEGATE = "DELEGATE"
    RECORD = "RECORD"
    # Member kinds
    CONSTRUCTOR = "CONSTRUCTOR"
    DESTRUCTOR = "DESTRUCTOR"
    METHOD = "METHOD"
    PROPERTY = "PROPERTY"
    VARIABLE = "VARIABLE"
    EVENT = "EVENT"
    INDEXER = "INDEXER"
    OPERATOR = "OPERATOR"
    NESTEDTYPE = "NESTEDTYPE"


class ChunkLevel(Enum):
    """Extraction granularity."""

    CLASS_LEVEL = "CLASS"
    METHOD_LEVEL = "METHOD"

    @classmethod
    def from_string(cls, value: str) -> "ChunkLevel":
        """Resolve a level from its short name (``CLASS`` or ``METHOD``).

        Raises:
            ValueError: If the value names no known level.
        """
        normalized = (value or "").strip().upper()
        for level in cls:
            if level.value == normalized:
                return level
        raise ValueError(f"Unknown chunk level: {value}")


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_json_value(value: Any) -> Any:
    """Convert a model value into plain JSON data.

    Dataclass fields become camelCase keys (or the ``json`` name given in the
    field metadata) and ``None`` values are dropped.
    """
    if is_dataclass(value) and not isinstance(value, type):
        payload: Dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            key = f.metadata.get("json") or _camel_case(f.name)
            payload[key] = to_json_value(item)
        return payload
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: to_json_value(item) for key, item in value.items()}
    return value


@dataclass
class Location:
    """Inclusive, 1-based line range of an entity within its file."""

    start_line: Optional[int]
    end_line: Optional[int]


@dataclass
class ParentRef:
    """Enclosing namespace plus extended and implemented type names."""

    namespace: str
    classes: List[str] = field(default_factory=list)


@dataclass
class Symbols:
    """Declared names collected from one file."""

    classes: List[str] = field(default_factory=list)
    methods: List[str] = field(default_factory=list)
    fields: List[str] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)


@dataclass
class Notes:
    """Warning and missing-data annotations. Currently always unset."""

    extraction_warnings: Optional[List[str]] = None
    missing_data: Optional[List[str]] = None


@dataclass
class Parameter:
    """One formal parameter of a method or constructor."""

    name: str
    type: str


@dataclass
class CodeChunk:
    """A structured record describing one type or member declaration.

    Attributes:
        chunk_id: Package name for class-level chunks (shared by every chunk
            of the package); ``package.Class.member:token`` for member chunks.
        chunk_key: Unique per-run key, ``fullyQualifiedName#sequence``.
        fully_qualified_name: ``package.Class`` or ``package.Class.member``.
        package: Enclosing package name, empty when the file declares none.
        kind: What the chunk represents.
        name: Simple type name. Member chunks carry the containing class
            name here; the member name lives in ``fully_qualified_name``
            and ``signature``.
        parent: Namespace plus extended/implemented type names.
        signature: Reconstructed declaration, or None for enums and
            annotation types.
        location: Start/end line, or None if the parser gave no range.
        imports: Full import list of the containing file.
        modifiers: Declared modifier keywords in source order.
        symbols: Symbol table. Only the first chunk of a file carries the
            file-wide table; every other chunk has an empty one.
        code: Verbatim source text of the declaration.
        notes: Placeholder for extraction warnings.
        complexity_score: Structural complexity (type chunks only).
    """

    language: str
    file_path: str
    chunk_id: str
    chunk_key: str
    fully_qualified_name: str
    package: str
    kind: Kind
    name: str
    parent: Optional[ParentRef]
    signature: Optional[str]
    location: Optional[Location]
    imports: List[str]
    modifiers: List[str]
    symbols: Symbols
    code: Optional[str]
    notes: Notes = field(default_factory=Notes)
    complexity_score: Optional[int] = None
    # Member-only fields
    return_type: Optional[str] = None
    parameters: Optional[List[Parameter]] = None
    parameter_count: Optional[int] = None
    annotations: Optional[List[str]] = None
    throws_declarations: Optional[List[str]] = None
    method_calls: Optional[List[str]] = None
    line_count: Optional[int] = None
    cyclomatic_complexity: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the chunk to a dictionary suitable for JSON serialization."""
        return to_json_value(self)


@dataclass
class MethodChunk:
    """Lightweight member record used by the method-level aggregate report."""

    chunk_id: str
    method_name: str
    class_name: str
    package_name: str = field(metadata={"json": "package"})
    file_path: str
    fully_qualified_name: str
    start_line: Optional[int]
    end_line: Optional[int]
    total_lines: Optional[int]
    return_type: Optional[str]
    modifiers: List[str]
    parameters: List[Parameter]
    parameter_count: int
    annotations: List[str]
    throws_declarations: List[str]
    line_count: int
    cyclomatic_complexity: int
    method_calls: List[str]
    code_snippet: Optional[str]
    chunk_type: str = "METHOD"

    def to_dict(self) -> Dict[str, Any]:
        return to_json_value(self)


@dataclass
class ClassInfo:
    """Member chunks of one class, keyed by fully qualified name."""

    fully_qualified_name: str
    class_name: str
    package_name: str
    type: str
    source_file: str
    timestamp: datetime
    methods: List[CodeChunk] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return to_json_value(self)


@dataclass
class FileChunks:
    """Class-level extraction outcome for one file.

    ``symbols`` is the file-wide symbol table. The same object is attached to
    the first chunk of ``chunks``; it is not scoped to that chunk's entity.
    """

    file_path: str
    chunks: List[CodeChunk]
    symbols: Symbols


@dataclass(frozen=True)
class ProjectAnalysisResult:
    """Top-level report of a single-file output run."""

    project_path: str
    analysis_level: str
    timestamp: datetime
    total_files: int
    processed_files: int
    error_files: int
    chunks: Tuple[Any, ...]
    total_classes: Optional[int] = None
    total_methods: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "projectPath": self.project_path,
            "analysisLevel": self.analysis_level,
            "timestamp": to_json_value(self.timestamp),
            "totalFiles": self.total_files,
        }
        if self.total_classes is not None:
            payload["totalClasses"] = self.total_classes
        if self.total_methods is not None:
            payload["totalMethods"] = self.total_methods
        payload["processedFiles"] = self.processed_files
        payload["errorFiles"] = self.error_files
        payload["chunks"] = [to_json_value(chunk) for chunk in self.chunks]
        return payload


@dataclass
class OutputFileInfo:
    """One artifact written in per-artifact output mode."""

    file_name: str
    fully_qualified_name: str
    type: str
    count: int
    file_type: str


@dataclass
class AnalysisSummary:
    """Project summary written alongside per-artifact output."""

    project_path: str
    analysis_type: str
    output_directory: str
    timestamp: datetime
    total_files: int = 0
    total_classes: int = 0
    total_methods: Optional[int] = None
    processed_files: int = 0
    error_files: int = 0
    output_files: List[OutputFileInfo] = field(default_factory=list)

    def add_output_file(
        self,
        file_name: str,
        fully_qualified_name: str,
        type: str,
        count: int,
        file_type: str,
    ) -> None:
        self.output_files.append(
            OutputFileInfo(
                file_name=file_name,
                fully_qualified_name=fully_qualified_name,
                type=type,
                count=count,
                file_type=file_type,
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_json_value(self)
