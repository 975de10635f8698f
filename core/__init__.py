"""Core shared contracts and utilities."""

from core.id_contract import (
    PROJECT_SUMMARY_FILE,
    ChunkIdSequence,
    generate_file_name,
    make_chunk_key,
    make_member_chunk_id,
    make_member_token,
    qualify_name,
)
from core.structured_logging import (
    configure_structured_logging,
    file_scope,
    get_run_id,
    phase_scope,
    set_run_id,
)
from core.settings import (
    ChunkerSettings,
    ConfigValidationError,
    load_settings,
)
from core.run_artifacts import write_chunk_artifact, write_json

__all__ = [
    "PROJECT_SUMMARY_FILE",
    "ChunkIdSequence",
    "generate_file_name",
    "make_chunk_key",
    "make_member_chunk_id",
    "make_member_token",
    "qualify_name",
    "configure_structured_logging",
    "file_scope",
    "get_run_id",
    "phase_scope",
    "set_run_id",
    "ChunkerSettings",
    "ConfigValidationError",
    "load_settings",
    "write_chunk_artifact",
    "write_json",
]
