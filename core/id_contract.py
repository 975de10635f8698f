"""Chunk identifier and artifact naming contract."""

from __future__ import annotations

import itertools
import os

ARTIFACT_EXTENSION = ".json"
PROJECT_SUMMARY_FILE = "project-summary.json"
CHUNK_KEY_SEPARATOR = "#"
MEMBER_TOKEN_SEPARATOR = ":"
NESTED_TYPE_SEPARATOR = "$"


class ChunkIdSequence:
    """Deterministic, monotonically increasing disambiguator for chunk ids.

    One instance is owned by a run; tests inject their own to get
    reproducible identifiers.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next(self) -> int:
        return next(self._counter)


def qualify_name(package_name: str, *names: str) -> str:
    """Join a package and simple names with dots, skipping an empty package."""
    parts = [package_name] if package_name else []
    parts.extend(names)
    return ".".join(parts)


def make_chunk_key(fully_qualified_name: str, sequence: ChunkIdSequence) -> str:
    """Unique per-run chunk key: ``fqn#n``."""
    return f"{fully_qualified_name}{CHUNK_KEY_SEPARATOR}{sequence.next()}"


def make_member_token(
    file_path: str,
    member_name: str,
    kind: str,
    sequence: ChunkIdSequence,
) -> str:
    """Uniqueness token for a member: ``FileStem_member_KIND_n``.

    Overloads sharing a name in the same file get distinct tokens through the
    sequence number.
    """
    stem = os.path.splitext(os.path.basename(file_path))[0]
    return f"{stem}_{member_name}_{kind}_{sequence.next()}"


def make_member_chunk_id(member_fqn: str, token: str) -> str:
    """Member chunk id embedding class, member and token."""
    return f"{member_fqn}{MEMBER_TOKEN_SEPARATOR}{token}"


def generate_file_name(fully_qualified_name: str, suffix: str) -> str:
    """Artifact file name for an entity.

    ``a.b.C`` with suffix ``class`` gives ``a_b_C_class.json``; the nested
    type separator ``$`` is replaced the same way as ``.``.
    """
    base_name = fully_qualified_name.replace(".", "_").replace("$", "_")
    return f"{base_name}_{suffix}{ARTIFACT_EXTENSION}"
