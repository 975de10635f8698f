"""JSON artifact sink for analysis results."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


def write_json(payload: Any, path: str, pretty: bool = True) -> str:
    """Serialize ``payload`` to ``path`` as UTF-8 JSON and return the path.

    Parent directories are created as needed. Non-ASCII text is written as-is.
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2 if pretty else None, ensure_ascii=False)
    logger.debug("Wrote %s", path)
    return path


def write_chunk_artifact(
    payload: Any,
    output_dir: str,
    file_name: str,
    pretty: bool = True,
) -> str:
    """Write one per-entity artifact into ``output_dir``."""
    os.makedirs(output_dir, exist_ok=True)
    return write_json(payload, os.path.join(output_dir, file_name), pretty=pretty)
