"""Run configuration for the chunker.

Settings are read once at startup from an optional YAML file (top-level key
``code-chunker`` with ``chunk``, ``filter`` and ``output`` sections) and then
overridden from the environment. A ``.env`` file is loaded at import time via
python-dotenv.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Idempotent; does nothing if already loaded or missing
load_dotenv()

SETTINGS_ROOT_KEY = "code-chunker"
CONFIG_PATH_ENV = "CHUNKER_CONFIG"

_VALID_LEVELS = {"CLASS", "METHOD"}

DEFAULT_CHUNK_LEVEL = "CLASS"
DEFAULT_MAX_SNIPPET_LENGTH = 200
DEFAULT_INCLUDE_CODE_SNIPPETS = True
DEFAULT_EXCLUDE_DIRECTORIES: tuple[str, ...] = (
    "target",
    "bin",
    "build",
    ".git",
    "node_modules",
    ".idea",
    ".vscode",
)


class ConfigValidationError(RuntimeError):
    """Raised when strict settings validation fails."""


@dataclass(frozen=True)
class ChunkerSettings:
    """Static run configuration."""

    default_level: str = DEFAULT_CHUNK_LEVEL
    max_snippet_length: int = DEFAULT_MAX_SNIPPET_LENGTH
    include_code_snippets: bool = DEFAULT_INCLUDE_CODE_SNIPPETS
    exclude_patterns: tuple[str, ...] = ()
    exclude_directories: tuple[str, ...] = field(
        default_factory=lambda: tuple(DEFAULT_EXCLUDE_DIRECTORIES)
    )
    pretty_print: bool = True


def _parse_bool(raw: Any) -> Optional[bool]:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return None


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; using default", msg)


def _read_settings_file(path: str, strict: bool) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Settings file not found: {path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse settings YAML at {path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        msg = f"Unexpected settings payload type: {type(payload).__name__}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    section = payload.get(SETTINGS_ROOT_KEY, payload)
    if not isinstance(section, dict):
        _fail(f"'{SETTINGS_ROOT_KEY}' must be a mapping", strict)
        return {}
    return section


def _section(payload: dict[str, Any], name: str, strict: bool) -> dict[str, Any]:
    value = payload.get(name) or {}
    if not isinstance(value, dict):
        _fail(f"settings section '{name}' must be a mapping", strict)
        return {}
    return value


def _apply_values(
    settings: ChunkerSettings,
    level: Any,
    max_snippet_length: Any,
    include_code_snippets: Any,
    pretty_print: Any,
    strict: bool,
) -> ChunkerSettings:
    changes: dict[str, Any] = {}

    if level is not None:
        text = str(level).strip().upper()
        if text in _VALID_LEVELS:
            changes["default_level"] = text
        else:
            _fail(f"Invalid chunk level '{level}'", strict)

    if max_snippet_length is not None:
        try:
            length = int(max_snippet_length)
        except (TypeError, ValueError):
            length = -1
        if length >= 0:
            changes["max_snippet_length"] = length
        else:
            _fail(f"Invalid max snippet length '{max_snippet_length}'", strict)

    for key, raw in (
        ("include_code_snippets", include_code_snippets),
        ("pretty_print", pretty_print),
    ):
        if raw is None:
            continue
        parsed = _parse_bool(raw)
        if parsed is None:
            _fail(f"Invalid boolean for {key}: '{raw}'", strict)
        else:
            changes[key] = parsed

    return replace(settings, **changes) if changes else settings


def _string_tuple(raw: Any, name: str, strict: bool) -> Optional[tuple[str, ...]]:
    if raw is None:
        return None
    if not isinstance(raw, list):
        _fail(f"'{name}' must be a list", strict)
        return None
    return tuple(str(item) for item in raw)


def load_settings(path: Optional[str] = None, strict: bool = False) -> ChunkerSettings:
    """Load chunker settings from YAML and environment overrides.

    Args:
        path: Settings file. Falls back to ``CHUNKER_CONFIG``; when neither is
            set only defaults and environment overrides apply.
        strict: Raise ``ConfigValidationError`` on any invalid value instead
            of logging a warning and keeping the default.

    Returns:
        The resolved settings.
    """
    settings = ChunkerSettings()
    path = path or os.getenv(CONFIG_PATH_ENV)

    if path:
        payload = _read_settings_file(path, strict)
        chunk = _section(payload, "chunk", strict)
        filters = _section(payload, "filter", strict)
        output = _section(payload, "output", strict)

        settings = _apply_values(
            settings,
            level=chunk.get("default-level"),
            max_snippet_length=chunk.get("max-snippet-length"),
            include_code_snippets=chunk.get("include-code-snippets"),
            pretty_print=output.get("pretty-print"),
            strict=strict,
        )
        patterns = _string_tuple(filters.get("exclude-patterns"), "exclude-patterns", strict)
        directories = _string_tuple(
            filters.get("exclude-directories"), "exclude-directories", strict
        )
        if patterns is not None:
            settings = replace(settings, exclude_patterns=patterns)
        if directories is not None:
            settings = replace(settings, exclude_directories=directories)

    settings = _apply_values(
        settings,
        level=os.getenv("CHUNKER_DEFAULT_LEVEL"),
        max_snippet_length=os.getenv("CHUNKER_MAX_SNIPPET_LENGTH"),
        include_code_snippets=os.getenv("CHUNKER_INCLUDE_CODE_SNIPPETS"),
        pretty_print=os.getenv("CHUNKER_PRETTY_PRINT"),
        strict=strict,
    )
    logger.debug("Resolved chunker settings: %s", settings)
    return settings
