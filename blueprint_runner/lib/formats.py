from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml  # PyYAML

from ..errors import DecodeError

SUPPORTED_FORMATS = ("yaml", "json", "toml")

_ALIASES = {
    "yaml": "yaml",
    "yml": "yaml",
    "json": "json",
    "toml": "toml",
}


def normalize_format(hint: str) -> str:
    """Map an extension ('.yml') or format name ('YAML') to a canonical format."""

    key = str(hint or "").strip().lower().lstrip(".")
    fmt = _ALIASES.get(key)
    if fmt is None:
        raise DecodeError(f"unsupported blueprint format: {hint!r}")
    return fmt


def format_for_path(path: Path) -> str:
    return normalize_format(path.suffix)


def decode_bytes(data: bytes | str, hint: str) -> Any:
    """Decode raw blueprint data.

    Empty documents decode to an empty dict so callers can treat them as
    "nothing declared".
    """

    fmt = normalize_format(hint)

    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        if fmt == "yaml":
            result = yaml.safe_load(text)
        elif fmt == "json":
            result = json.loads(text) if text.strip() else None
        else:
            result = tomllib.loads(text)
    except UnicodeDecodeError as e:
        raise DecodeError(f"blueprint data is not valid UTF-8: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise DecodeError(f"invalid {fmt} document: {e}") from e

    return {} if result is None else result


def load_file(path: Path) -> Any:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"error reading {path}: {e}") from e
    return decode_bytes(data, format_for_path(path))
