from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml

try:
    import tomllib as _toml_loader  # type: ignore[attr-defined]
    _HAS_TOMLLIB = True
except ImportError:
    _HAS_TOMLLIB = False


_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}


# --------------------------
# Helpers
# --------------------------

def _norm_text(data: bytes | bytearray | str, *, encoding: Optional[str] = None) -> str:
    if isinstance(data, (bytes, bytearray)):
        return data.decode(encoding or 'utf-8')
    return data


def detect_format(path: Optional[str | Path] = None, data_hint: Optional[str] = None) -> Optional[str]:
    """
    Returns a canonical format name among: 'json', 'yaml', 'toml'.
    Uses the file suffix first; falls back to simple data sniffing if provided.
    """
    if path is not None:
        fmt = _SUFFIX_FORMATS.get(Path(path).suffix.lower())
        if fmt:
            return fmt

    if data_hint is not None:
        s = data_hint.lstrip()
        if s.startswith('{') or s.startswith('['):
            return 'json'
        # YAML is a superset of the flat key/value files we read
        return 'yaml'
    return None


# --------------------------
# Public API
# --------------------------

def deserialize(data: bytes | bytearray | str,
                *,
                path: Optional[str | Path] = None,
                fmt: Optional[str] = None) -> Any:
    """
    Convert configuration text to native Python structures.
    Supported fmt: 'json', 'yaml', 'toml'.
    If fmt is None, uses the path suffix, then sniffing.
    Malformed input raises ValueError naming the format.
    """
    text = _norm_text(data)
    f = (fmt or detect_format(path, text))
    if f == 'json':
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON: {e}") from e
    if f == 'yaml':
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"invalid YAML: {e}") from e
    if f == 'toml':
        if not _HAS_TOMLLIB:
            raise RuntimeError("TOML support requires Python 3.11+ (tomllib)")
        try:
            return _toml_loader.loads(text)
        except _toml_loader.TOMLDecodeError as e:
            raise ValueError(f"invalid TOML: {e}") from e
    raise ValueError(f"Unsupported serialization format: {f!r}")


def load_file(path: str | Path) -> Any:
    p = Path(path)
    return deserialize(p.read_bytes(), path=p)


__all__ = [
    "deserialize",
    "detect_format",
    "load_file",
]
