"""
Configuration for guard contexts.

Priority: environment variables (SCRIPTUM_*) > config file > defaults.
The config file is looked up from the explicit path or $SCRIPTUM_CONFIG and
may be JSON, YAML or TOML.
"""
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from scriptum.scriptum_introspect import MAX_DEPTH, MAX_REC_SIZE, MAX_TUP_SIZE
from scriptum.scriptum_serialize import load_file

logger = logging.getLogger(__name__)

ENV_PREFIX = "SCRIPTUM_"
CONFIG_ENV = "SCRIPTUM_CONFIG"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class GuardConfig:
    """Settings of one guard context."""
    guarded: bool = True
    history_size: int = 10
    max_tuple_size: int = MAX_TUP_SIZE
    max_record_size: int = MAX_REC_SIZE
    max_depth: int = MAX_DEPTH
    error_history_depth: int = 3
    debug: bool = False

    def __post_init__(self):
        for f in fields(self):
            if f.type is int and getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} must not be negative, got {getattr(self, f.name)}")

    def merged(self, values: Mapping[str, Any]) -> "GuardConfig":
        """Returns a copy with `values` applied, coercing strings as needed."""
        known = {f.name: f for f in fields(self)}
        updates: Dict[str, Any] = {}
        for key, raw in values.items():
            f = known.get(key)
            if f is None:
                raise ValueError(f"unknown config key {key!r}")
            updates[key] = _coerce(key, f.type, raw)
        return replace(self, **updates)


def _coerce(key: str, typ, raw: Any):
    if typ is bool:
        if isinstance(raw, bool):
            return raw
        s = str(raw).strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
        raise ValueError(f"config key {key!r} expects a boolean, got {raw!r}")
    if typ is int:
        if isinstance(raw, bool):
            raise ValueError(f"config key {key!r} expects an integer, got {raw!r}")
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise ValueError(f"config key {key!r} expects an integer, got {raw!r}") from e
    return raw


def _from_env(env: Mapping[str, str]) -> Dict[str, str]:
    out = {}
    for f in fields(GuardConfig):
        name = ENV_PREFIX + f.name.upper()
        if name in env:
            out[f.name] = env[name]
    return out


def load_config(path: Optional[str | Path] = None,
                env: Optional[Mapping[str, str]] = None) -> GuardConfig:
    """Builds a GuardConfig from defaults, an optional file and the environment."""
    env = os.environ if env is None else env
    config = GuardConfig()

    path = path or env.get(CONFIG_ENV)
    if path:
        data = load_file(path)
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValueError(f"config file {str(path)!r} must contain a mapping")
        # Allow the settings to live under a top-level `scriptum` table
        if isinstance(data.get("scriptum"), Mapping):
            data = data["scriptum"]
        config = config.merged(data)
        logger.debug("loaded guard config from %s", path)

    overrides = _from_env(env)
    if overrides:
        config = config.merged(overrides)
    return config
