"""
Environment helpers shared by the config classes.
"""

from __future__ import annotations

import os
from dataclasses import Field
from logging import getLogger
from typing import Any, Callable, Dict

logger = getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _coerce(raw: str, type_name: str) -> Any:
    if "bool" in type_name:
        return raw.strip().lower() in _TRUE_VALUES
    if "int" in type_name:
        return int(raw)
    if "float" in type_name:
        return float(raw)
    return raw


def read_env_defaults(env_map: Dict[str, str], fields: Dict[str, Field]) -> Dict[str, Any]:
    """Collect dataclass field values from the environment.

    Only variables that are set are returned; unset ones fall back
    to the dataclass default. Values that fail to convert are
    logged and skipped.
    """
    values: Dict[str, Any] = {}
    for field_name, env_name in env_map.items():
        raw = os.environ.get(env_name)
        if raw is None or raw == "":
            continue
        dc_field = fields.get(field_name)
        if dc_field is None:
            continue
        type_name = str(dc_field.type)
        try:
            values[field_name] = _coerce(raw, type_name)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {env_name}: {raw!r}")
    return values


def env_sync(env_name: str) -> Callable[[Any, Any], None]:
    """Return an ``apply_change`` hook writing the new value to ``env_name``."""

    def _apply(old: Any, new: Any) -> None:
        if new is None:
            os.environ.pop(env_name, None)
        else:
            os.environ[env_name] = str(new)

    return _apply

