"""
History Configuration.

Optional cap on the number of undo snapshots kept in memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from flowcanvas.config.base import BaseConfig, ConfigField, FieldType, register_config
from flowcanvas.config.sub_config.general.env_utils import read_env_defaults


@register_config
@dataclass
class HistoryConfig(BaseConfig):
    """Undo/redo log limits."""

    max_entries: Optional[int] = None

    _ENV_MAP = {
        "max_entries": "FLOWCANVAS_HISTORY_MAX_ENTRIES",
    }

    def __post_init__(self) -> None:
        if not self.max_entries:
            self.max_entries = None

    @classmethod
    def get_default_instance(cls) -> "HistoryConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @classmethod
    def get_config_name(cls) -> str:
        return "history"

    @classmethod
    def get_display_name(cls) -> str:
        return "Undo History"

    @classmethod
    def get_description(cls) -> str:
        return "Maximum number of undo snapshots (empty = unlimited)."

    @classmethod
    def get_category(cls) -> str:
        return "engine"

    @classmethod
    def get_icon(cls) -> str:
        return "history"

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField(
                name="max_entries",
                field_type=FieldType.INTEGER,
                label="Max Snapshots",
                description="Oldest snapshots are dropped beyond this count",
                default=None,
                group="history",
                min_value=1,
            ),
        ]
