"""
Storage Configuration.

Where the JSON persistence gateway keeps the saved workflow.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from flowcanvas.config.base import BaseConfig, ConfigField, FieldType, register_config
from flowcanvas.config.sub_config.general.env_utils import env_sync, read_env_defaults

_DEFAULT_DIR = str(Path.home() / ".flowcanvas")


@register_config
@dataclass
class StorageConfig(BaseConfig):
    """Persistence location of the workflow state."""

    storage_dir: str = _DEFAULT_DIR
    storage_key: str = "workflow-state"

    _ENV_MAP = {
        "storage_dir": "FLOWCANVAS_STORAGE_DIR",
        "storage_key": "FLOWCANVAS_STORAGE_KEY",
    }

    @classmethod
    def get_default_instance(cls) -> "StorageConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @classmethod
    def get_config_name(cls) -> str:
        return "storage"

    @classmethod
    def get_display_name(cls) -> str:
        return "Storage"

    @classmethod
    def get_description(cls) -> str:
        return "Directory and key of the saved workflow file."

    @classmethod
    def get_icon(cls) -> str:
        return "storage"

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField(
                name="storage_dir",
                field_type=FieldType.PATH,
                label="Storage Directory",
                description="Directory holding saved workflow JSON files",
                default=_DEFAULT_DIR,
                required=True,
                group="storage",
                apply_change=env_sync("FLOWCANVAS_STORAGE_DIR"),
            ),
            ConfigField(
                name="storage_key",
                field_type=FieldType.STRING,
                label="Storage Key",
                description="File name (without .json) of the autosaved workflow",
                default="workflow-state",
                placeholder="workflow-state",
                group="storage",
                apply_change=env_sync("FLOWCANVAS_STORAGE_KEY"),
            ),
        ]
