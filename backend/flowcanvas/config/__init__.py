"""
Configuration Package.

Importing this package registers every config class.
"""

from flowcanvas.config.base import (
    BaseConfig,
    ConfigField,
    FieldType,
    get_config_class,
    list_config_classes,
    load_config,
    register_config,
)
from flowcanvas.config.sub_config.engine.history_config import HistoryConfig
from flowcanvas.config.sub_config.engine.simulation_config import SimulationConfig
from flowcanvas.config.sub_config.general.storage_config import StorageConfig

__all__ = [
    "BaseConfig",
    "ConfigField",
    "FieldType",
    "get_config_class",
    "list_config_classes",
    "load_config",
    "register_config",
    "HistoryConfig",
    "SimulationConfig",
    "StorageConfig",
]
