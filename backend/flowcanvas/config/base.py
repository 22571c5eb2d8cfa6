"""
Configuration base classes and registry.

Each config is a dataclass subclassing ``BaseConfig`` and decorated
with ``@register_config``. Defaults come from environment variables
listed in the class' ``_ENV_MAP``; ``get_fields_metadata`` describes
the fields for a settings form.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from logging import getLogger
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

logger = getLogger(__name__)


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    PATH = "path"


@dataclass
class ConfigField:
    """UI metadata for a single config field."""
    name: str
    field_type: FieldType
    label: str
    description: str = ""
    default: Any = None
    required: bool = False
    placeholder: str = ""
    group: str = "general"
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    apply_change: Optional[Callable[[Any, Any], None]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.field_type.value,
            "label": self.label,
            "description": self.description,
            "default": self.default,
            "required": self.required,
            "placeholder": self.placeholder,
            "group": self.group,
            "min": self.min_value,
            "max": self.max_value,
        }


@dataclass
class BaseConfig:
    """Base for all registered configs."""

    @classmethod
    def get_default_instance(cls):
        return cls()

    @classmethod
    def get_config_name(cls) -> str:
        raise NotImplementedError

    @classmethod
    def get_display_name(cls) -> str:
        return cls.get_config_name()

    @classmethod
    def get_description(cls) -> str:
        return ""

    @classmethod
    def get_category(cls) -> str:
        return "general"

    @classmethod
    def get_icon(cls) -> str:
        return "settings"

    @classmethod
    def get_i18n(cls) -> Dict[str, Dict[str, Any]]:
        """Translations keyed by locale: display_name, description,
        groups and per-field label/description overrides."""
        return {}

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return []

    def validate(self) -> List[str]:
        """Check field values against ``min_value``/``max_value``.

        Returns a list of error messages (empty = valid).
        """
        errors: List[str] = []
        for meta in self.get_fields_metadata():
            value = getattr(self, meta.name, None)
            if value is None or not isinstance(value, (int, float)):
                continue
            if meta.min_value is not None and value < meta.min_value:
                errors.append(f"{meta.label} must be >= {meta.min_value} (got {value})")
            if meta.max_value is not None and value > meta.max_value:
                errors.append(f"{meta.label} must be <= {meta.max_value} (got {value})")
        return errors

    def update(self, values: Dict[str, Any]) -> None:
        """Apply changed values, running each field's ``apply_change`` hook."""
        metadata = {m.name: m for m in self.get_fields_metadata()}
        for name, value in values.items():
            if name not in metadata:
                logger.warning(f"Unknown field '{name}' for config '{self.get_config_name()}'")
                continue
            old = getattr(self, name)
            setattr(self, name, value)
            hook = metadata[name].apply_change
            if hook is not None and old != value:
                hook(old, value)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def schema(self) -> Dict[str, Any]:
        return {
            "name": self.get_config_name(),
            "display_name": self.get_display_name(),
            "description": self.get_description(),
            "category": self.get_category(),
            "icon": self.get_icon(),
            "i18n": self.get_i18n(),
            "fields": [f.to_dict() for f in self.get_fields_metadata()],
            "values": self.to_dict(),
        }


_REGISTRY: Dict[str, Type[BaseConfig]] = {}

C = TypeVar("C", bound=Type[BaseConfig])


def register_config(cls: C) -> C:
    """Class decorator adding a config to the registry."""
    name = cls.get_config_name()
    if name in _REGISTRY and _REGISTRY[name] is not cls:
        logger.warning(f"Config '{name}' registered twice; keeping {cls.__name__}")
    _REGISTRY[name] = cls
    return cls


def get_config_class(name: str) -> Optional[Type[BaseConfig]]:
    return _REGISTRY.get(name)


def list_config_classes() -> List[Type[BaseConfig]]:
    return list(_REGISTRY.values())


def load_config(name: str) -> BaseConfig:
    """Instantiate a registered config with environment defaults.

    Raises:
        KeyError: If no config is registered under ``name``.
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        raise KeyError(f"Unknown config: {name}")
    return cls.get_default_instance()
