"""
Simulation Configuration.

Controls how node execution times map to real dwell delays and
whether runaway (cyclic) simulations are cut off.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from flowcanvas.config.base import BaseConfig, ConfigField, FieldType, register_config
from flowcanvas.config.sub_config.general.env_utils import read_env_defaults


@register_config
@dataclass
class SimulationConfig(BaseConfig):
    """Timing of the simulated traversal."""

    time_scale: float = 1.0
    min_dwell_seconds: float = 1.0
    max_steps: Optional[int] = None

    _ENV_MAP = {
        "time_scale": "FLOWCANVAS_SIM_TIME_SCALE",
        "min_dwell_seconds": "FLOWCANVAS_SIM_MIN_DWELL",
        "max_steps": "FLOWCANVAS_SIM_MAX_STEPS",
    }

    def __post_init__(self) -> None:
        # 0 from the environment means "no ceiling"
        if not self.max_steps:
            self.max_steps = None

    @classmethod
    def get_default_instance(cls) -> "SimulationConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @classmethod
    def get_config_name(cls) -> str:
        return "simulation"

    @classmethod
    def get_display_name(cls) -> str:
        return "Simulation"

    @classmethod
    def get_description(cls) -> str:
        return "Dwell timing and step ceiling for workflow simulation."

    @classmethod
    def get_category(cls) -> str:
        return "engine"

    @classmethod
    def get_icon(cls) -> str:
        return "play"

    @classmethod
    def get_i18n(cls) -> Dict[str, Dict[str, Any]]:
        return {
            "ko": {
                "display_name": "시뮬레이션",
                "description": "워크플로 시뮬레이션의 대기 시간과 단계 상한 설정.",
                "groups": {
                    "timing": "타이밍",
                    "safety": "안전",
                },
                "fields": {
                    "time_scale": {
                        "label": "시간 배율",
                        "description": "시뮬레이션 1초당 실제 초 (1 = 실시간)",
                    },
                    "min_dwell_seconds": {
                        "label": "최소 대기 시간",
                        "description": "실행 시간이 0인 노드에 사용할 대기 시간",
                    },
                    "max_steps": {
                        "label": "단계 상한",
                        "description": "이 횟수만큼 이동한 뒤 중지 (비워 두면 무제한)",
                    },
                },
            },
        }

    def dwell_seconds(self, execution_time: Optional[float]) -> float:
        """Real delay spent on a node before following its first edge.

        Zero, negative or missing execution times use the minimum dwell.
        """
        seconds = execution_time if execution_time and execution_time > 0 else self.min_dwell_seconds
        return seconds * self.time_scale

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField(
                name="time_scale",
                field_type=FieldType.NUMBER,
                label="Time Scale",
                description="Real seconds per simulated second (1 = real time)",
                default=1.0,
                group="timing",
                min_value=0,
            ),
            ConfigField(
                name="min_dwell_seconds",
                field_type=FieldType.NUMBER,
                label="Minimum Dwell",
                description="Dwell used for nodes whose execution time is 0",
                default=1.0,
                group="timing",
                min_value=0,
            ),
            ConfigField(
                name="max_steps",
                field_type=FieldType.INTEGER,
                label="Step Ceiling",
                description="Stop after this many cursor moves (empty = unlimited)",
                default=None,
                group="safety",
                min_value=1,
            ),
        ]
