"""設定パッケージ

このパッケージは、数値コアとシミュレーションの設定を管理するためのクラスを提供します。
"""

from .numerical import (
    CorrelatorConfig,
    DepartureConfig,
    DressingConfig,
    GridConfig,
    load_config_safely,
)
from .simulation_config import SimulationConfig

__all__ = [
    "SimulationConfig",
    "GridConfig",
    "DepartureConfig",
    "DressingConfig",
    "CorrelatorConfig",
    "load_config_safely",
]
