"""数値計算パッケージ

ドレッシング、有効速度、位相空間補間、位置ごとの稠密線形方程式の解法を提供します。
"""

from .linear import solve_per_position, identity_minus, to_system, from_system
from .dressing import DressingSolver
from .velocities import EffectiveFieldComputer
from .interpolation import interp_phase_space

__all__ = [
    "solve_per_position",
    "identity_minus",
    "to_system",
    "from_system",
    "DressingSolver",
    "EffectiveFieldComputer",
    "interp_phase_space",
]
