"""コアパッケージ

位相空間グリッド、固定ランクの場、結合定数テーブル、例外を提供します。
"""

from .grid import PhaseSpaceGrid
from .field import PhaseSpaceField, KernelTensor
from .couplings import (
    Couplings,
    CouplingOrder,
    CouplingFunction,
    CHEMICAL_POTENTIAL,
    INTERACTION,
)
from .errors import (
    GHDError,
    SingularSystemError,
    DivisionDegeneracyError,
    NonConvergenceError,
    NonConvergenceWarning,
)

__all__ = [
    "PhaseSpaceGrid",
    "PhaseSpaceField",
    "KernelTensor",
    "Couplings",
    "CouplingOrder",
    "CouplingFunction",
    "CHEMICAL_POTENTIAL",
    "INTERACTION",
    "GHDError",
    "SingularSystemError",
    "DivisionDegeneracyError",
    "NonConvergenceError",
    "NonConvergenceWarning",
]
