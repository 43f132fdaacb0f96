"""一般化流体力学（GHD）伝播コアパッケージ

このパッケージは、可積分量子気体の占有関数を位相空間グリッド上で
時間発展させるための数値コアを提供します。

主な特徴:
- 線形積分方程式によるドレッシング
- 有効速度・有効加速度の計算
- セミラグランジュ法による出発点の計算
- 局所相関関数の計算
"""

import jax

# 直接行列解法との比較のため倍精度を使用
jax.config.update("jax_enable_x64", True)

from .core import (  # noqa: E402
    PhaseSpaceGrid,
    PhaseSpaceField,
    KernelTensor,
    Couplings,
    CouplingOrder,
    GHDError,
    SingularSystemError,
    DivisionDegeneracyError,
    NonConvergenceError,
    NonConvergenceWarning,
)
from .physics import IntegrableModel, LiebLinigerModel, compute_charges  # noqa: E402
from .numerics import (  # noqa: E402
    DressingSolver,
    EffectiveFieldComputer,
    interp_phase_space,
)
from .solvers import (  # noqa: E402
    DeparturePointSolver,
    DeparturePoints,
    AdvectionSolver,
)
from .correlators import CorrelatorEngine, find_m_sequences  # noqa: E402

__all__ = [
    "PhaseSpaceGrid",
    "PhaseSpaceField",
    "KernelTensor",
    "Couplings",
    "CouplingOrder",
    "GHDError",
    "SingularSystemError",
    "DivisionDegeneracyError",
    "NonConvergenceError",
    "NonConvergenceWarning",
    "IntegrableModel",
    "LiebLinigerModel",
    "compute_charges",
    "DressingSolver",
    "EffectiveFieldComputer",
    "interp_phase_space",
    "DeparturePointSolver",
    "DeparturePoints",
    "AdvectionSolver",
    "CorrelatorEngine",
    "find_m_sequences",
]

__version__ = "0.1.0"
