"""ソルバーパッケージ

出発点ソルバーと、それを用いた1次のBSL移流ソルバーを提供します。
"""

from .base import Solver
from .departure import DeparturePoints, DeparturePointSolver
from .advection import AdvectionSolver, PropagationResult, StepResult

__all__ = [
    "Solver",
    "DeparturePoints",
    "DeparturePointSolver",
    "AdvectionSolver",
    "PropagationResult",
    "StepResult",
]
