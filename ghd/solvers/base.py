"""ソルバーの基底クラスを提供するモジュール

このモジュールは、出発点ソルバーや移流ソルバーに共通の
収束判定パラメータ・計時・診断情報の扱いを定義します。
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional


class Solver(ABC):
    """ソルバーの基底クラス

    収束判定のパラメータと、直近の求解での反復回数・残差履歴・経過時間を保持します。
    """

    def __init__(
        self,
        name: str,
        tolerance: float = 1e-10,
        max_iterations: int = 100,
        logger=None,
    ):
        """
        Args:
            name: ソルバーの名前
            tolerance: 収束判定の許容誤差
            max_iterations: 最大反復回数
            logger: ロガー（オプション）
        """
        self.name = name
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self._iteration_count = 0
        self._residual_history: List[float] = []
        self._start_time: Optional[datetime] = None
        self._end_time: Optional[datetime] = None
        self._logger = logger

    @property
    def tolerance(self) -> float:
        """反復の収束判定に使う許容誤差"""
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float):
        """許容誤差を設定（正の値のみ）"""
        if value <= 0:
            raise ValueError("許容誤差は正の値である必要があります")
        self._tolerance = value

    @property
    def max_iterations(self) -> int:
        """反復の上限回数"""
        return self._max_iterations

    @max_iterations.setter
    def max_iterations(self, value: int):
        """最大反復回数を設定（正の整数のみ）"""
        if value <= 0:
            raise ValueError("最大反復回数は正の整数である必要があります")
        self._max_iterations = value

    @property
    def iteration_count(self) -> int:
        """直近の求解での反復回数"""
        return self._iteration_count

    @property
    def residual_history(self) -> List[float]:
        """直近の求解での残差の履歴"""
        return self._residual_history.copy()

    @property
    def elapsed_time(self) -> Optional[float]:
        """計算経過時間（秒）"""
        if self._start_time is None:
            return None
        end_time = self._end_time or datetime.now()
        return (end_time - self._start_time).total_seconds()

    @abstractmethod
    def solve(self, *args, **kwargs):
        """ソルバーを実行"""
        pass

    def reset(self):
        """診断情報をリセット"""
        self._iteration_count = 0
        self._residual_history = []
        self._start_time = None
        self._end_time = None

    def _start_solving(self):
        """求解開始時に診断情報をリセットして計時を開始"""
        self.reset()
        self._start_time = datetime.now()
        if self._logger:
            self._logger.debug(f"{self.name}ソルバーの計算を開始")

    def _end_solving(self):
        """求解終了時に計時を止める"""
        self._end_time = datetime.now()
        if self._logger:
            self._logger.debug(
                f"{self.name}ソルバーの計算を終了 (経過時間: {self.elapsed_time:.3f}秒)"
            )

    def get_status(self) -> Dict[str, Any]:
        """ソルバーの現在の状態を取得"""
        return {
            "name": self.name,
            "iteration_count": self.iteration_count,
            "residual": self._residual_history[-1] if self._residual_history else None,
            "elapsed_time": self.elapsed_time,
        }

    def __str__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name}, "
            f"tolerance={self.tolerance:g}, max_iterations={self.max_iterations})"
        )
