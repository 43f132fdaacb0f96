"""数値計算の設定を管理するモジュール"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from ..core import PhaseSpaceGrid


def load_config_safely(
    config_dict: Optional[Dict[str, Any]], defaults: Dict[str, Any]
) -> Dict[str, Any]:
    """デフォルト値に入力値を上書きした辞書を返す

    Raises:
        ValueError: 未知のキーが含まれる場合
    """
    config_dict = dict(config_dict or {})
    unknown = set(config_dict) - set(defaults)
    if unknown:
        raise ValueError(f"未知の設定項目です: {sorted(unknown)}")
    merged = dict(defaults)
    merged.update(config_dict)
    return merged


class _DictConfig:
    """辞書との相互変換を提供する設定クラスの共通部分"""

    def validate(self) -> None:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        """設定を辞書形式にシリアライズ"""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]):
        """辞書から設定を復元して検証"""
        defaults = {f.name: f.default for f in fields(cls)}
        config = cls(**load_config_safely(config_dict, defaults))
        config.validate()
        return config


@dataclass
class DepartureConfig(_DictConfig):
    """出発点ソルバーの設定

    Attributes:
        implicit: 陰的（中点の不動点反復）スキームを使うかどうか
        tolerance: 陰的反復の収束判定の許容誤差（残差二乗和）
        max_iterations: 陰的反復の最大反復回数
        strict: 非収束時に例外を送出するかどうか
        extrapolate: 中点の有効場の補間で領域外を線形外挿するかどうか
        extrapolate_filling: 占有関数の補間で領域外を線形外挿するかどうか
    """

    implicit: bool = False
    tolerance: float = 1.0e-10
    max_iterations: int = 100
    strict: bool = False
    extrapolate: bool = True
    extrapolate_filling: bool = False

    def validate(self) -> None:
        """設定値の妥当性を検証"""
        if not isinstance(self.implicit, bool):
            raise ValueError("implicitは真偽値である必要があります")
        if self.tolerance <= 0:
            raise ValueError("toleranceは正の値である必要があります")
        if not isinstance(self.max_iterations, int) or self.max_iterations <= 0:
            raise ValueError("max_iterationsは正の整数である必要があります")


@dataclass
class DressingConfig(_DictConfig):
    """ドレッシングの設定

    Attributes:
        degeneracy_threshold: 有効速度計算で許容する |(p')^dr| の下限
        condition_limit: 線形方程式の条件数の上限（Noneの場合は 1/機械イプシロン）
    """

    degeneracy_threshold: float = 1.0e-12
    condition_limit: Optional[float] = None

    def validate(self) -> None:
        if self.degeneracy_threshold < 0:
            raise ValueError("degeneracy_thresholdは非負である必要があります")
        if self.condition_limit is not None and self.condition_limit <= 1:
            raise ValueError("condition_limitは1より大きい必要があります")


@dataclass
class CorrelatorConfig(_DictConfig):
    """局所相関関数の設定

    Attributes:
        n: 相関関数の次数
    """

    n: int = 2

    def validate(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n <= 0:
            raise ValueError("nは正の整数である必要があります")


@dataclass
class GridConfig(_DictConfig):
    """位相空間グリッドの設定"""

    x_min: float = -1.0
    x_max: float = 1.0
    n_x: int = 32
    r_min: float = -5.0
    r_max: float = 5.0
    n_r: int = 64
    n_types: int = 1

    def validate(self) -> None:
        if self.n_x <= 0 or self.n_r <= 0 or self.n_types <= 0:
            raise ValueError("グリッド数は正の整数である必要があります")
        if self.n_x > 1 and self.x_max <= self.x_min:
            raise ValueError("x_maxはx_minより大きい必要があります")
        if self.n_r > 1 and self.r_max <= self.r_min:
            raise ValueError("r_maxはr_minより大きい必要があります")

    def build(self) -> PhaseSpaceGrid:
        """PhaseSpaceGridを生成"""
        self.validate()
        return PhaseSpaceGrid.uniform(
            self.x_min,
            self.x_max,
            self.n_x,
            self.r_min,
            self.r_max,
            self.n_r,
            self.n_types,
        )
