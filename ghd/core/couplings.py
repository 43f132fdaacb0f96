"""結合定数テーブルを定義するモジュール

結合定数は (微分の次数, スロット) で索引付けされる時間・位置依存のスカラー関数です。
スロット1は化学ポテンシャル型、スロット2は相互作用強度型の結合です。
各要素は Optional で、None は「その項の寄与なし」を表します。
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple

import numpy as np

CouplingFunction = Callable[[float, np.ndarray], object]

CHEMICAL_POTENTIAL = 1
INTERACTION = 2
SLOTS = (CHEMICAL_POTENTIAL, INTERACTION)


class CouplingOrder(IntEnum):
    """結合定数テーブルの行（微分の次数）"""

    VALUE = 0
    TIME_DERIVATIVE = 1
    SPACE_DERIVATIVE = 2


CouplingKey = Tuple[CouplingOrder, int]


@dataclass(frozen=True)
class Couplings:
    """結合定数テーブル

    求解中は不変です。求解の間で丸ごと置き換える場合は replace_entries を使います。
    """

    table: Dict[CouplingKey, Optional[CouplingFunction]] = field(default_factory=dict)

    def __post_init__(self):
        normalized = {}
        for (order, slot), func in dict(self.table).items():
            order = CouplingOrder(order)
            if slot not in SLOTS:
                raise ValueError(f"未対応の結合スロットです: {slot}")
            if func is not None and not callable(func):
                raise TypeError(f"結合定数 {order.name}[{slot}] は (t, x) の関数である必要があります")
            normalized[(order, slot)] = func
        object.__setattr__(self, "table", normalized)

    @classmethod
    def from_functions(
        cls,
        mu: Optional[CouplingFunction] = None,
        c: Optional[CouplingFunction] = None,
        dmu_dt: Optional[CouplingFunction] = None,
        dc_dt: Optional[CouplingFunction] = None,
        dmu_dx: Optional[CouplingFunction] = None,
        dc_dx: Optional[CouplingFunction] = None,
    ) -> "Couplings":
        """化学ポテンシャルと相互作用の関数からテーブルを生成"""
        return cls(
            {
                (CouplingOrder.VALUE, CHEMICAL_POTENTIAL): mu,
                (CouplingOrder.VALUE, INTERACTION): c,
                (CouplingOrder.TIME_DERIVATIVE, CHEMICAL_POTENTIAL): dmu_dt,
                (CouplingOrder.TIME_DERIVATIVE, INTERACTION): dc_dt,
                (CouplingOrder.SPACE_DERIVATIVE, CHEMICAL_POTENTIAL): dmu_dx,
                (CouplingOrder.SPACE_DERIVATIVE, INTERACTION): dc_dx,
            }
        )

    @classmethod
    def from_constants(cls, mu: float = 0.0, c: float = 1.0) -> "Couplings":
        """定数の結合（一様系）を生成"""
        return cls.from_functions(mu=lambda t, x: mu, c=lambda t, x: c)

    def get(self, order: CouplingOrder, slot: int) -> Optional[CouplingFunction]:
        """要素を取得（存在しない場合は None）"""
        return self.table.get((CouplingOrder(order), slot))

    def has(self, order: CouplingOrder, slot: int) -> bool:
        return self.get(order, slot) is not None

    def require(self, order: CouplingOrder, slot: int) -> CouplingFunction:
        """要素を取得（存在しない場合は KeyError）"""
        func = self.get(order, slot)
        if func is None:
            raise KeyError(
                f"結合定数 {CouplingOrder(order).name}[{slot}] が定義されていません"
            )
        return func

    def evaluate(
        self, order: CouplingOrder, slot: int, t: float, x: np.ndarray
    ) -> Optional[np.ndarray]:
        """(t, x) で評価（存在しない場合は None）"""
        func = self.get(order, slot)
        if func is None:
            return None
        return np.asarray(func(t, x), dtype=float)

    @property
    def is_homogeneous(self) -> bool:
        """位置微分の要素がすべて存在しない場合に True"""
        return not any(
            self.has(CouplingOrder.SPACE_DERIVATIVE, slot) for slot in SLOTS
        )

    def replace_entries(self, **kwargs) -> "Couplings":
        """from_functions と同じキーワードで要素を差し替えた新しいテーブルを返す"""
        names = {
            "mu": (CouplingOrder.VALUE, CHEMICAL_POTENTIAL),
            "c": (CouplingOrder.VALUE, INTERACTION),
            "dmu_dt": (CouplingOrder.TIME_DERIVATIVE, CHEMICAL_POTENTIAL),
            "dc_dt": (CouplingOrder.TIME_DERIVATIVE, INTERACTION),
            "dmu_dx": (CouplingOrder.SPACE_DERIVATIVE, CHEMICAL_POTENTIAL),
            "dc_dx": (CouplingOrder.SPACE_DERIVATIVE, INTERACTION),
        }
        table = dict(self.table)
        for name, func in kwargs.items():
            if name not in names:
                raise ValueError(f"未対応の結合定数名です: {name}")
            table[names[name]] = func
        return replace(self, table=table)
