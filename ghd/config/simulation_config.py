"""シミュレーション設定を管理するモジュール

このモジュールは、YAMLフォーマットの設定ファイルを読み込み、
適切な設定クラスのインスタンスに変換する機能を提供します。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..logger import LogConfig
from .numerical import CorrelatorConfig, DepartureConfig, DressingConfig, GridConfig


@dataclass
class SimulationConfig:
    """シミュレーション全体の設定"""

    grid: GridConfig = field(default_factory=GridConfig)
    departure: DepartureConfig = field(default_factory=DepartureConfig)
    dressing: DressingConfig = field(default_factory=DressingConfig)
    correlator: CorrelatorConfig = field(default_factory=CorrelatorConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> None:
        """全セクションの妥当性を検証"""
        self.grid.validate()
        self.departure.validate()
        self.dressing.validate()
        self.correlator.validate()
        self.logging.validate()

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SimulationConfig":
        """辞書から設定を生成"""
        config_dict = dict(config_dict or {})
        sections = {"grid", "departure", "dressing", "correlator", "logging"}
        unknown = set(config_dict) - sections
        if unknown:
            raise ValueError(f"未知の設定セクションです: {sorted(unknown)}")

        config = cls(
            grid=GridConfig.from_dict(config_dict.get("grid")),
            departure=DepartureConfig.from_dict(config_dict.get("departure")),
            dressing=DressingConfig.from_dict(config_dict.get("dressing")),
            correlator=CorrelatorConfig.from_dict(config_dict.get("correlator")),
            logging=LogConfig.from_dict(config_dict.get("logging")),
        )
        config.validate()
        return config

    @classmethod
    def from_yaml(cls, config_file: Union[str, Path]) -> "SimulationConfig":
        """YAMLファイルから設定を読み込む

        Raises:
            FileNotFoundError: 設定ファイルが存在しない場合
            ValueError: YAMLの解析に失敗した場合
        """
        config_file = Path(config_file)
        if not config_file.exists():
            raise FileNotFoundError(f"設定ファイルが見つかりません: {config_file}")

        with open(config_file, "r", encoding="utf-8") as f:
            try:
                config_dict = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"設定ファイルの解析に失敗しました: {e}") from e

        if config_dict is not None and not isinstance(config_dict, dict):
            raise ValueError("設定ファイルの最上位は辞書である必要があります")
        return cls.from_dict(config_dict or {})

    def to_dict(self) -> Dict[str, Any]:
        """設定を辞書形式にシリアライズ"""
        return {
            "grid": self.grid.to_dict(),
            "departure": self.departure.to_dict(),
            "dressing": self.dressing.to_dict(),
            "correlator": self.correlator.to_dict(),
            "logging": self.logging.to_dict(),
        }

    def save(self, path: Union[str, Path]) -> None:
        """設定をYAMLファイルに保存"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, allow_unicode=True, sort_keys=False)
