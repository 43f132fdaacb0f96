"""ロギング設定を管理するモジュール"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

VALID_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class LogConfig:
    """ロギング設定

    ライブラリとして使う場合を想定し、ファイル出力はデフォルトで無効です。

    Attributes:
        level: 基本ログレベル
        log_dir: ログファイル出力ディレクトリ
        file_logging: ファイルハンドラの設定
        console_logging: コンソールハンドラの設定
        buffer_capacity: メモリ上に保持するログの件数
    """

    level: str = "info"
    log_dir: Path = Path("logs")
    file_logging: Dict[str, Any] = field(
        default_factory=lambda: {
            "enabled": False,
            "filename": "ghd.log",
            "level": "debug",
            "max_bytes": 10_000_000,
            "backup_count": 5,
        }
    )
    console_logging: Dict[str, Any] = field(
        default_factory=lambda: {"enabled": True, "level": "info", "color": False}
    )
    buffer_capacity: int = 1000

    def __post_init__(self):
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

    def validate(self) -> None:
        """設定の妥当性を検証

        Raises:
            ValueError: 無効な設定値が検出された場合
        """
        for level in (
            self.level,
            self.file_logging.get("level", "info"),
            self.console_logging.get("level", "info"),
        ):
            if str(level).lower() not in VALID_LEVELS:
                raise ValueError(f"無効なログレベルです: {level}")
        if self.buffer_capacity <= 0:
            raise ValueError("buffer_capacityは正の整数である必要があります")

    def get_file_path(self, filename: Optional[str] = None) -> Path:
        """ログファイルのパスを取得"""
        return self.log_dir / (filename or self.file_logging["filename"])

    def create_directories(self) -> None:
        """ファイル出力が有効な場合にディレクトリを作成"""
        if self.file_logging.get("enabled", False):
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "log_dir": str(self.log_dir),
            "file_logging": dict(self.file_logging),
            "console_logging": dict(self.console_logging),
            "buffer_capacity": self.buffer_capacity,
        }

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> "LogConfig":
        """辞書から設定を生成（ハンドラ設定はデフォルトに上書き）"""
        config_dict = dict(config_dict or {})
        config = cls()
        unknown = set(config_dict) - set(config.to_dict())
        if unknown:
            raise ValueError(f"未知のロギング設定項目です: {sorted(unknown)}")
        config.level = config_dict.get("level", config.level)
        config.log_dir = Path(config_dict.get("log_dir", config.log_dir))
        config.file_logging.update(config_dict.get("file_logging") or {})
        config.console_logging.update(config_dict.get("console_logging") or {})
        config.buffer_capacity = config_dict.get("buffer_capacity", config.buffer_capacity)
        config.validate()
        return config
