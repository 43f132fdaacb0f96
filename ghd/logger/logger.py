"""シミュレーション用ロガーを提供するモジュール

数値コアの各コンポーネントは logger=None を受け取り、
ロガーが与えられた場合にのみログを出力します。
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import LogConfig
from .formatters import DetailedFormatter
from .handlers import BufferedLogHandler, ConsoleLogHandler, FileLogHandler


class SimulationLogger:
    """シミュレーション用ロガークラス

    標準の logging.Logger を包み、直近のログをメモリ上に保持します。
    """

    def __init__(
        self,
        name: str = "ghd",
        config: Optional[LogConfig] = None,
        parent: Optional["SimulationLogger"] = None,
    ):
        """
        Args:
            name: ロガーの名前
            config: ロギング設定
            parent: 親ロガー（階層的ロギング用）
        """
        self.name = name
        self.config = config or LogConfig()
        self.parent = parent

        self.config.validate()
        self.config.create_directories()

        self._debug_buffer = BufferedLogHandler(self.config.buffer_capacity)
        self._logger = self._create_logger()

        if parent is None:
            self.debug(f"ロギングシステムを初期化: {name}")

    def _create_logger(self) -> logging.Logger:
        logger = logging.getLogger(self.name)
        logger.setLevel(getattr(logging, self.config.level.upper()))
        logger.handlers.clear()
        # セクションロガーの出力が親ロガーで重複しないようにする
        logger.propagate = False

        if self.config.file_logging.get("enabled", False):
            logger.addHandler(
                FileLogHandler(
                    filename=self.config.get_file_path(),
                    formatter=DetailedFormatter(),
                    max_bytes=self.config.file_logging["max_bytes"],
                    backup_count=self.config.file_logging["backup_count"],
                    level=self.config.file_logging["level"],
                )
            )

        if self.config.console_logging.get("enabled", True):
            logger.addHandler(
                ConsoleLogHandler(
                    level=self.config.console_logging["level"],
                    use_color=self.config.console_logging.get("color", False),
                )
            )

        logger.addHandler(self._debug_buffer)
        return logger

    def debug(self, msg: str, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs):
        self._logger.critical(msg, *args, **kwargs)

    def start_section(self, name: str) -> "SimulationLogger":
        """新しいログセクションを開始

        Args:
            name: セクション名

        Returns:
            セクション用の子ロガー
        """
        return SimulationLogger(f"{self.name}.{name}", self.config, self)

    def get_recent_logs(self, n: int = 100) -> list:
        """最近のログメッセージを取得"""
        return self._debug_buffer.get_logs()[-n:]

    def save_debug_info(self, path: Union[str, Path]):
        """バッファ内のログをファイルに保存"""
        path = Path(path)
        with path.open("w", encoding="utf-8") as f:
            for log in self._debug_buffer.get_logs():
                f.write(f"{log}\n")

    def log_error_with_context(
        self, msg: str, error: Exception, context: Optional[Dict[str, Any]] = None
    ):
        """エラー情報をコンテキスト付きでログ出力"""
        error_info = {
            "message": msg,
            "error_type": type(error).__name__,
            "error_msg": str(error),
            "context": context or {},
        }
        self._logger.error(f"Error occurred: {error_info}")

    def log_performance(self, section: str, elapsed: float):
        """処理時間をログ出力"""
        self._logger.info(f"Performance - {section}: {elapsed:.3f} seconds")

    def log_solver_state(self, state: Dict[str, Any], level: str = "info"):
        """ソルバーの状態をログ出力"""
        getattr(self._logger, level.lower())(f"Solver State: {state}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.log_error_with_context(
                "Error in simulation section", exc_val, {"section": self.name}
            )
        return False  # 例外を伝播させる
