"""ログハンドラを提供するモジュール"""

import logging
import logging.handlers
from collections import deque
from pathlib import Path
from typing import List, Optional

from .formatters import ColoredFormatter, DefaultFormatter


class FileLogHandler(logging.handlers.RotatingFileHandler):
    """ローテーション付きファイルログハンドラ"""

    def __init__(
        self,
        filename: Path,
        formatter: Optional[logging.Formatter] = None,
        max_bytes: int = 10_000_000,
        backup_count: int = 5,
        encoding: str = "utf-8",
        level: str = "INFO",
    ):
        """
        Args:
            filename: ログファイルのパス
            formatter: ログフォーマッタ
            max_bytes: 1ファイルの最大サイズ（バイト）
            backup_count: 保持する過去ログの数
            encoding: ファイルのエンコーディング
            level: ログレベル
        """
        super().__init__(
            filename=str(filename),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding=encoding,
        )
        self.setFormatter(formatter or DefaultFormatter())
        self.setLevel(getattr(logging, level.upper()))


class ConsoleLogHandler(logging.StreamHandler):
    """標準エラー出力へのログハンドラ"""

    def __init__(
        self,
        formatter: Optional[logging.Formatter] = None,
        level: str = "INFO",
        use_color: bool = False,
    ):
        super().__init__()
        if formatter is None:
            formatter = ColoredFormatter() if use_color else DefaultFormatter()
        self.setFormatter(formatter)
        self.setLevel(getattr(logging, level.upper()))


class BufferedLogHandler(logging.Handler):
    """直近のログメッセージをメモリ上に保持するハンドラ"""

    def __init__(self, capacity: int = 1000):
        super().__init__()
        self.capacity = capacity
        self.buffer = deque(maxlen=capacity)
        self.setFormatter(DefaultFormatter())

    def emit(self, record: logging.LogRecord):
        self.buffer.append(self.format(record))

    def get_logs(self) -> List[str]:
        """バッファ内のログを取得"""
        return list(self.buffer)

    def clear(self):
        """バッファをクリア"""
        self.buffer.clear()
