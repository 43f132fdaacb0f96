"""ログフォーマッタを提供するモジュール"""

import copy
import datetime
import logging
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)


class DefaultFormatter(logging.Formatter):
    """タイムスタンプ、ログレベル、メッセージを含む標準フォーマッタ"""

    def __init__(self, fmt: Optional[str] = None):
        super().__init__(fmt or DEFAULT_FORMAT)


class DetailedFormatter(logging.Formatter):
    """ファイル名と行番号を含み、ミリ秒まで時刻を表示するフォーマッタ"""

    def __init__(self, fmt: Optional[str] = None):
        super().__init__(fmt or DETAILED_FORMAT)

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        ct = datetime.datetime.fromtimestamp(record.created)
        if datefmt:
            return ct.strftime(datefmt)
        return ct.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


class ColoredFormatter(logging.Formatter):
    """ログレベルに応じてレベル名を色付けするフォーマッタ"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: Optional[str] = None, use_color: bool = True):
        super().__init__(fmt or DEFAULT_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)

        # 他のハンドラに色付きのレベル名が漏れないよう複製を書き換える
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)
