# ihiw/core/logging_config.py

"""
애플리케이션 전역 로깅 설정 모듈입니다.

각 모듈은 `logging.getLogger(__name__)`으로 로거를 얻고,
핸들러 구성은 애플리케이션 시작 시 `configure_logging()`이 한 번만 수행합니다.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from ihiw.core.config import settings

_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    """루트 로거를 한 번만 구성합니다. (reload 시 핸들러 중복 방지)"""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    root = logging.getLogger()
    level = logging.DEBUG if settings.DEBUG_MODE else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if settings.LOG_FILE:
        file_handler = RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # SQL 출력은 DEBUG_MODE에서 엔진 echo로만 제어합니다.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
