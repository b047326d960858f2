"""
日志管理模块

使用loguru库实现统一的日志管理，标准库logging的输出同样转交给loguru处理。
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from utilkit.core.config import LogConfig

# 需要转交给loguru的第三方日志器前缀
INTERCEPTED_LOGGERS = ("uvicorn", "fastapi", "httpx", "urllib3", "utilkit")


class InterceptHandler(logging.Handler):
    """
    拦截标准库logging的日志，转发给loguru处理
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 找到调用发起的位置
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """
    设置日志系统

    Args:
        config: 日志配置，未指定时使用默认配置
    """
    config = config or LogConfig()

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.root.manager.loggerDict):
        if name.startswith(INTERCEPTED_LOGGERS):
            log = logging.getLogger(name)
            log.handlers = [InterceptHandler()]
            log.propagate = False

    logger.configure(
        handlers=[
            {
                "sink": sys.stderr,
                "level": config.level.value,
                "format": config.format,
            }
        ]
    )

    if config.file_path:
        log_file_path = Path(config.file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file_path,
            level=config.level.value,
            format=config.format,
            rotation=config.rotation,
            retention=config.retention,
            compression=config.compression,
            serialize=config.serialize,
        )

    logger.info(f"日志系统已初始化，级别: {config.level.value}")


def get_logger(name: str = "utilkit"):
    """
    获取指定名称的日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        logger: loguru日志记录器
    """
    return logger.bind(name=name)
