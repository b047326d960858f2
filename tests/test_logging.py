import logging
import sys

import pytest
from loguru import logger

from utilkit.core.config import LogConfig, LogLevel
from utilkit.core.logging import get_logger, setup_logging


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)
    logging.basicConfig(handlers=[], force=True)


def test_setup_logging_writes_file(tmp_path, restore_logger):
    log_file = tmp_path / "logs" / "utilkit.log"
    setup_logging(
        LogConfig(level=LogLevel.DEBUG, file_path=str(log_file), format="{level} {message}")
    )

    get_logger("tests").debug("生成ID")
    logging.getLogger("utilkit.tests").warning("来自标准库的日志")
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "DEBUG 生成ID" in content
    assert "WARNING 来自标准库的日志" in content


def test_setup_logging_respects_level(tmp_path, restore_logger):
    log_file = tmp_path / "utilkit.log"
    setup_logging(LogConfig(level=LogLevel.WARNING, file_path=str(log_file)))

    get_logger().info("不会写入")
    get_logger().error("会写入")
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "不会写入" not in content
    assert "会写入" in content
