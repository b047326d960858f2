"""
ID生成器模块

提供分布式唯一ID生成功能，基于Snowflake算法，以及用于日志关联等场景的短随机ID。

Snowflake ID由以下部分组成（从高位到低位）：
- 41位时间戳（自2021-07-01T00:00:00Z起的毫秒数）
- 5位机器ID
- 12位序列号

同一进程内的所有生成器实例共享同一份时间戳与序列号状态，
因此同一毫秒内最多生成4096个ID，用尽后自旋等待下一毫秒。
"""

import datetime
import random
import string
import threading
import time
from typing import Callable, Optional, Union

from pydantic import BaseModel

from utilkit.core.config import get_settings
from utilkit.core.exceptions import (
    ClockRegressionError,
    InvalidMachineIdError,
    TimestampOverflowError,
    ValidationError,
)
from utilkit.core.logging import get_logger

logger = get_logger(__name__)

# 2021-07-01T00:00:00Z 的毫秒时间戳
EPOCH = 1625097600000

# 位长度常量
TIMESTAMP_BITS = 41
MACHINE_ID_BITS = 5
SEQUENCE_BITS = 12

# 最大值
MAX_TIMESTAMP = (1 << TIMESTAMP_BITS) - 1
MAX_MACHINE_ID = (1 << MACHINE_ID_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1

# 位移量
MACHINE_ID_SHIFT = SEQUENCE_BITS
TIMESTAMP_SHIFT = SEQUENCE_BITS + MACHINE_ID_BITS

UNIQUE_ID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE36_DIGITS = string.digits + string.ascii_lowercase


def current_millis() -> int:
    """
    获取当前时间戳（毫秒）

    Returns:
        int: 当前Unix时间戳
    """
    return time.time_ns() // 1_000_000


def to_base36(value: int) -> str:
    """将非负整数转换为小写36进制字符串"""
    if value < 0:
        return "-" + to_base36(-value)
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


class GeneratorState:
    """
    进程级生成器状态

    保存最近一次发号的时间戳偏移和序列号，所有读改写都必须持有lock。
    """

    def __init__(self) -> None:
        self.last_timestamp = -1
        self.sequence = 0
        self.lock = threading.Lock()


# 同一进程内所有生成器共享的状态
_process_state = GeneratorState()


class SnowflakeParts(BaseModel):
    """Snowflake ID解码结果"""

    timestamp: int
    machine_id: int
    sequence: int

    @property
    def unix_millis(self) -> int:
        """Unix毫秒时间戳"""
        return self.timestamp + EPOCH

    @property
    def created_at(self) -> datetime.datetime:
        """ID生成时间（UTC）"""
        return datetime.datetime.fromtimestamp(
            self.unix_millis / 1000, tz=datetime.timezone.utc
        )


def decode_snowflake_id(value: Union[str, int]) -> SnowflakeParts:
    """
    解析Snowflake ID的各组成部分

    Args:
        value: 十进制字符串或整数形式的ID

    Returns:
        SnowflakeParts: 时间戳偏移、机器ID和序列号
    """
    try:
        snowflake_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"无效的Snowflake ID: {value!r}")
    if snowflake_id < 0:
        raise ValidationError(f"无效的Snowflake ID: {value!r}")

    return SnowflakeParts(
        timestamp=snowflake_id >> TIMESTAMP_SHIFT,
        machine_id=(snowflake_id >> MACHINE_ID_SHIFT) & MAX_MACHINE_ID,
        sequence=snowflake_id & MAX_SEQUENCE,
    )


class SnowflakeGenerator:
    """
    Snowflake ID生成器

    每台机器（进程）创建一个实例并复用。多个实例默认共享进程级状态，
    这是进程内唯一性的前提；跨进程的唯一性只依赖于各进程使用不同的机器ID。
    """

    def __init__(
        self,
        machine_id: int,
        clock: Optional[Callable[[], int]] = None,
        state: Optional[GeneratorState] = None,
    ):
        """
        初始化Snowflake生成器

        Args:
            machine_id: 机器ID (0-31)
            clock: 返回当前Unix毫秒时间戳的函数，默认为系统时钟
            state: 时间戳与序列号状态，默认为进程级共享状态

        Raises:
            InvalidMachineIdError: 机器ID不是整数或超出范围
        """
        if (
            isinstance(machine_id, bool)
            or not isinstance(machine_id, int)
            or machine_id < 0
            or machine_id > MAX_MACHINE_ID
        ):
            raise InvalidMachineIdError(machine_id, MAX_MACHINE_ID)

        self._machine_id = machine_id
        self._clock = clock or current_millis
        self._state = state or _process_state

    @property
    def machine_id(self) -> int:
        return self._machine_id

    def _get_timestamp(self) -> int:
        timestamp = self._clock() - EPOCH
        if timestamp < 0 or timestamp > MAX_TIMESTAMP:
            raise TimestampOverflowError(timestamp, MAX_TIMESTAMP)
        return timestamp

    def _next_millis(self, last_timestamp: int) -> int:
        """
        自旋等待直到时钟越过上一次的时间戳

        Args:
            last_timestamp: 上一次的时间戳偏移

        Returns:
            int: 新的时间戳偏移
        """
        timestamp = self._get_timestamp()
        while timestamp <= last_timestamp:
            timestamp = self._get_timestamp()
        return timestamp

    def next_id(self) -> int:
        """
        生成下一个ID

        Returns:
            int: 生成的唯一ID

        Raises:
            ClockRegressionError: 当前时间早于上次生成ID的时间
        """
        state = self._state
        with state.lock:
            timestamp = self._get_timestamp()

            # 时钟回拨检查，失败时不修改状态
            if timestamp < state.last_timestamp:
                logger.warning(
                    f"检测到时钟回拨，上次时间戳: {state.last_timestamp}，当前时间戳: {timestamp}"
                )
                raise ClockRegressionError(state.last_timestamp, timestamp)

            if timestamp == state.last_timestamp:
                sequence = (state.sequence + 1) & MAX_SEQUENCE
                # 同一毫秒内序列号用尽，等待下一毫秒
                if sequence == 0:
                    logger.debug(f"序列号用尽，等待时间戳越过 {state.last_timestamp}")
                    timestamp = self._next_millis(state.last_timestamp)
            else:
                sequence = 0

            state.last_timestamp = timestamp
            state.sequence = sequence

        return (
            (timestamp << TIMESTAMP_SHIFT)
            | (self._machine_id << MACHINE_ID_SHIFT)
            | sequence
        )

    def get_snowflake_id(self) -> str:
        """
        生成Snowflake ID

        Returns:
            str: 十进制字符串形式的ID
        """
        return str(self.next_id())

    def get_unique_id(self, length: int = 4, include_timestamp: bool = True) -> str:
        """
        生成短随机ID，不保证唯一

        Args:
            length: 随机部分的长度
            include_timestamp: 是否以36进制的当前时间戳作为前缀

        Returns:
            str: 随机ID
        """
        prefix = to_base36(self._clock()) if include_timestamp else ""
        return prefix + "".join(random.choices(UNIQUE_ID_ALPHABET, k=max(length, 0)))


_default_generator: Optional[SnowflakeGenerator] = None
_default_lock = threading.Lock()


def get_default_generator() -> SnowflakeGenerator:
    """
    获取使用配置中机器ID的进程级生成器

    Returns:
        SnowflakeGenerator: 生成器实例
    """
    global _default_generator
    with _default_lock:
        if _default_generator is None:
            machine_id = get_settings().id.machine_id
            _default_generator = SnowflakeGenerator(machine_id)
            logger.debug(f"已创建默认ID生成器，机器ID: {machine_id}")
        return _default_generator
