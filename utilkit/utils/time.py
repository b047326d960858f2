"""
时间处理模块

提供日期的格式化、解析、校验和推算功能，以及JSON时间编码器。
"""

import calendar
import datetime
import json
import re
import warnings
from typing import Any, List, Optional, Union

from utilkit.core.logging import get_logger

logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# strptime允许省略前导零，严格校验时先匹配形状
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


class JSONTimeEncoder(json.JSONEncoder):
    """
    JSON时间编码器

    扩展JSON编码器，支持datetime和date类型的序列化。
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return format_datetime(obj)
        return super().default(obj)


def format_datetime(
    dt: Union[datetime.datetime, datetime.date],
    format_str: Optional[str] = None,
) -> str:
    """
    格式化日期时间

    Args:
        dt: 日期时间对象
        format_str: 格式化字符串，默认为ISO 8601格式

    Returns:
        str: 格式化后的字符串
    """
    if format_str:
        return dt.strftime(format_str)

    if isinstance(dt, (datetime.datetime, datetime.date)):
        return dt.isoformat()
    raise TypeError(f"不支持的类型: {type(dt)}")


def parse_datetime(
    dt_str: str,
    format_str: Optional[str] = None,
    as_date: bool = False,
) -> Union[datetime.datetime, datetime.date]:
    """
    解析日期时间字符串

    Args:
        dt_str: 日期时间字符串
        format_str: 格式化字符串，如果为None则尝试自动解析
        as_date: 是否返回日期对象而不是日期时间对象

    Returns:
        Union[datetime.datetime, datetime.date]: 解析后的日期时间对象
    """
    if format_str:
        dt = datetime.datetime.strptime(dt_str, format_str)
    else:
        try:
            dt = datetime.datetime.fromisoformat(dt_str)
        except ValueError:
            formats = [
                "%Y-%m-%d %H:%M:%S",
                "%Y-%m-%d %H:%M",
                "%Y-%m-%d",
                "%Y/%m/%d %H:%M:%S",
                "%Y/%m/%d %H:%M",
                "%Y/%m/%d",
                "%d/%m/%Y %H:%M:%S",
                "%d/%m/%Y %H:%M",
                "%d/%m/%Y",
            ]
            for fmt in formats:
                try:
                    dt = datetime.datetime.strptime(dt_str, fmt)
                    break
                except ValueError:
                    continue
            else:
                raise ValueError(f"无法解析日期时间字符串: {dt_str}")

    if as_date:
        return dt.date()
    return dt


def _to_date(value: Union[str, datetime.date]) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return parse_datetime(value, as_date=True)  # type: ignore[return-value]


def _add_months(value: datetime.date, months: int) -> datetime.date:
    """按月推算日期，日期超出目标月份天数时取该月最后一天"""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def have_same_year(
    start: Union[str, datetime.date], end: Union[str, datetime.date]
) -> bool:
    """
    判断两个日期是否位于同一年

    Args:
        start: 开始日期
        end: 结束日期

    Returns:
        bool: 同一年返回True
    """
    return _to_date(start).year == _to_date(end).year


def get_months_between(
    start: Union[str, datetime.date],
    end: Union[str, datetime.date],
    as_name: bool = False,
) -> List[str]:
    """
    获取两个日期之间（含两端）经过的月份

    从开始日期起逐月推进，直到超过结束日期为止。

    Args:
        start: 开始日期
        end: 结束日期
        as_name: 为True时返回英文月份全名，否则返回月份数字字符串

    Returns:
        List[str]: 去重后的月份列表，如 ["1", "2", "3"]

    Raises:
        ValueError: 开始日期晚于结束日期
    """
    start_date = _to_date(start)
    end_date = _to_date(end)
    if start_date > end_date:
        raise ValueError("开始日期必须早于结束日期")

    months: List[str] = []
    step = 0
    current = start_date
    while current <= end_date:
        identifier = MONTH_NAMES[current.month - 1] if as_name else str(current.month)
        if identifier not in months:
            months.append(identifier)
        step += 1
        current = _add_months(start_date, step)
    return months


def change_month_and_day(
    date_str: str, new_month: int, new_day: Optional[int] = None
) -> str:
    """
    修改日期的月份和（可选的）日

    Args:
        date_str: ISO格式日期字符串（YYYY-MM-DD）
        new_month: 新月份（1-12）
        new_day: 新的日，未指定时保留原日期（超出新月份天数时取月末）

    Returns:
        str: 修改后的ISO日期；new_day对新月份无效时返回原字符串
    """
    if not 1 <= new_month <= 12:
        raise ValueError(f"无效的月份: {new_month}")

    original = _to_date(date_str)
    days_in_month = calendar.monthrange(original.year, new_month)[1]

    if new_day is None:
        day = min(original.day, days_in_month)
    elif 0 < new_day <= days_in_month:
        day = new_day
    else:
        logger.error(f"日期 {new_day} 对 {new_month} 月无效")
        return date_str

    return original.replace(month=new_month, day=day).isoformat()


def _matches_format(value: Any, pattern: "re.Pattern[str]", format_str: str) -> bool:
    if not isinstance(value, str) or not pattern.match(value):
        return False
    try:
        datetime.datetime.strptime(value, format_str)
    except ValueError:
        return False
    return True


def is_valid_date(value: Any) -> bool:
    """判断值是否为严格的YYYY-MM-DD日期"""
    return _matches_format(value, _DATE_PATTERN, DATE_FORMAT)


def is_valid_datetime(value: Any) -> bool:
    """判断值是否为严格的YYYY-MM-DD HH:MM:SS日期时间"""
    return _matches_format(value, _DATETIME_PATTERN, DATETIME_FORMAT)


def adjust_date_by_days(
    dt: Union[datetime.datetime, datetime.date],
    day_count: int = 1,
    subtract: bool = False,
) -> Union[datetime.datetime, datetime.date]:
    """
    按天数推算日期

    Args:
        dt: 原日期
        day_count: 天数
        subtract: 为True时向前推算

    Returns:
        推算后的新日期对象
    """
    delta = datetime.timedelta(days=day_count)
    return dt - delta if subtract else dt + delta


def add_one_day(date_str: str) -> datetime.datetime:
    """
    日期加一天

    已弃用，请使用 adjust_date_by_days()。
    """
    warnings.warn(
        "add_one_day() 已弃用，请使用 adjust_date_by_days()",
        DeprecationWarning,
        stacklevel=2,
    )
    dt = parse_datetime(date_str)
    return dt + datetime.timedelta(days=1)  # type: ignore[return-value]


def json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    使用时间编码器将对象序列化为JSON字符串

    Args:
        obj: 要序列化的对象
        **kwargs: 传递给json.dumps的其他参数

    Returns:
        str: JSON字符串
    """
    return json.dumps(obj, cls=JSONTimeEncoder, **kwargs)


def json_loads(s: str, **kwargs: Any) -> Any:
    """将JSON字符串反序列化为对象"""
    return json.loads(s, **kwargs)
