"""
数据转换模块

提供布尔值、数值和JSON数据的安全转换与比较函数。
"""

import json
import math
from typing import Any, Dict, List, Optional, Union

from utilkit.core.exceptions import ValidationError

_TRUE_STRINGS = ("true", "1")


def to_boolean_safe(value: Any) -> bool:
    """
    安全地将任意值转换为布尔值

    只有True、数值1以及字符串"true"/"1"（忽略大小写和首尾空白）视为真，其余一律为假。
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().lower() in _TRUE_STRINGS


def convert_double_to_int(num: Any) -> int:
    """
    将浮点数乘以100并四舍五入为整数，常用于以分为单位存储金额

    非数值、NaN和无穷大按0处理。

    Args:
        num: 浮点数

    Returns:
        int: 转换后的整数，如 123.456 -> 12346
    """
    try:
        value = float(num)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    # 与round()的银行家舍入不同，0.5总是向上取整
    return math.floor(value * 100 + 0.5)


def number_to_str_or_empty(number: Union[int, float]) -> str:
    """数值为0时返回空字符串，否则返回其字符串形式"""
    return "" if number == 0 else str(number)


def to_json(data: Any) -> Optional[Union[Dict[str, Any], List[Any]]]:
    """
    将JSON字符串或已解析的对象转换为Python对象

    Args:
        data: dict、list或JSON字符串

    Returns:
        解析后的对象；其它类型返回None

    Raises:
        ValidationError: 字符串不是有效的JSON
    """
    if isinstance(data, (dict, list)):
        return data
    if isinstance(data, str):
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            raise ValidationError("数据无法转换为JSON格式")
    return None


def get_unique_objects(items: List[Any]) -> List[Any]:
    """
    按JSON序列化结果去重，保留首次出现的顺序

    Args:
        items: 对象列表

    Returns:
        List[Any]: 去重后的列表
    """
    seen = set()
    result = []
    for item in items:
        key = json.dumps(item, default=str)
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result


def compare_json_objects(first: Any, second: Any) -> bool:
    """深度比较两个JSON对象是否相等"""
    if isinstance(first, dict) and isinstance(second, dict):
        if len(first) != len(second):
            return False
        return all(
            key in second and compare_json_objects(value, second[key])
            for key, value in first.items()
        )
    if isinstance(first, list) and isinstance(second, list):
        if len(first) != len(second):
            return False
        return all(compare_json_objects(a, b) for a, b in zip(first, second))
    return first == second


def has_duplicates(items: List[Any]) -> bool:
    """判断列表中是否存在重复元素"""
    try:
        return len(items) != len(set(items))
    except TypeError:
        # 不可哈希的元素逐一比较
        for index, item in enumerate(items):
            if item in items[index + 1 :]:
                return True
        return False
