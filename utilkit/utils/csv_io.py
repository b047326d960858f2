"""
CSV处理模块

提供CSV文件与字典列表之间的相互转换。
"""

import csv
import io
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from utilkit.core.config import get_settings
from utilkit.core.logging import get_logger
from utilkit.utils.id_generator import SnowflakeGenerator, get_default_generator

logger = get_logger(__name__)


def build_export_file_path(
    name: str,
    suffix: str,
    export_path: Optional[Union[str, Path]] = None,
    generator: Optional[SnowflakeGenerator] = None,
) -> Path:
    """
    生成导出文件路径，文件名为 <NAME>_<Snowflake ID><suffix>

    Args:
        name: 文件基础名称
        suffix: 文件扩展名，如 ".csv"
        export_path: 导出目录，默认使用配置中的导出目录
        generator: ID生成器，默认使用进程级生成器

    Returns:
        Path: 导出文件路径，目录已确保存在
    """
    directory = Path(export_path or get_settings().export.export_path)
    directory.mkdir(parents=True, exist_ok=True)
    generator = generator or get_default_generator()
    return directory / f"{name.upper()}_{generator.get_snowflake_id()}{suffix}"


def csv_to_json(csv_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    读取CSV文件并转换为字典列表

    第一行作为表头，空行会被跳过，缺少的列值为None。

    Args:
        csv_path: CSV文件路径

    Returns:
        List[Dict[str, Any]]: 每行一个字典
    """
    with open(csv_path, "r", encoding="utf-8", newline="") as f:
        return [dict(row) for row in csv.DictReader(f)]


def dumps_csv(rows: List[Dict[str, Any]]) -> str:
    """
    将字典列表序列化为CSV文本

    表头取自第一行的键，值中包含引号、逗号或换行时加引号转义。
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(header) for header in headers])
    return output.getvalue().rstrip("\n")


def json_to_csv(
    rows: List[Dict[str, Any]],
    name: str,
    export_path: Optional[Union[str, Path]] = None,
    generator: Optional[SnowflakeGenerator] = None,
) -> str:
    """
    将字典列表导出为CSV文件

    Args:
        rows: 字典列表
        name: 文件基础名称
        export_path: 导出目录，默认使用配置中的导出目录
        generator: 用于生成文件名的ID生成器

    Returns:
        str: 导出文件路径；数据为空时返回空字符串
    """
    if not rows:
        return ""

    file_path = build_export_file_path(name, ".csv", export_path, generator)
    file_path.write_text(dumps_csv(rows), encoding="utf-8")
    logger.info(f"已导出CSV文件: {file_path}，共 {len(rows)} 行")
    return str(file_path)
