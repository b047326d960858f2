"""
工具模块

提供各种实用工具函数和类，包括ID生成、日期处理、字符串处理、数据转换以及CSV/Excel转换。
"""

from utilkit.utils.converters import to_boolean_safe, to_json
from utilkit.utils.csv_io import csv_to_json, json_to_csv
from utilkit.utils.excel import ExcelExporter, ExcelImporter, excel_to_json, json_to_excel
from utilkit.utils.id_generator import (
    SnowflakeGenerator,
    decode_snowflake_id,
    get_default_generator,
)
from utilkit.utils.strings import is_valid_color_code, is_valid_url, update_query_param
from utilkit.utils.time import JSONTimeEncoder, format_datetime, parse_datetime

__all__ = [
    "SnowflakeGenerator",
    "decode_snowflake_id",
    "get_default_generator",
    "ExcelImporter",
    "ExcelExporter",
    "excel_to_json",
    "json_to_excel",
    "csv_to_json",
    "json_to_csv",
    "is_valid_url",
    "is_valid_color_code",
    "update_query_param",
    "to_boolean_safe",
    "to_json",
    "JSONTimeEncoder",
    "format_datetime",
    "parse_datetime",
]
