"""
Excel处理模块

提供Excel文件的导入和导出功能。
"""

import io
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import openpyxl
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from utilkit.core.exceptions import ValidationError
from utilkit.core.logging import get_logger
from utilkit.utils.csv_io import build_export_file_path
from utilkit.utils.id_generator import SnowflakeGenerator

logger = get_logger(__name__)

# 工作表名称最长31个字符，且不能包含 []:*?/\
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")
MAX_SHEET_TITLE_LENGTH = 31


def sheet_title(name: str) -> str:
    """将任意名称转换为合法的工作表名称"""
    title = _INVALID_TITLE_CHARS.sub("_", name).strip()[:MAX_SHEET_TITLE_LENGTH]
    return title or "Sheet1"


def collect_headers(data: List[Dict[str, Any]]) -> Dict[str, str]:
    """按首次出现的顺序收集所有行的键作为表头"""
    headers: Dict[str, str] = {}
    for item in data:
        for key in item.keys():
            headers.setdefault(key, key)
    return headers


class ExcelExporter:
    """
    Excel导出工具类

    将数据导出为Excel文件。
    """

    def __init__(
        self,
        header_font: Optional[Dict[str, Any]] = None,
        header_alignment: Optional[Dict[str, Any]] = None,
        cell_alignment: Optional[Dict[str, Any]] = None,
    ):
        """
        初始化Excel导出器

        Args:
            header_font: 表头字体样式
            header_alignment: 表头对齐方式
            cell_alignment: 单元格对齐方式
        """
        self.header_font = header_font or {
            "name": "Arial",
            "size": 12,
            "bold": True,
        }
        self.header_alignment = header_alignment or {
            "horizontal": "center",
            "vertical": "center",
        }
        self.cell_alignment = cell_alignment or {
            "horizontal": "left",
            "vertical": "center",
        }

    def export_dicts(
        self,
        data: List[Dict[str, Any]],
        headers: Optional[Dict[str, str]] = None,
        sheet_name: str = "Sheet1",
    ) -> bytes:
        """
        导出字典列表为Excel

        Args:
            data: 字典列表
            headers: 表头映射，键为字典键，值为表头显示名；未指定时使用所有行的键
            sheet_name: 工作表名称

        Returns:
            bytes: Excel文件的二进制数据
        """
        if not data:
            return self._create_empty_workbook(sheet_name)

        headers = headers or collect_headers(data)

        wb = Workbook()
        ws = self._prepare_sheet(wb, sheet_name)

        # 写入表头
        for col_idx, field in enumerate(headers.keys(), start=1):
            cell = ws.cell(row=1, column=col_idx, value=headers[field])
            cell.font = Font(**self.header_font)
            cell.alignment = Alignment(**self.header_alignment)

        # 写入数据
        for row_idx, item in enumerate(data, start=2):
            for col_idx, field in enumerate(headers.keys(), start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=item.get(field))
                cell.alignment = Alignment(**self.cell_alignment)

        for col_idx in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = 20

        output = io.BytesIO()
        wb.save(output)
        return output.getvalue()

    def _prepare_sheet(self, wb: Workbook, sheet_name: str) -> Worksheet:
        ws = wb.active
        if ws is None:
            return wb.create_sheet(title=sheet_title(sheet_name))
        ws.title = sheet_title(sheet_name)
        return ws

    def _create_empty_workbook(self, sheet_name: str = "Sheet1") -> bytes:
        wb = Workbook()
        self._prepare_sheet(wb, sheet_name)

        output = io.BytesIO()
        wb.save(output)
        return output.getvalue()


class ExcelImporter:
    """
    Excel导入工具类

    从Excel文件导入数据。
    """

    def __init__(self, skip_empty_rows: bool = True):
        """
        初始化Excel导入器

        Args:
            skip_empty_rows: 是否跳过空行
        """
        self.skip_empty_rows = skip_empty_rows

    def import_to_dicts(
        self,
        excel_data: Union[bytes, str, Path],
        field_mapping: Optional[Dict[str, str]] = None,
        sheet_name: Optional[str] = None,
        has_header: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        从Excel导入数据到字典列表

        Args:
            excel_data: Excel文件数据或文件路径
            field_mapping: 字段映射，键为字典键，值为Excel表头
            sheet_name: 工作表名称，如果为None则使用第一个工作表
            has_header: 是否有表头行

        Returns:
            List[Dict[str, Any]]: 字典列表
        """
        ws = self._load_worksheet(excel_data, sheet_name)

        rows = list(ws.rows)
        if not rows:
            return []

        if has_header:
            headers = [cell.value for cell in rows[0]]
            data_rows = rows[1:]
        else:
            # 如果没有表头，使用列索引作为键
            headers = [f"column_{i}" for i in range(len(rows[0]))]
            data_rows = rows

        if field_mapping:
            reverse_mapping = {v: k for k, v in field_mapping.items()}
            headers = [reverse_mapping.get(h, h) for h in headers]

        result = []
        for row in data_rows:
            row_data = {}
            is_empty = True

            for i, cell in enumerate(row):
                if i < len(headers) and headers[i] is not None:
                    value = cell.value
                    if value is not None:
                        is_empty = False
                    row_data[headers[i]] = value

            if not is_empty or not self.skip_empty_rows:
                result.append(row_data)

        return result

    def _load_worksheet(
        self, excel_data: Union[bytes, str, Path], sheet_name: Optional[str]
    ) -> Worksheet:
        if isinstance(excel_data, bytes):
            wb = openpyxl.load_workbook(io.BytesIO(excel_data), data_only=True)
        else:
            wb = openpyxl.load_workbook(excel_data, data_only=True)

        if sheet_name:
            if sheet_name not in wb.sheetnames:
                raise ValidationError(f"工作表 '{sheet_name}' 不存在")
            return wb[sheet_name]

        if not wb.sheetnames:
            raise ValidationError("Excel文件中没有工作表")
        return wb.worksheets[0]


def json_to_excel(
    rows: List[Dict[str, Any]],
    file_name: str,
    export_path: Optional[Union[str, Path]] = None,
    generator: Optional[SnowflakeGenerator] = None,
) -> str:
    """
    将字典列表导出为Excel文件

    文件名为 <FILE_NAME>_<Snowflake ID>.xlsx，工作表以file_name命名。

    Args:
        rows: 字典列表
        file_name: 文件基础名称
        export_path: 导出目录，默认使用配置中的导出目录
        generator: 用于生成文件名的ID生成器

    Returns:
        str: 导出文件路径
    """
    file_path = build_export_file_path(file_name, ".xlsx", export_path, generator)
    file_path.write_bytes(ExcelExporter().export_dicts(rows, sheet_name=file_name))
    logger.info(f"已导出Excel文件: {file_path}，共 {len(rows)} 行")
    return str(file_path)


def excel_to_json(file_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    读取Excel文件第一个工作表并转换为字典列表

    空单元格不会出现在结果字典中。

    Args:
        file_path: Excel文件路径

    Returns:
        List[Dict[str, Any]]: 每行一个字典
    """
    rows = ExcelImporter().import_to_dicts(file_path)
    return [{key: value for key, value in row.items() if value is not None} for row in rows]
