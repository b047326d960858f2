"""
上传文件公共模块

提供上传文件的校验、读取和存储路径计算。
"""

import hashlib
import os
from typing import List, Mapping, NamedTuple, Optional

from fastapi import UploadFile

from utilkit.core.exceptions import FileUploadError

DEFAULT_UPLOAD_KEY = "img"
ALLOWED_EXTENSIONS = [".png", ".jpg", ".jpeg"]


class UploadedContent(NamedTuple):
    """读取后的上传文件内容"""

    data: bytes
    md5: str
    extension: str

    @property
    def file_name(self) -> str:
        """以内容MD5命名的文件名"""
        return f"{self.md5}{self.extension}"


def validate_upload(
    files: Optional[Mapping[str, UploadFile]],
    key: Optional[str] = None,
    allowed_extensions: Optional[List[str]] = None,
) -> UploadFile:
    """
    从上传文件集合中取出指定文件并校验扩展名

    Args:
        files: 字段名到上传文件的映射
        key: 文件字段名，默认为"img"
        allowed_extensions: 允许的扩展名列表（小写，带点）

    Returns:
        UploadFile: 通过校验的上传文件

    Raises:
        FileUploadError: 未提供文件或格式不受支持
    """
    key = key or DEFAULT_UPLOAD_KEY
    if not files:
        raise FileUploadError("请提供图片文件")

    upload = files.get(key)
    if upload is None or not upload.filename:
        raise FileUploadError(f"未提供 {key} 对应的文件")

    extension = os.path.splitext(upload.filename)[1].lower()
    if extension not in (allowed_extensions or ALLOWED_EXTENSIONS):
        raise FileUploadError(
            "不支持的文件格式", details={"extension": extension, "filename": upload.filename}
        )
    return upload


async def read_upload(upload: UploadFile) -> UploadedContent:
    """
    读取上传文件内容并计算MD5

    Args:
        upload: 上传文件

    Returns:
        UploadedContent: 文件内容、MD5和小写扩展名
    """
    data = await upload.read()
    extension = os.path.splitext(upload.filename or "")[1].lower()
    return UploadedContent(data, hashlib.md5(data).hexdigest(), extension)


def build_object_path(stage_dir: str, path_to_upload: str, file_name: str) -> str:
    """
    拼接 <live|test>/<上传路径>/<文件名> 形式的相对路径

    Args:
        stage_dir: live或test
        path_to_upload: 业务上传路径
        file_name: 文件名

    Returns:
        str: 以"/"分隔的相对路径
    """
    parts = [stage_dir, path_to_upload.strip("/"), file_name]
    return "/".join(part for part in parts if part)
