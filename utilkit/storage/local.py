"""
本地文件存储模块

将上传文件保存到本地公共目录，并按URL路径删除。
"""

import asyncio
from pathlib import Path
from typing import List, Mapping, Optional

from fastapi import UploadFile

from utilkit.core.config import UploadConfig, get_settings
from utilkit.core.exceptions import ConflictError, FileUploadError
from utilkit.core.logging import get_logger
from utilkit.storage.uploads import build_object_path, read_upload, validate_upload

logger = get_logger(__name__)


class LocalFileStorage:
    """本地文件存储

    文件保存在 <public_dir>/<live|test>/<上传路径>/<MD5><扩展名>，
    对外返回去掉公共目录前缀的URL路径。
    """

    def __init__(self, config: Optional[UploadConfig] = None):
        """
        初始化本地存储

        Args:
            config: 上传配置，默认使用全局配置
        """
        self.config = config or get_settings().upload
        self.public_dir = Path(self.config.public_dir)

    async def save(
        self,
        files: Optional[Mapping[str, UploadFile]],
        path_to_upload: str,
        key: Optional[str] = None,
        file_types: Optional[List[str]] = None,
    ) -> str:
        """
        保存上传文件

        Args:
            files: 字段名到上传文件的映射
            path_to_upload: 业务上传路径，如 "avatars"
            key: 文件字段名，默认为"img"
            file_types: 允许的扩展名，默认使用配置

        Returns:
            str: 文件URL路径，如 "/test/avatars/<md5>.png"

        Raises:
            FileUploadError: 未提供文件、格式不受支持或上传路径在公共目录之外
            ConflictError: 同名文件已存在
        """
        upload = validate_upload(files, key, file_types or self.config.allowed_extensions)
        content = await read_upload(upload)

        relative_path = build_object_path(
            self.config.stage_dir, path_to_upload, content.file_name
        )
        target = self._resolve(relative_path)
        if target is None:
            raise FileUploadError("上传路径无效", details={"path": path_to_upload})

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, target, content.data, relative_path)
        logger.info(f"已保存上传文件: {target}")

        return f"/{relative_path}"

    def _resolve(self, relative_path: str) -> Optional[Path]:
        """解析公共目录下的文件路径，路径落在公共目录之外时返回None"""
        target = (self.public_dir / relative_path).resolve()
        if self.public_dir.resolve() not in target.parents:
            return None
        return target

    def _write(self, target: Path, data: bytes, relative_path: str) -> None:
        if target.exists():
            raise ConflictError("上传的文件已存在，请更换文件", details={"path": relative_path})

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def delete(self, url_path: Optional[str]) -> bool:
        """
        删除URL路径对应的本地文件

        Args:
            url_path: save()返回的URL路径

        Returns:
            bool: 文件存在并已删除时返回True
        """
        if not url_path:
            return False

        # 只允许删除公共目录下的文件
        target = self._resolve(url_path.lstrip("/"))
        if target is None or not target.is_file():
            return False

        target.unlink()
        logger.info(f"已删除本地文件: {target}")
        return True
