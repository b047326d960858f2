"""
对象存储模块

基于MinIO客户端将上传文件存入兼容S3的存储桶（MinIO、Amazon S3、DigitalOcean Spaces等）。
"""

import asyncio
import io
from concurrent.futures import ThreadPoolExecutor
from typing import List, Mapping, Optional

from fastapi import UploadFile
from minio import Minio
from minio.error import S3Error

from utilkit.core.config import MinioConfig, UploadConfig, get_settings
from utilkit.core.exceptions import ConfigurationError, FileUploadError
from utilkit.core.logging import get_logger
from utilkit.storage.uploads import build_object_path, read_upload, validate_upload

logger = get_logger(__name__)

REQUIRED_FIELDS = ("base_url", "endpoint", "access_key", "secret_key", "default_bucket")


def validate_minio_config(config: Optional[MinioConfig]) -> MinioConfig:
    """
    校验对象存储配置是否完整

    Args:
        config: 对象存储配置

    Returns:
        MinioConfig: 校验通过的配置

    Raises:
        ConfigurationError: 未配置或缺少必填项
    """
    if config is None:
        raise ConfigurationError("未配置对象存储（minio）")

    for field in REQUIRED_FIELDS:
        value = getattr(config, field)
        if value is None or not str(value).strip():
            raise ConfigurationError(f"对象存储配置缺少 {field}", details={"field": field})
    return config


class BucketStorage:
    """对象存储

    上传的对象键为 <live|test>/<上传路径>/<MD5><扩展名>，对象设置为公共可读。
    每个实例持有独立的线程池，使用完毕后需调用close()，或以with语句使用。
    """

    def __init__(
        self,
        config: Optional[MinioConfig] = None,
        upload_config: Optional[UploadConfig] = None,
        client: Optional[Minio] = None,
    ):
        """
        初始化对象存储

        Args:
            config: 对象存储配置，默认使用全局配置
            upload_config: 上传配置，默认使用全局配置
            client: 已创建的MinIO客户端，默认按配置创建
        """
        settings = None if config and upload_config else get_settings()
        self.config = validate_minio_config(config or settings.minio)  # type: ignore[union-attr]
        self.upload_config = upload_config or settings.upload  # type: ignore[union-attr]
        self.client = client
        self._executor = ThreadPoolExecutor(max_workers=4)

        logger.debug(f"创建对象存储，端点: {self.config.endpoint}")

    def connect(self) -> Minio:
        """
        连接到对象存储服务

        Returns:
            Minio: MinIO客户端
        """
        if self.client is None:
            self.client = Minio(
                endpoint=self.config.endpoint,
                access_key=self.config.access_key,
                secret_key=self.config.secret_key,
                secure=self.config.secure,
                region=self.config.region,
            )
            logger.debug("已连接到对象存储服务")
        return self.client

    def get_url(self, key: str) -> str:
        """拼接对象的公开访问地址"""
        return f"{str(self.config.base_url).rstrip('/')}/{key}"

    def put_bytes(self, key: str, data: bytes, content_type: str) -> str:
        """
        上传字节数据

        Args:
            key: 对象键
            data: 对象数据
            content_type: 内容类型

        Returns:
            str: 对象键

        Raises:
            FileUploadError: 上传失败
        """
        client = self.connect()
        try:
            client.put_object(
                bucket_name=self.config.default_bucket,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
                metadata={"x-amz-acl": "public-read"},
            )
        except S3Error as e:
            logger.error(f"上传对象失败: {e}")
            raise FileUploadError("上传文件到存储桶失败", details={"key": key})

        logger.debug(f"已上传对象: {key} 到存储桶: {self.config.default_bucket}")
        return key

    async def upload(
        self,
        files: Optional[Mapping[str, UploadFile]],
        path_to_upload: str,
        key: Optional[str] = None,
        file_types: Optional[List[str]] = None,
    ) -> str:
        """
        上传文件到存储桶

        Args:
            files: 字段名到上传文件的映射
            path_to_upload: 业务上传路径
            key: 文件字段名，默认为"img"
            file_types: 允许的扩展名，默认使用配置

        Returns:
            str: 对象键

        Raises:
            FileUploadError: 文件无效或上传失败
        """
        upload = validate_upload(
            files, key, file_types or self.upload_config.allowed_extensions
        )
        content = await read_upload(upload)
        object_key = build_object_path(
            self.upload_config.stage_dir, path_to_upload, content.file_name
        )
        content_type = f"image/{content.extension.lstrip('.')}"

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, self.put_bytes, object_key, content.data, content_type
        )

    def delete(self, key: str) -> bool:
        """
        删除对象

        Args:
            key: 对象键

        Returns:
            bool: 删除成功返回True，失败返回False
        """
        client = self.connect()
        try:
            client.remove_object(self.config.default_bucket, key)
        except S3Error as e:
            logger.error(f"删除对象失败: {e}")
            return False

        logger.debug(f"已删除对象: {key}")
        return True

    async def delete_async(self, key: str) -> bool:
        """删除对象（异步）"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.delete, key)

    def close(self) -> None:
        """释放客户端和线程池"""
        self.client = None
        self._executor.shutdown(wait=False)

    def __enter__(self) -> "BucketStorage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
