"""
文件存储模块

提供上传文件到本地磁盘和兼容S3的对象存储的功能。
"""

from utilkit.storage.local import LocalFileStorage
from utilkit.storage.minio import BucketStorage
from utilkit.storage.uploads import ALLOWED_EXTENSIONS, validate_upload

__all__ = ["LocalFileStorage", "BucketStorage", "ALLOWED_EXTENSIONS", "validate_upload"]
