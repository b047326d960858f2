"""
异常处理模块

定义库中使用的自定义异常类，异常携带错误代码和HTTP状态码。
"""

from typing import Any, Dict, Optional

from fastapi import status


class AppException(Exception):
    """应用基础异常类"""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        初始化异常

        Args:
            code: 错误代码
            message: 错误消息
            status_code: HTTP状态码
            details: 错误详情
        """
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppException):
    """资源不存在异常"""

    def __init__(
        self,
        message: str = "资源不存在",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class ValidationError(AppException):
    """参数验证错误异常"""

    def __init__(
        self,
        message: str = "参数验证错误",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )


class ConflictError(AppException):
    """资源冲突异常"""

    def __init__(
        self,
        message: str = "资源已存在",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code="CONFLICT",
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
        )


class ServerError(AppException):
    """服务器内部错误异常"""

    def __init__(
        self,
        message: str = "服务器内部错误",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code="SERVER_ERROR",
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class ConfigurationError(ServerError):
    """配置缺失或无效"""

    def __init__(
        self,
        message: str = "配置无效",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)
        self.code = "CONFIGURATION_ERROR"


class FileUploadError(AppException):
    """文件上传异常"""

    def __init__(
        self,
        message: str = "文件上传失败",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code="FILE_UPLOAD_ERROR",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class IdGeneratorError(AppException):
    """ID生成器异常基类"""


class InvalidMachineIdError(IdGeneratorError):
    """机器ID超出有效范围"""

    def __init__(self, machine_id: int, max_machine_id: int):
        """
        初始化异常

        Args:
            machine_id: 传入的机器ID
            max_machine_id: 允许的最大机器ID
        """
        super().__init__(
            code="INVALID_MACHINE_ID",
            message=f"机器ID必须在0到{max_machine_id}之间",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"machine_id": machine_id, "max_machine_id": max_machine_id},
        )
        self.machine_id = machine_id


class ClockRegressionError(IdGeneratorError):
    """系统时钟回拨，拒绝生成ID"""

    def __init__(self, last_timestamp: int, timestamp: int):
        """
        初始化异常

        Args:
            last_timestamp: 上次生成ID时的时间戳偏移
            timestamp: 当前时间戳偏移
        """
        super().__init__(
            code="CLOCK_REGRESSION",
            message=f"时钟回拨，拒绝生成ID，上次时间戳: {last_timestamp}，当前时间戳: {timestamp}",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"last_timestamp": last_timestamp, "timestamp": timestamp},
        )
        self.last_timestamp = last_timestamp
        self.timestamp = timestamp


class TimestampOverflowError(IdGeneratorError):
    """时间戳超出41位可表示范围"""

    def __init__(self, timestamp: int, max_timestamp: int):
        super().__init__(
            code="TIMESTAMP_OVERFLOW",
            message=f"时间戳偏移 {timestamp} 超出范围 [0, {max_timestamp}]",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"timestamp": timestamp, "max_timestamp": max_timestamp},
        )
        self.timestamp = timestamp
