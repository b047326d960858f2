"""
响应辅助模块

提供构造统一JSON响应、错误响应以及读取API密钥的函数。
"""

import datetime
from typing import Any, Optional, Union

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from utilkit.core.config import get_settings
from utilkit.core.exceptions import AppException
from utilkit.core.logging import get_logger
from utilkit.utils.id_generator import SnowflakeGenerator, get_default_generator
from utilkit.web.models import DEFAULT_SUCCESS_MESSAGE, JsonResponseBody

logger = get_logger(__name__)

FALLBACK_ERROR_MESSAGE = "Server crashed"


def has_payload(data: Any) -> bool:
    """判断响应数据是否需要返回，空列表和空字典同样返回"""
    if isinstance(data, (list, tuple, set, dict)):
        return True
    return bool(data)


def format_long_datetime(dt: datetime.datetime) -> str:
    """格式化为 'Sunday, October 18, 2026 8:05 PM' 形式的可读时间"""
    hour = dt.hour % 12 or 12
    return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year} {hour}:{dt:%M} {dt:%p}"


def build_instance(
    app_name: Optional[str] = None,
    generator: Optional[SnowflakeGenerator] = None,
    now: Optional[datetime.datetime] = None,
) -> str:
    """
    生成响应实例标识

    Args:
        app_name: 项目名称，默认取配置中的应用名称
        generator: ID生成器，默认使用进程级生成器
        now: 当前时间，默认取本地时间

    Returns:
        str: 形如 "<项目名> ➜ <Snowflake ID>:<短ID> ➜ <时间>" 的字符串
    """
    app_name = app_name if app_name is not None else get_settings().app.name
    generator = generator or get_default_generator()
    now = now or datetime.datetime.now()
    return (
        f"{app_name} ➜ {generator.get_snowflake_id()}:{generator.get_unique_id()}"
        f" ➜ {format_long_datetime(now)}"
    )


def to_json(
    data: Any = None,
    message: str = DEFAULT_SUCCESS_MESSAGE,
    success: bool = True,
    instance: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    构造统一格式的JSON响应

    Args:
        data: 响应数据，为None、0、空字符串或False时不包含在响应中
        message: 响应消息
        success: 操作是否成功
        instance: 响应实例标识，默认自动生成
        status_code: HTTP状态码

    Returns:
        JSONResponse: JSON响应
    """
    body = JsonResponseBody(
        success=success,
        message=message,
        instance=instance if instance is not None else build_instance(),
        data=data if has_payload(data) else None,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body.to_content()))


def error_response(
    error: Union[BaseException, str],
    status_code: Optional[int] = None,
) -> JSONResponse:
    """
    构造错误响应

    AppException使用其自带的状态码，其它异常默认500，字符串默认400。

    Args:
        error: 异常对象或错误消息
        status_code: 指定的HTTP状态码

    Returns:
        JSONResponse: success为False的JSON响应
    """
    if isinstance(error, AppException):
        message = error.message
        default_status = error.status_code
    elif isinstance(error, BaseException):
        message = str(error) or FALLBACK_ERROR_MESSAGE
        default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        message = str(error)
        default_status = status.HTTP_400_BAD_REQUEST

    try:
        return to_json(
            success=False,
            message=message,
            status_code=status_code or default_status,
        )
    except AppException as e:
        # 生成实例标识失败（如时钟回拨）时仍需返回错误响应
        logger.error(f"构造错误响应失败: {e.message}")
        return to_json(
            success=False,
            message=FALLBACK_ERROR_MESSAGE,
            instance="",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def get_api_key(request: Request) -> str:
    """
    从Authorization请求头读取API密钥

    Returns:
        str: API密钥，不存在时返回空字符串
    """
    return request.headers.get("Authorization", "")
