"""
异常处理器模块

将库中的异常转换为统一格式的JSON错误响应。
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from utilkit.core.exceptions import AppException
from utilkit.core.logging import get_logger
from utilkit.web.responses import error_response

logger = get_logger(__name__)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    处理应用异常

    Args:
        request: 请求对象
        exc: 异常对象

    Returns:
        JSONResponse: JSON响应
    """
    logger.warning(f"{request.method} {request.url.path} 请求失败: [{exc.code}] {exc.message}")
    return error_response(exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """处理未捕获的异常"""
    logger.exception(f"{request.method} {request.url.path} 出现未捕获的异常")
    return error_response(exc)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    设置异常处理器

    Args:
        app: FastAPI应用实例
    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
