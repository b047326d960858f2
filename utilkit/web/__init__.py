"""
Web模块 (Web Module)
===================

提供FastAPI应用中构造统一JSON响应和错误处理的组件。

使用方法：
---------
1. 返回统一格式的响应
   ::

       from utilkit.web import to_json, error_response

       @app.get("/orders/{order_id}")
       async def get_order(order_id: str):
           order = find_order(order_id)
           if order is None:
               return error_response("订单不存在", status_code=404)
           return to_json(data=order)

2. 注册异常处理器
   ::

       from utilkit.web import setup_exception_handlers

       setup_exception_handlers(app)
"""

from utilkit.web.exception_handlers import setup_exception_handlers
from utilkit.web.models import JsonResponseBody
from utilkit.web.responses import build_instance, error_response, get_api_key, to_json

__all__ = [
    "JsonResponseBody",
    "build_instance",
    "to_json",
    "error_response",
    "get_api_key",
    "setup_exception_handlers",
]
