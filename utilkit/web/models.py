"""
API模型模块

定义响应辅助函数使用的统一JSON响应结构。
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_SUCCESS_MESSAGE = "The operation has been completed successfully."


class JsonResponseBody(BaseModel):
    """
    统一JSON响应模型

    instance 用于请求追踪，包含项目名称、Snowflake ID、短随机ID和生成时间。
    """

    success: bool = Field(default=True, description="请求是否成功")
    message: str = Field(default=DEFAULT_SUCCESS_MESSAGE, description="响应消息")
    instance: str = Field(default="", description="响应实例标识")
    data: Optional[Any] = Field(default=None, description="响应数据，为None时不返回")

    def to_content(self) -> dict:
        """转换为响应内容，data为None时省略该字段，data内部的None值保留"""
        content = self.model_dump()
        if content["data"] is None:
            content.pop("data")
        return content
