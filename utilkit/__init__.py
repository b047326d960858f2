"""
utilkit 通用工具库

此库汇集了后端服务中常用的工具函数和组件。

主要功能：
----------
* ID生成：基于Snowflake算法的分布式唯一ID，以及短随机ID
* 日期处理：日期解析、校验、按月/按天推算
* 字符串处理：URL查询参数、颜色代码、Base64、SHA-256
* 数据转换：布尔值、金额、JSON的安全转换与比较
* 文件转换：CSV/Excel与字典列表互转
* 文件上传：本地磁盘与兼容S3的对象存储
* 响应辅助：统一格式的FastAPI JSON响应
* 统一日志：基于loguru的日志管理
* 配置管理：多源配置加载

使用方法：
----------
1. 生成Snowflake ID
   ::

       from utilkit.utils import SnowflakeGenerator

       generator = SnowflakeGenerator(machine_id=1)
       order_id = generator.get_snowflake_id()

2. 构造JSON响应
   ::

       from utilkit.web import to_json

       @app.get("/users")
       async def list_users():
           return to_json(data={"users": []})
"""

import importlib.util

# 使用importlib.util.find_spec检查_version模块是否存在
if importlib.util.find_spec("utilkit._version") is not None:
    from ._version import __version__  # type: ignore
else:
    # 如果_version.py不存在（例如在开发环境中初次克隆后），使用默认版本
    __version__ = "0.0.0.dev0"

from utilkit import core, net, storage, utils, web

__all__ = [
    "core",
    "net",
    "storage",
    "utils",
    "web",
]
