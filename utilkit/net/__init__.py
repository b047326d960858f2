"""
网络工具模块

提供IP地址信息查询功能。
"""

from utilkit.net.ip import get_ip_details, get_ip_details_async

__all__ = ["get_ip_details", "get_ip_details_async"]
