"""
IP查询模块

通过 ipwho.is 查询IP地址的地理位置、运营商等信息。
"""

from typing import Any, Dict, Optional

import httpx

from utilkit.core.logging import get_logger

logger = get_logger(__name__)

IP_LOOKUP_URL = "https://ipwho.is/{ip}"
DEFAULT_TIMEOUT = 10.0


def get_ip_details(ip: str, client: Optional[httpx.Client] = None) -> Dict[str, Any]:
    """
    查询IP地址详情

    Args:
        ip: IP地址
        client: httpx客户端，未指定时临时创建

    Returns:
        Dict[str, Any]: 接口返回的JSON数据

    Raises:
        httpx.HTTPError: 请求失败或返回错误状态码
    """
    if client is None:
        with httpx.Client(timeout=DEFAULT_TIMEOUT) as own_client:
            return get_ip_details(ip, own_client)

    response = client.get(IP_LOOKUP_URL.format(ip=ip))
    response.raise_for_status()
    logger.debug(f"已查询IP详情: {ip}")
    return response.json()


async def get_ip_details_async(
    ip: str, client: Optional[httpx.AsyncClient] = None
) -> Dict[str, Any]:
    """查询IP地址详情（异步）"""
    if client is None:
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as own_client:
            return await get_ip_details_async(ip, own_client)

    response = await client.get(IP_LOOKUP_URL.format(ip=ip))
    response.raise_for_status()
    logger.debug(f"已查询IP详情: {ip}")
    return response.json()
