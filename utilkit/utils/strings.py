"""
字符串处理模块

提供URL查询参数、颜色代码、Base64、哈希等字符串工具函数。
"""

import base64
import binascii
import hashlib
import re
from typing import Any, Dict, List, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from utilkit.core.exceptions import ValidationError

DEFAULT_IMAGE_URL = "https://via.placeholder.com/500"

_URL_PATTERN = re.compile(
    r"^(https?://)"
    r"((\d{1,3}\.){3}\d{1,3}|([\w-]+\.)+\w+)"
    r"(:(?P<port>\d+))?"
    r"(/[\w\- ./?%&=#]*)?$"
)
_COLOR_CODE_PATTERN = re.compile(r"#([0-9A-Fa-f]{3}){1,2}")


def get_query_params(url: str) -> Dict[str, str]:
    """
    解析URL中的查询参数

    Args:
        url: URL字符串

    Returns:
        Dict[str, str]: 查询参数，重复的键取最后一个值

    Raises:
        ValidationError: URL缺少协议或主机
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValidationError(f"无效的URL: {url}")
    return dict(parse_qsl(parts.query, keep_blank_values=True))


def is_valid_url(url: str) -> bool:
    """
    校验URL是否为有效的http/https地址

    主机可以是域名或IPv4地址，端口（如有）必须在1到65535之间。
    """
    if not isinstance(url, str):
        return False
    match = _URL_PATTERN.match(url)
    if not match:
        return False
    port = match.group("port")
    if port is not None:
        return 1 <= int(port) <= 65535
    return True


def update_query_param(url: str, key: str, value: str) -> str:
    """
    更新或添加URL查询参数

    键已存在时替换第一个值并移除其余同名参数，否则追加到末尾。

    Args:
        url: URL字符串
        key: 参数名
        value: 参数值

    Returns:
        str: 更新后的URL；输入不是有效URL时原样返回
    """
    if not is_valid_url(url):
        return url

    parts = urlsplit(url)
    params: List[Tuple[str, str]] = []
    replaced = False
    for name, current in parse_qsl(parts.query, keep_blank_values=True):
        if name != key:
            params.append((name, current))
        elif not replaced:
            params.append((name, value))
            replaced = True
    if not replaced:
        params.append((key, value))

    return urlunsplit(parts._replace(query=urlencode(params)))


def is_valid_color_code(value: Any) -> bool:
    """判断是否为#rgb或#rrggbb格式的十六进制颜色代码"""
    return isinstance(value, str) and _COLOR_CODE_PATTERN.fullmatch(value) is not None


def encode_base64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def decode_base64(value: str) -> str:
    """
    解码Base64字符串

    Raises:
        ValidationError: 输入不是有效的Base64或解码结果不是UTF-8文本
    """
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValidationError(f"无效的Base64字符串: {e}")


def sha256_hex(message: str) -> str:
    return hashlib.sha256(message.encode("utf-8")).hexdigest()


def has_data(value: Any) -> bool:
    """
    判断值是否有数据

    None、空白字符串以及字符串"null"/"undefined"视为无数据，其余值均视为有数据。
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() not in ("", "null", "undefined")
    return True


def contain_app_chars(value: str) -> bool:
    """判断字符串是否包含保留字符 ':'"""
    return ":" in value


def get_image_url(value: Any = None, placeholder: str = DEFAULT_IMAGE_URL) -> str:
    """有图片地址时返回该地址，否则返回占位图地址"""
    if has_data(value):
        return value
    return placeholder
