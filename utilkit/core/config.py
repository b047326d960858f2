"""
配置管理模块

提供从多种来源加载配置的功能，支持配置文件（YAML/JSON）、环境变量和.env文件，
并按照优先级加载配置。
"""

import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# 定义类型变量用于泛型函数
T = TypeVar("T", bound="BaseSettings")

# 机器ID占用的位数，与ID生成器保持一致
MACHINE_ID_BITS = 5


def locate_config_file(
    file_name: str, explicit_path: Optional[str] = None
) -> Optional[Path]:
    """
    按照优先级定位配置文件路径

    Args:
        file_name: 配置文件名
        explicit_path: 显式指定的配置文件路径

    Returns:
        Optional[Path]: 配置文件路径，如果未找到则返回None
    """
    paths_to_check = []

    # 1. 显式指定的路径
    if explicit_path:
        paths_to_check.append(Path(explicit_path))

    # 2. 当前工作目录
    paths_to_check.append(Path.cwd() / file_name)

    # 3. 应用程序运行目录
    app_dir = Path(sys.argv[0]).parent.absolute()
    paths_to_check.append(app_dir / file_name)

    # 4. 用户主目录下的.utilkit目录
    paths_to_check.append(Path.home() / ".utilkit" / file_name)

    for path in paths_to_check:
        if path.exists() and path.is_file():
            return path

    return None


def load_yaml_config(file_path: Path) -> Dict[str, Any]:
    """
    加载YAML配置文件

    Args:
        file_path: 配置文件路径

    Returns:
        Dict[str, Any]: 配置字典
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"解析YAML配置文件失败: {e}")
            return {}


def load_json_config(file_path: Path) -> Dict[str, Any]:
    """
    加载JSON配置文件

    Args:
        file_path: 配置文件路径

    Returns:
        Dict[str, Any]: 配置字典
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"解析JSON配置文件失败: {e}")
            return {}


def load_config_from_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    从配置文件加载配置

    显式指定的路径按扩展名选择解析方式；否则依次查找config.yaml和config.json。

    Args:
        config_path: 配置文件路径，如果未指定则按优先级自动查找

    Returns:
        Dict[str, Any]: 配置字典
    """
    if config_path and Path(config_path).suffix == ".json":
        json_path = locate_config_file("config.json", config_path)
        if json_path:
            logger.info(f"已从 {json_path} 加载JSON配置")
            return load_json_config(json_path)

    yaml_path = locate_config_file("config.yaml", config_path)
    if yaml_path:
        logger.info(f"已从 {yaml_path} 加载YAML配置")
        return load_yaml_config(yaml_path)

    json_path = locate_config_file("config.json")
    if json_path:
        logger.info(f"已从 {json_path} 加载JSON配置")
        return load_json_config(json_path)

    logger.warning("未找到配置文件，将使用环境变量和默认值")
    return {}


class LogLevel(str, Enum):
    """日志级别枚举"""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogConfig(BaseModel):
    """日志配置"""

    level: LogLevel = LogLevel.INFO
    format: str = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    file_path: Optional[str] = None
    rotation: str = "20 MB"
    retention: str = "1 week"
    compression: str = "zip"
    serialize: bool = False


class AppConfig(BaseModel):
    """应用配置"""

    name: str = "utilkit"
    debug: bool = False


class IdConfig(BaseModel):
    """ID生成器配置"""

    machine_id: int = 1

    @field_validator("machine_id")
    @classmethod
    def check_machine_id(cls, value: int) -> int:
        max_machine_id = (1 << MACHINE_ID_BITS) - 1
        if value < 0 or value > max_machine_id:
            raise ValueError(f"machine_id必须在0到{max_machine_id}之间")
        return value


class ExportConfig(BaseModel):
    """导出文件配置"""

    export_path: str = "exports"


class UploadConfig(BaseModel):
    """文件上传配置"""

    public_dir: str = "public"
    live: bool = False
    allowed_extensions: List[str] = [".png", ".jpg", ".jpeg"]

    @property
    def stage_dir(self) -> str:
        """根据运行环境返回live或test目录"""
        return "live" if self.live else "test"


class MinioConfig(BaseModel):
    """Minio配置"""

    endpoint: str
    access_key: str
    secret_key: str
    secure: bool = True
    region: Optional[str] = None
    default_bucket: str = "default"
    base_url: Optional[str] = None

    def get_endpoint_url(self) -> str:
        """获取完整的端点URL"""
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint}"


class Settings(BaseSettings):
    """应用设置"""

    app: AppConfig = Field(default_factory=AppConfig)
    id: IdConfig = Field(default_factory=IdConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    minio: Optional[MinioConfig] = None
    log: LogConfig = Field(default_factory=LogConfig)

    model_config = {
        "env_prefix": "UTILKIT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    @property
    def is_debug(self) -> bool:
        """是否为调试模式"""
        return self.app.debug


def load_settings(
    settings_class: Type[T] = Settings,  # type: ignore[assignment]
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> T:
    """
    加载应用设置，按照优先级从配置文件、.env文件和环境变量加载

    Args:
        settings_class: 设置类型，必须继承自BaseSettings
        config_path: 配置文件路径，如果未指定则按优先级自动查找
        env_file: .env文件路径，如果未指定则按优先级自动查找

    Returns:
        T: 设置实例
    """
    # 加载.env文件
    if env_file:
        env_path: Optional[Path] = Path(env_file)
        if not env_path.exists():
            env_path = None
    else:
        env_path = locate_config_file(".env")
    if env_path:
        load_dotenv(env_path)
        logger.info(f"已加载环境变量文件: {env_path}")

    config_dict = load_config_from_file(config_path)

    # 配置文件具有最高优先级，与环境变量中的配置合并后统一校验
    settings = settings_class()
    if config_dict:
        merged = settings.model_dump()
        for key, value in config_dict.items():
            if key not in merged:
                continue
            if isinstance(value, dict) and isinstance(merged[key], dict):
                merged[key].update(value)
            else:
                merged[key] = value
        settings = settings_class.model_validate(merged)

    return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    获取全局设置实例，首次调用时加载

    Returns:
        Settings: 设置实例
    """
    global _settings
    if _settings is None:
        _settings = load_settings(Settings)
    return _settings


def set_settings(settings: Optional[Settings]) -> None:
    """
    替换全局设置实例，传入None时下次访问重新加载

    Args:
        settings: 设置实例
    """
    global _settings
    _settings = settings
