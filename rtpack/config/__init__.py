"""配置和 Schema 模块

提供 YAML 设置文件的加载、验证和保存功能，以及打包请求模型。
"""

from .schema import (
    ArchiveMethod,
    PackagingRequest,
    RtpackSettings,
    DEFAULT_DESTINATION,
    DEFAULT_NGINX_VERSION,
)
from .loader import (
    ConfigLoader,
    ConfigValidationError,
    ConfigError,
    load_settings,
    validate_settings,
    save_settings,
    config_loader,
)

__all__ = [
    # 主要类
    "RtpackSettings",
    "PackagingRequest",
    "ArchiveMethod",
    "ConfigLoader",

    # 默认值
    "DEFAULT_DESTINATION",
    "DEFAULT_NGINX_VERSION",

    # 异常类
    "ConfigError",
    "ConfigValidationError",

    # 便捷函数
    "load_settings",
    "validate_settings",
    "save_settings",

    # 单例
    "config_loader",
]
