"""
命令共用的辅助函数

负责把设置文件、命令行参数和兼容性探测合并为 PackagingRequest。
"""

from pathlib import Path
from typing import Optional, Tuple

from rich.console import Console
from rich.markup import escape

from ...config import (
    ConfigError,
    ConfigValidationError,
    PackagingRequest,
    RtpackSettings,
    DEFAULT_DESTINATION,
    load_settings,
)
from ...platform import CompatibilityIds
from ...utils.paths import expand_path


def resolve_destination(directory: Optional[str]) -> Path:
    """未指定目录时使用当前目录下的 passenger-standalone"""
    return expand_path(directory if directory else DEFAULT_DESTINATION)


def build_request(
    directory: Optional[str],
    config: Optional[str],
    nginx_version: Optional[str] = None,
    nginx_tarball: Optional[str] = None,
) -> Tuple[RtpackSettings, PackagingRequest]:
    """加载设置并构建打包请求

    Raises:
        ConfigError: 设置文件、参数或兼容性探测出错
    """
    settings = load_settings(config)

    if nginx_tarball is not None:
        nginx_tarball = str(expand_path(nginx_tarball))

    compat = CompatibilityIds.detect(settings.compat)

    try:
        request = PackagingRequest.from_settings(
            settings,
            destination_root=resolve_destination(directory),
            cxx_compat_id=compat.cxx_id,
            ext_compat_id=compat.ext_id,
            nginx_version=nginx_version,
            nginx_tarball=nginx_tarball,
        )
    except ValueError as e:
        # pydantic.ValidationError 是 ValueError 的子类
        errors = list(e.errors()) if hasattr(e, "errors") else [{'loc': [], 'msg': str(e)}]
        raise ConfigValidationError("参数验证失败", errors) from e

    # 命令行和设置文件中的源码包都在修改文件系统之前检查
    tarball_path = request.server_tarball_path
    if tarball_path is not None and not tarball_path.is_file():
        raise ConfigError(f"Nginx 源码包不存在: {tarball_path}")

    return settings, request


def print_config_error(console: Console, e: ConfigError) -> None:
    if isinstance(e, ConfigValidationError):
        console.print(f"[red]{e}:[/red]")
        console.print(e.format_errors(), markup=False)
    else:
        console.print(f"[red]配置错误[/red]: {escape(str(e))}")
