"""
路径工具

提供路径处理相关的工具函数。
"""

import os
from pathlib import Path
from typing import Union


def expand_path(path: Union[str, Path]) -> Path:
    """扩展路径（处理环境变量和用户目录）并转换为绝对路径

    Args:
        path: 原始路径

    Returns:
        Path: 扩展后的绝对路径
    """
    if isinstance(path, str):
        path = os.path.expandvars(path)
        path = os.path.expanduser(path)

    return Path(path).absolute()


def ensure_directory(path: Union[str, Path]) -> Path:
    """确保目录存在

    Args:
        path: 目录路径

    Returns:
        Path: 目录路径
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def format_size(size_bytes: int) -> str:
    """格式化文件大小

    Args:
        size_bytes: 字节数

    Returns:
        str: 格式化的大小字符串
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    return f"{size:.1f} {units[unit_index]}"


def is_safe_path_component(name: str) -> bool:
    """检查字符串能否作为单级目录名使用

    版本号和兼容性标识会被直接拼接进目录名，
    不允许出现路径分隔符或上级目录引用。
    """
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return len(name) <= 255
