"""
配置 Schema 定义

使用 Pydantic 定义 YAML 设置文件模型和打包请求模型。
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .. import __version__
from ..utils.paths import is_safe_path_component

DEFAULT_NGINX_VERSION = "1.24.0"
DEFAULT_DESTINATION = "passenger-standalone"


def _validate_name_component(value: str, what: str) -> str:
    """版本号、兼容性标识会被拼接进目录名，必须是合法的单级目录名"""
    value = value.strip()
    if not is_safe_path_component(value):
        raise ValueError(f"{what}不能作为目录名的一部分: {value!r}")
    return value


class ArchiveMethod(str, Enum):
    """归档方式枚举"""
    SHELL = "shell"
    TARFILE = "tarfile"


class ConfigModel(BaseModel):
    """配置元信息模型"""
    version: int = Field(1, description="配置 schema 版本", ge=1)

    @field_validator('version')
    @classmethod
    def validate_config_version(cls, v: int) -> int:
        SUPPORTED_VERSIONS = [1]
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(f"不支持的配置版本 {v}，支持的版本: {SUPPORTED_VERSIONS}")
        return v


class RuntimeModel(BaseModel):
    """运行时信息模型"""
    version: str = Field(__version__, description="运行时版本号，决定输出子目录名", min_length=1)

    @field_validator('version')
    @classmethod
    def validate_version(cls, v: str) -> str:
        return _validate_name_component(v, "运行时版本号")


class NginxModel(BaseModel):
    """Nginx 构建配置模型"""
    version: str = Field(DEFAULT_NGINX_VERSION, description="作为核心使用的 Nginx 版本", min_length=1)
    tarball: Optional[Path] = Field(None, description="预先下载的 Nginx 源码包，必须与 version 匹配")

    @field_validator('version')
    @classmethod
    def validate_version(cls, v: str) -> str:
        v = _validate_name_component(v, "Nginx 版本号")
        if not re.match(r'^\d+\.\d+(\.\d+)*$', v):
            raise ValueError(f"Nginx 版本号格式不正确: {v}")
        return v


class CompatModel(BaseModel):
    """二进制兼容性标识配置

    未设置的标识在运行时自动探测。
    """
    cxx_id: Optional[str] = Field(None, description="原生二进制兼容性标识，如 x86_64-linux")
    ext_id: Optional[str] = Field(None, description="语言扩展兼容性标识，如 ruby-3.1.4-x86_64-linux")
    ruby: str = Field("ruby", description="用于探测扩展兼容性标识的 Ruby 解释器", min_length=1)

    @field_validator('cxx_id', 'ext_id')
    @classmethod
    def validate_ids(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _validate_name_component(v, "兼容性标识")


class ArchiveModel(BaseModel):
    """归档配置模型"""
    method: ArchiveMethod = Field(ArchiveMethod.SHELL, description="归档方式: shell (tar | gzip) 或 tarfile")
    gzip_level: int = Field(9, description="gzip 压缩级别", ge=1, le=9)


class InstallerModel(BaseModel):
    """外部安装器配置模型"""
    command: Optional[List[str]] = Field(None, description="构建运行时组件的外部命令（参数列表）")
    env: Dict[str, str] = Field(default_factory=dict, description="传递给安装器的额外环境变量")

    @field_validator('command')
    @classmethod
    def validate_command(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        cleaned = [part for part in v if part.strip()]
        if not cleaned:
            raise ValueError("安装器命令不能为空")
        return cleaned


class RtpackSettings(BaseModel):
    """rtpack 主配置模型

    设置文件的根模型，所有部分都是可选的。
    """

    config: ConfigModel = Field(default_factory=ConfigModel, description="配置元信息")
    runtime: RuntimeModel = Field(default_factory=RuntimeModel, description="运行时信息")
    nginx: NginxModel = Field(default_factory=NginxModel, description="Nginx 构建配置")
    compat: CompatModel = Field(default_factory=CompatModel, description="兼容性标识")
    archive: ArchiveModel = Field(default_factory=ArchiveModel, description="归档配置")
    installer: InstallerModel = Field(default_factory=InstallerModel, description="安装器配置")

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
        "str_strip_whitespace": True,
    }

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式（Path 和枚举转换为字符串）"""
        data = self.model_dump(exclude_none=True)

        def convert_values(obj):
            if isinstance(obj, dict):
                return {k: convert_values(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_values(item) for item in obj]
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, Path):
                return str(obj)
            return obj

        return convert_values(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RtpackSettings':
        return cls.model_validate(data)


class PackagingRequest(BaseModel):
    """一次打包调用的全部输入

    构建后不可修改。所有默认值（运行时版本、Nginx 版本、兼容性标识）
    都在构建时确定，路径解析和归档过程不再查询全局状态。
    """

    destination_root: Path = Field(..., description="输出根目录")
    runtime_version: str = Field(..., min_length=1)
    cxx_compat_id: str = Field(..., min_length=1)
    ext_compat_id: str = Field(..., min_length=1)
    server_version: str = Field(..., min_length=1)
    server_tarball_path: Optional[Path] = None

    model_config = {"frozen": True}

    @field_validator('runtime_version', 'cxx_compat_id', 'ext_compat_id', 'server_version')
    @classmethod
    def validate_components(cls, v: str) -> str:
        return _validate_name_component(v, "目录名组成部分")

    @model_validator(mode='after')
    def validate_destination(self) -> 'PackagingRequest':
        if not self.destination_root.is_absolute():
            raise ValueError(f"输出根目录必须是绝对路径: {self.destination_root}")
        return self

    @classmethod
    def from_settings(
        cls,
        settings: RtpackSettings,
        destination_root: Union[str, Path],
        cxx_compat_id: str,
        ext_compat_id: str,
        nginx_version: Optional[str] = None,
        nginx_tarball: Optional[Union[str, Path]] = None,
    ) -> 'PackagingRequest':
        """合并命令行参数与设置文件，命令行优先"""
        tarball = nginx_tarball if nginx_tarball is not None else settings.nginx.tarball
        return cls(
            destination_root=Path(destination_root),
            runtime_version=settings.runtime.version,
            cxx_compat_id=cxx_compat_id,
            ext_compat_id=ext_compat_id,
            server_version=nginx_version or settings.nginx.version,
            server_tarball_path=Path(tarball) if tarball is not None else None,
        )
