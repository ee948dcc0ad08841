"""
运行时安装器接口

安装器负责下载、编译并把运行时组件放到解析好的目录中。
打包流程只关心它成功与否。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..utils.logging import info, success, LogStage
from ..utils.paths import ensure_directory
from ..utils.process import CommandError, run_command
from .build_context import InstallError
from .paths import ResolvedPaths


class InstallTarget(str, Enum):
    """可构建的运行时组件"""
    SUPPORT_BINARIES = "support_binaries"
    EXTENSION = "extension"
    NGINX = "nginx"


# 固定的构建顺序
ALL_TARGETS = (InstallTarget.SUPPORT_BINARIES, InstallTarget.EXTENSION, InstallTarget.NGINX)


@dataclass(frozen=True)
class InstallOptions:
    """安装选项"""
    nginx_version: str
    nginx_tarball: Optional[Path] = None
    download_binaries: bool = False


def target_dir(target: InstallTarget, paths: ResolvedPaths) -> Path:
    return {
        InstallTarget.SUPPORT_BINARIES: paths.support_dir,
        InstallTarget.EXTENSION: paths.ext_dir,
        InstallTarget.NGINX: paths.server_dir,
    }[target]


def ordered_targets(targets: Iterable[InstallTarget]) -> List[InstallTarget]:
    requested = set(targets)
    return [target for target in ALL_TARGETS if target in requested]


class RuntimeInstaller(ABC):
    """安装器抽象基类"""

    @abstractmethod
    def install(self, targets: Iterable[InstallTarget], paths: ResolvedPaths, options: InstallOptions) -> None:
        """构建并安装指定组件

        Raises:
            InstallError: 构建、下载或编译失败
        """
        pass


class CommandRuntimeInstaller(RuntimeInstaller):
    """通过外部命令构建组件的安装器

    每个组件调用一次命令，组件和目录信息通过环境变量传递。
    """

    def __init__(self, command: List[str], env: Optional[Dict[str, str]] = None):
        if not command:
            raise ValueError("安装器命令不能为空")
        self.command = list(command)
        self.env = dict(env or {})

    def build_env(self, target: InstallTarget, paths: ResolvedPaths, options: InstallOptions) -> Dict[str, str]:
        env = dict(self.env)
        env.update({
            "RTPACK_TARGET": target.value,
            "RTPACK_TARGET_DIR": str(target_dir(target, paths)),
            "RTPACK_SUPPORT_DIR": str(paths.support_dir),
            "RTPACK_EXT_DIR": str(paths.ext_dir),
            "RTPACK_NGINX_DIR": str(paths.server_dir),
            "RTPACK_NGINX_VERSION": options.nginx_version,
            "RTPACK_NGINX_TARBALL": str(options.nginx_tarball) if options.nginx_tarball else "",
            "RTPACK_DOWNLOAD_BINARIES": "1" if options.download_binaries else "0",
        })
        return env

    def install(self, targets: Iterable[InstallTarget], paths: ResolvedPaths, options: InstallOptions) -> None:
        for target in ordered_targets(targets):
            directory = target_dir(target, paths)
            info(f"构建组件 {target.value} -> {directory}", stage=LogStage.INSTALL)
            try:
                ensure_directory(directory)
            except OSError as e:
                raise InstallError(f"无法创建目录 {directory}: {e}") from e

            try:
                run_command(self.command, env=self.build_env(target, paths, options))
            except CommandError as e:
                raise InstallError(f"组件 {target.value} 构建失败: {e}") from e

            success(f"组件 {target.value} 构建完成", stage=LogStage.INSTALL)
