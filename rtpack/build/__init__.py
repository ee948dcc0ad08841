"""打包服务模块

提供运行时打包的核心功能。
"""

from .packager import Packager, PackageResult
from .packaging_pipeline import PackagingPipeline
from .build_context import (
    PackagingContext,
    PackagingError,
    CleanupError,
    InstallError,
    ArchiveError,
)
from .paths import ResolvedPaths, resolve
from .cleaner import clean
from .installer import (
    ALL_TARGETS,
    CommandRuntimeInstaller,
    InstallOptions,
    InstallTarget,
    RuntimeInstaller,
)
from .archiver import (
    ArchiveJob,
    Archiver,
    ArchiverFactory,
    ShellArchiver,
    TarfileArchiver,
)

__all__ = [
    # 主打包器
    "Packager",
    "PackageResult",
    "PackagingPipeline",
    "PackagingContext",

    # 异常
    "PackagingError",
    "CleanupError",
    "InstallError",
    "ArchiveError",

    # 路径与清理
    "ResolvedPaths",
    "resolve",
    "clean",

    # 安装器
    "ALL_TARGETS",
    "CommandRuntimeInstaller",
    "InstallOptions",
    "InstallTarget",
    "RuntimeInstaller",

    # 归档
    "ArchiveJob",
    "Archiver",
    "ArchiverFactory",
    "ShellArchiver",
    "TarfileArchiver",
]
