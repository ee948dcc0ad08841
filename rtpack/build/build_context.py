"""
打包上下文模块

定义打包过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Any, Dict, List, TYPE_CHECKING

from ..config.schema import PackagingRequest

if TYPE_CHECKING:
    from .archiver import Archiver
    from .installer import RuntimeInstaller
    from .paths import ResolvedPaths

# 进度回调类型: (阶段, 当前, 总数, 消息)
ProgressCallback = Callable[[str, int, int, str], None]


@dataclass
class PackagingContext:
    """打包上下文，包含各步骤之间共享的数据"""
    request: PackagingRequest
    installer: 'RuntimeInstaller'
    archiver: 'Archiver'
    progress_callback: Optional[ProgressCallback] = None

    # 打包过程中生成的数据
    paths: Optional['ResolvedPaths'] = None
    archives: List[Path] = field(default_factory=list)

    # 统计信息
    stats: Dict[str, Any] = field(default_factory=lambda: {
        'start_time': 0,
        'end_time': 0,
        'archive_size': 0,
    })

    def report(self, stage: str, current: int, message: str = "") -> None:
        if self.progress_callback:
            self.progress_callback(stage, current, 100, message)


class PackagingError(Exception):
    """打包错误基类，所有打包错误都是致命的"""
    pass


class CleanupError(PackagingError):
    """无法删除目录"""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"无法删除 {path}: {reason}")
        self.path = path


class InstallError(PackagingError):
    """安装器构建运行时组件失败"""
    pass


class ArchiveError(PackagingError):
    """归档命令以非零状态退出"""

    def __init__(self, command: str, returncode: Optional[int] = None):
        super().__init__(f"Cannot run command: {command}")
        self.command = command
        self.returncode = returncode
