"""
打包器主类

对外提供统一的打包接口，把管道异常转换为 PackageResult。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config.schema import PackagingRequest
from .archiver import Archiver, ShellArchiver
from .build_context import PackagingError, ProgressCallback
from .installer import RuntimeInstaller
from .packaging_pipeline import PackagingPipeline


@dataclass
class PackageResult:
    """打包结果"""
    success: bool
    runtime_dir: Optional[Path] = None
    archives: List[Path] = field(default_factory=list)
    elapsed: Optional[float] = None
    error: Optional[str] = None
    exception: Optional[PackagingError] = None


class Packager:
    """运行时打包器"""

    def __init__(self, installer: RuntimeInstaller, archiver: Optional[Archiver] = None):
        self.installer = installer
        self.archiver = archiver or ShellArchiver()
        self.pipeline = PackagingPipeline()

    def package(
        self,
        request: PackagingRequest,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> PackageResult:
        """打包运行时

        Returns:
            PackageResult: 打包结果，失败时 success 为 False
        """
        try:
            context = self.pipeline.execute(request, self.installer, self.archiver, progress_callback)
        except PackagingError as e:
            return PackageResult(success=False, error=str(e), exception=e)

        return PackageResult(
            success=True,
            runtime_dir=context.paths.runtime_dir,
            archives=list(context.archives),
            elapsed=context.stats['end_time'] - context.stats['start_time'],
        )

    def get_pipeline(self) -> PackagingPipeline:
        """获取打包管道，用于自定义流程"""
        return self.pipeline
