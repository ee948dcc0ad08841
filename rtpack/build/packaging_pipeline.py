"""
打包管道模块

按固定顺序执行打包步骤：规划路径、构建前清理、安装、归档、归档后清理。
任何一步失败都立即中止，磁盘状态停留在最后完成的步骤。
"""

import time
from typing import List, Optional

from ..config.schema import PackagingRequest
from ..utils import format_size
from ..utils.logging import info, success, error, debug, LogStage
from .archiver import Archiver
from .build_context import PackagingContext, PackagingError, ProgressCallback
from .installer import RuntimeInstaller
from .steps.build_step import BuildStep
from .steps.plan_paths_step import PlanPathsStep
from .steps.clean_steps import PreCleanStep, PostCleanStep
from .steps.install_step import InstallStep
from .steps.archive_step import ArchiveStep


class PackagingPipeline:
    """打包管道，负责协调打包步骤的执行"""

    def __init__(self):
        self._steps: List[BuildStep] = []
        self._init_default_steps()

    def _init_default_steps(self):
        self._steps = [
            PlanPathsStep(),
            PreCleanStep(),
            InstallStep(),
            ArchiveStep(),
            PostCleanStep(),
        ]

    def add_step(self, step: BuildStep, position: Optional[int] = None):
        """添加打包步骤"""
        if position is None:
            self._steps.append(step)
        else:
            self._steps.insert(position, step)

    def remove_step(self, step_name: str):
        """移除打包步骤"""
        self._steps = [step for step in self._steps if step.name != step_name]

    def get_steps(self) -> List[BuildStep]:
        """获取所有打包步骤"""
        return self._steps.copy()

    def execute(
        self,
        request: PackagingRequest,
        installer: RuntimeInstaller,
        archiver: Archiver,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> PackagingContext:
        """执行打包管道

        Returns:
            PackagingContext: 打包上下文，包含所有结果

        Raises:
            PackagingError: 打包失败（具体子类指明失败阶段）
        """
        context = PackagingContext(
            request=request,
            installer=installer,
            archiver=archiver,
            progress_callback=progress_callback,
        )
        context.stats['start_time'] = time.time()

        info(f"开始打包运行时 {request.runtime_version} -> {request.destination_root}", stage=LogStage.INIT)
        debug(
            f"cxx={request.cxx_compat_id} ext={request.ext_compat_id} "
            f"nginx={request.server_version} tarball={request.server_tarball_path}",
            stage=LogStage.INIT,
        )

        try:
            for step in self._steps:
                info(f"执行步骤: {step.description}", stage=LogStage.INIT)
                step.execute(context)
        except PackagingError as e:
            context.stats['end_time'] = time.time()
            error(f"打包失败: {e}", stage=LogStage.DONE)
            raise
        except Exception as e:
            context.stats['end_time'] = time.time()
            error(f"打包失败: {e}", stage=LogStage.DONE)
            raise PackagingError(f"打包失败: {e}") from e

        context.stats['end_time'] = time.time()
        elapsed = context.stats['end_time'] - context.stats['start_time']

        success(f"运行时打包完成: {context.paths.runtime_dir}", stage=LogStage.DONE)
        info(f"耗时: {elapsed:.1f}秒")
        info(f"归档总大小: {format_size(context.stats['archive_size'])}")
        return context

    def validate_pipeline(self) -> List[str]:
        """验证管道的进度范围是否从 0 连续覆盖到 100

        Returns:
            List[str]: 验证错误列表，空列表表示验证通过
        """
        errors = []

        if not self._steps:
            errors.append("打包管道中没有步骤")
            return errors

        prev_end = 0
        for step in self._steps:
            start, end = step.get_progress_range()
            if start != prev_end:
                errors.append(f"步骤 '{step.name}' 的进度范围不连续: 期望起始 {prev_end}%, 实际 {start}%")
            if start >= end:
                errors.append(f"步骤 '{step.name}' 的进度范围无效: {start}% - {end}%")
            prev_end = end

        if prev_end != 100:
            errors.append(f"打包管道的总进度范围不是100%: {prev_end}%")

        return errors
