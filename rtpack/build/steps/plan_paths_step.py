"""
路径规划步骤模块
"""

from ...utils.logging import info, debug, LogStage
from rtpack.build.build_context import PackagingContext
from rtpack.build.paths import resolve
from .build_step import BuildStep


class PlanPathsStep(BuildStep):
    """计算输出目录"""

    def __init__(self):
        super().__init__("plan", "计算输出目录")

    def get_progress_range(self) -> tuple[int, int]:
        return (0, 5)

    def execute(self, context: PackagingContext) -> None:
        paths = resolve(context.request)
        context.paths = paths

        info(f"运行时目录: {paths.runtime_dir}", stage=LogStage.PLAN)
        debug(f"support: {paths.support_dir}", stage=LogStage.PLAN)
        debug(f"extension: {paths.ext_dir}", stage=LogStage.PLAN)
        debug(f"nginx: {paths.server_dir}", stage=LogStage.PLAN)

        context.report("规划路径", self.get_progress_range()[1], str(paths.runtime_dir))
