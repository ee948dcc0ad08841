"""
目录清理步骤模块

构建前删除 support 和 nginx 目录，归档后删除全部三个暂存目录。
扩展目录在构建前不清理：扩展产物按版本单独管理，保留已有内容。
"""

from ...utils.logging import info, success, LogStage
from rtpack.build.build_context import PackagingContext, PackagingError
from rtpack.build.cleaner import clean
from .build_step import BuildStep


class PreCleanStep(BuildStep):
    """构建前清理"""

    def __init__(self):
        super().__init__("pre_clean", "清理旧的构建目录")

    def get_progress_range(self) -> tuple[int, int]:
        return (5, 10)

    def execute(self, context: PackagingContext) -> None:
        if context.paths is None:
            raise PackagingError("输出路径尚未解析")

        info("清理旧的构建目录", stage=LogStage.CLEAN)
        clean([context.paths.support_dir, context.paths.server_dir])
        context.report("清理目录", self.get_progress_range()[1])


class PostCleanStep(BuildStep):
    """归档后删除暂存目录"""

    def __init__(self):
        super().__init__("post_clean", "删除未压缩的暂存目录")

    def get_progress_range(self) -> tuple[int, int]:
        return (95, 100)

    def execute(self, context: PackagingContext) -> None:
        if context.paths is None:
            raise PackagingError("输出路径尚未解析")

        info(f"cd {context.paths.runtime_dir}", stage=LogStage.CLEAN)
        clean(context.paths.staging_dirs())
        success("暂存目录已删除", stage=LogStage.CLEAN)
        context.report("清理目录", self.get_progress_range()[1], "完成")
