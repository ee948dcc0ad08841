"""
归档步骤模块

依次把 support、extension、nginx 目录打包为 .tar.gz。
"""

from ...utils import format_size
from ...utils.logging import info, success, error, LogStage
from rtpack.build.archiver import ArchiveJob
from rtpack.build.build_context import PackagingContext, PackagingError, ArchiveError
from .build_step import BuildStep


class ArchiveStep(BuildStep):
    """归档步骤"""

    def __init__(self):
        super().__init__("archive", "压缩组件目录")

    def get_progress_range(self) -> tuple[int, int]:
        return (60, 95)

    def execute(self, context: PackagingContext) -> None:
        if context.paths is None:
            raise PackagingError("输出路径尚未解析")

        start, end = self.get_progress_range()
        jobs = [ArchiveJob.for_directory(d) for d in context.paths.staging_dirs()]

        for i, job in enumerate(jobs):
            context.report("压缩组件", start + int(i / len(jobs) * (end - start)), job.archive_name)
            info(f"压缩 {job.source_dir.name} -> {job.archive_name}", stage=LogStage.ARCHIVE)
            try:
                archive_path = context.archiver.archive(job)
            except ArchiveError as e:
                error(f"*** Cannot run command: {e.command}", stage=LogStage.ARCHIVE)
                raise

            size = archive_path.stat().st_size
            context.archives.append(archive_path)
            context.stats['archive_size'] += size
            success(f"{archive_path.name} ({format_size(size)})", stage=LogStage.ARCHIVE)

        context.report("压缩组件", end, "压缩完成")
