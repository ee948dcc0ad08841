"""
归档器抽象接口和实现

把一个组件目录打包为上一级目录中的 <目录名>.tar.gz。
默认调用外部 tar | gzip 命令，也提供进程内的 tarfile 实现。
"""

import tarfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..config.schema import ArchiveMethod
from ..utils.logging import info, debug, LogStage
from ..utils.process import CommandError, format_command, run_pipeline
from .build_context import ArchiveError

ARCHIVE_SUFFIX = ".tar.gz"


@dataclass(frozen=True)
class ArchiveJob:
    """一个归档任务，输出目录总是源目录的父目录"""
    source_dir: Path
    archive_name: str
    output_dir: Path

    @classmethod
    def for_directory(cls, source_dir: Path) -> 'ArchiveJob':
        source_dir = Path(source_dir)
        return cls(
            source_dir=source_dir,
            archive_name=source_dir.name + ARCHIVE_SUFFIX,
            output_dir=source_dir.parent,
        )

    @property
    def archive_path(self) -> Path:
        return self.output_dir / self.archive_name


class Archiver(ABC):
    """归档器抽象基类"""

    def __init__(self, level: int = 9):
        if not 1 <= level <= 9:
            raise ValueError(f"gzip 压缩级别必须在 1-9 之间: {level}")
        self.level = level

    def archive(self, job: ArchiveJob) -> Path:
        """执行归档任务

        Returns:
            Path: 生成的归档文件路径

        Raises:
            ArchiveError: 归档失败
        """
        if not job.source_dir.is_dir():
            raise ArchiveError(f"cd {job.source_dir}")
        self._archive(job)
        return job.archive_path

    @abstractmethod
    def _archive(self, job: ArchiveJob) -> None:
        pass

    @abstractmethod
    def get_method(self) -> ArchiveMethod:
        pass


class ShellArchiver(Archiver):
    """调用外部 tar 和 gzip 命令的归档器

    相当于在源目录中执行 `tar -c . | gzip --best > ../<目录名>.tar.gz`，
    tar 与 gzip 任一失败都视为归档失败。
    """

    def get_method(self) -> ArchiveMethod:
        return ArchiveMethod.SHELL

    def tar_args(self) -> list[str]:
        return ["tar", "-c", "."]

    def gzip_args(self) -> list[str]:
        return ["gzip", "--best" if self.level == 9 else f"-{self.level}"]

    def command_for(self, job: ArchiveJob) -> str:
        """失败时报告的命令行"""
        return f"{format_command(self.tar_args())} | {format_command(self.gzip_args())} > {job.archive_path}"

    def _archive(self, job: ArchiveJob) -> None:
        try:
            run_pipeline(self.tar_args(), self.gzip_args(), job.archive_path, cwd=job.source_dir)
        except CommandError as e:
            raise ArchiveError(e.command_line, e.returncode) from e


class TarfileArchiver(Archiver):
    """使用 tarfile 模块在进程内归档"""

    def get_method(self) -> ArchiveMethod:
        return ArchiveMethod.TARFILE

    def _archive(self, job: ArchiveJob) -> None:
        info(f"tarfile {job.source_dir} -> {job.archive_path}", stage=LogStage.ARCHIVE)
        try:
            with tarfile.open(job.archive_path, "w:gz", compresslevel=self.level) as tar:
                # 与 `tar -c .` 相同，成员名以 ./ 开头
                tar.add(str(job.source_dir), arcname=".")
        except (OSError, tarfile.TarError) as e:
            debug(f"tarfile 归档失败: {e}", stage=LogStage.ARCHIVE)
            raise ArchiveError(f"tarfile {job.source_dir} -> {job.archive_path}") from e


class ArchiverFactory:
    """归档器工厂"""

    @staticmethod
    def create_archiver(method: ArchiveMethod, level: int = 9) -> Archiver:
        if method == ArchiveMethod.SHELL:
            return ShellArchiver(level)
        elif method == ArchiveMethod.TARFILE:
            return TarfileArchiver(level)
        raise ValueError(f"不支持的归档方式: {method}")

    @staticmethod
    def get_available_methods() -> list[ArchiveMethod]:
        return list(ArchiveMethod)
