"""
归档器单元测试

测试归档任务、shell 与 tarfile 两种归档方式以及错误处理。
"""

import os
import shutil
import tarfile
from pathlib import Path
from unittest.mock import patch

import pytest

from rtpack.build.archiver import (
    ArchiveJob,
    ArchiverFactory,
    ShellArchiver,
    TarfileArchiver,
)
from rtpack.build.build_context import ArchiveError
from rtpack.config.schema import ArchiveMethod
from rtpack.utils.process import CommandError

requires_tar = pytest.mark.skipif(
    shutil.which("tar") is None or shutil.which("gzip") is None,
    reason="需要 tar 和 gzip 命令",
)


@pytest.fixture
def source_dir(tmp_path):
    """创建一个组件目录"""
    directory = tmp_path / "6.0.0" / "support-x86_64-linux"
    (directory / "bin").mkdir(parents=True)
    (directory / "bin" / "PassengerAgent").write_bytes(b"\x7fELF" + b"\x00" * 64)
    (directory / "README").write_text("support binaries", encoding="utf-8")
    return directory


def _member_names(archive_path: Path):
    with tarfile.open(archive_path, "r:gz") as tar:
        return {name.rstrip("/") for name in tar.getnames()}


class TestArchiveJob:
    """ArchiveJob 测试"""

    def test_for_directory(self, tmp_path):
        """测试归档任务的命名规则"""
        source = tmp_path / "6.0.0" / "nginx-1.24.0-x86_64-linux"
        job = ArchiveJob.for_directory(source)

        assert job.source_dir == source
        assert job.archive_name == "nginx-1.24.0-x86_64-linux.tar.gz"
        assert job.output_dir == source.parent
        assert job.archive_path == tmp_path / "6.0.0" / "nginx-1.24.0-x86_64-linux.tar.gz"

    def test_name_with_dots(self, tmp_path):
        """测试目录名中的点不会被当作扩展名"""
        job = ArchiveJob.for_directory(tmp_path / "rubyext-ruby-3.1.4-x86_64-linux")
        assert job.archive_name == "rubyext-ruby-3.1.4-x86_64-linux.tar.gz"


class TestTarfileArchiver:
    """TarfileArchiver 测试"""

    def test_archive_contents(self, source_dir):
        """测试归档内容与 tar -c . 一致（成员以 ./ 开头）"""
        archiver = TarfileArchiver()
        job = ArchiveJob.for_directory(source_dir)

        archive_path = archiver.archive(job)

        assert archive_path == source_dir.parent / "support-x86_64-linux.tar.gz"
        assert archive_path.is_file()
        names = _member_names(archive_path)
        assert "./bin/PassengerAgent" in names
        assert "./README" in names

    def test_source_untouched(self, source_dir):
        """测试归档不修改源目录"""
        TarfileArchiver().archive(ArchiveJob.for_directory(source_dir))
        assert (source_dir / "README").read_text(encoding="utf-8") == "support binaries"

    def test_missing_source(self, tmp_path):
        """测试源目录不存在"""
        job = ArchiveJob.for_directory(tmp_path / "missing")
        with pytest.raises(ArchiveError) as exc_info:
            TarfileArchiver().archive(job)
        assert "missing" in exc_info.value.command

    def test_invalid_level(self):
        """测试无效的压缩级别"""
        with pytest.raises(ValueError):
            TarfileArchiver(level=0)
        with pytest.raises(ValueError):
            TarfileArchiver(level=10)


class TestShellArchiver:
    """ShellArchiver 测试"""

    def test_command_best(self, source_dir):
        """测试默认使用 gzip --best"""
        job = ArchiveJob.for_directory(source_dir)
        command = ShellArchiver().command_for(job)
        assert command == f"tar -c . | gzip --best > {source_dir.parent / 'support-x86_64-linux.tar.gz'}"

    def test_command_level(self, source_dir):
        """测试自定义压缩级别"""
        job = ArchiveJob.for_directory(source_dir)
        assert ShellArchiver(level=6).gzip_args() == ["gzip", "-6"]
        assert "gzip -6 >" in ShellArchiver(level=6).command_for(job)

    def test_runs_in_source_dir(self, source_dir):
        """测试 tar 和 gzip 在源目录中执行，输出写到上一级目录"""
        job = ArchiveJob.for_directory(source_dir)
        with patch("rtpack.build.archiver.run_pipeline") as mock_run:
            ShellArchiver().archive(job)

        mock_run.assert_called_once_with(
            ["tar", "-c", "."],
            ["gzip", "--best"],
            source_dir.parent / "support-x86_64-linux.tar.gz",
            cwd=source_dir,
        )

    def test_failure_reports_command(self, source_dir):
        """测试命令失败时错误中包含完整命令行"""
        job = ArchiveJob.for_directory(source_dir)
        command = ShellArchiver().command_for(job)

        with patch("rtpack.build.archiver.run_pipeline", side_effect=CommandError(command, 2)):
            with pytest.raises(ArchiveError) as exc_info:
                ShellArchiver().archive(job)

        assert exc_info.value.command == command
        assert exc_info.value.returncode == 2
        assert str(exc_info.value) == f"Cannot run command: {command}"

    @pytest.mark.skipif(shutil.which("gzip") is None, reason="需要 gzip 命令")
    def test_tar_failure_is_fatal(self, source_dir, tmp_path, monkeypatch):
        """测试 tar 失败而 gzip 成功时仍然报告归档失败"""
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        fake_tar = bin_dir / "tar"
        fake_tar.write_text('#!/bin/sh\necho "tar: read error" >&2\nexit 2\n', encoding="utf-8")
        fake_tar.chmod(0o755)
        monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

        job = ArchiveJob.for_directory(source_dir)
        with pytest.raises(ArchiveError) as exc_info:
            ShellArchiver().archive(job)

        assert exc_info.value.returncode == 2
        assert exc_info.value.command == ShellArchiver().command_for(job)
        assert "tar -c ." in exc_info.value.command

    @requires_tar
    def test_real_archive(self, source_dir):
        """测试真实调用 tar 和 gzip"""
        cwd_before = Path.cwd()
        archive_path = ShellArchiver().archive(ArchiveJob.for_directory(source_dir))

        assert Path.cwd() == cwd_before
        assert archive_path.is_file()
        names = _member_names(archive_path)
        assert "./bin/PassengerAgent" in names
        assert "./README" in names


class TestArchiverFactory:
    """ArchiverFactory 测试"""

    def test_create(self):
        """测试按方式创建归档器"""
        shell = ArchiverFactory.create_archiver(ArchiveMethod.SHELL, 9)
        in_process = ArchiverFactory.create_archiver(ArchiveMethod.TARFILE, 5)

        assert isinstance(shell, ShellArchiver)
        assert shell.get_method() == ArchiveMethod.SHELL
        assert isinstance(in_process, TarfileArchiver)
        assert in_process.level == 5

    def test_available_methods(self):
        """测试列出可用方式"""
        assert set(ArchiverFactory.get_available_methods()) == {ArchiveMethod.SHELL, ArchiveMethod.TARFILE}
