"""测试公共夹具"""

from pathlib import Path

import pytest

from rtpack.build.build_context import InstallError
from rtpack.build.installer import RuntimeInstaller, ordered_targets, target_dir
from rtpack.config.schema import PackagingRequest


class FakeInstaller(RuntimeInstaller):
    """在目标目录中写入占位文件的安装器"""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []

    def install(self, targets, paths, options):
        targets = list(targets)
        self.calls.append((targets, paths, options))
        for target in ordered_targets(targets):
            if target == self.fail_on:
                raise InstallError(f"{target.value} 构建失败")
            directory = target_dir(target, paths)
            (directory / "bin").mkdir(parents=True, exist_ok=True)
            (directory / "bin" / f"{target.value}.bin").write_bytes(b"\x7fELF" + target.value.encode())
            (directory / "README").write_text(target.value, encoding="utf-8")


@pytest.fixture
def make_request(tmp_path):
    """构建指向临时目录的打包请求"""
    def _make(**overrides):
        values = dict(
            destination_root=tmp_path / "out",
            runtime_version="6.0.0",
            cxx_compat_id="x86_64-linux",
            ext_compat_id="ruby-3.1",
            server_version="1.24.0",
        )
        values.update(overrides)
        return PackagingRequest(**values)
    return _make


@pytest.fixture
def fake_installer():
    return FakeInstaller()
