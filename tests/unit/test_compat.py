"""
兼容性标识单元测试
"""

import subprocess
from unittest.mock import patch

import pytest

from rtpack.config.loader import ConfigError
from rtpack.config.schema import CompatModel
from rtpack.platform.compat import (
    CompatibilityError,
    CompatibilityIds,
    cxx_binary_compatibility_id,
    normalize_arch,
    normalize_os,
    ruby_extension_binary_compatibility_id,
)


class TestCxxCompatibilityId:
    """原生二进制兼容性标识测试"""

    @pytest.mark.parametrize("machine,expected", [
        ("x86_64", "x86_64"),
        ("AMD64", "x86_64"),
        ("i686", "x86"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("ppc64le", "ppc64le"),
    ])
    def test_normalize_arch(self, machine, expected):
        """测试 CPU 架构名称归一化"""
        assert normalize_arch(machine) == expected

    def test_normalize_os(self):
        """测试操作系统名称归一化"""
        assert normalize_os("Linux") == "linux"
        assert normalize_os("Darwin") == "macosx"
        assert normalize_os("FreeBSD") == "freebsd"

    def test_explicit_values(self):
        """测试显式传入平台信息"""
        assert cxx_binary_compatibility_id("x86_64", "Linux") == "x86_64-linux"
        assert cxx_binary_compatibility_id("arm64", "Darwin") == "arm64-macosx"

    def test_unknown_platform(self):
        """测试无法识别平台"""
        with pytest.raises(CompatibilityError):
            cxx_binary_compatibility_id("", "Linux")

    def test_detect_current(self):
        """测试探测当前平台"""
        with patch("rtpack.platform.compat.platform.machine", return_value="x86_64"), \
             patch("rtpack.platform.compat.platform.system", return_value="Linux"):
            assert cxx_binary_compatibility_id() == "x86_64-linux"


class TestRubyExtensionCompatibilityId:
    """Ruby 扩展兼容性标识测试"""

    def test_success(self):
        """测试从 Ruby 输出构建标识"""
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="ruby-3.1.4", stderr="")
        with patch("rtpack.platform.compat.subprocess.run", return_value=completed) as mock_run:
            ext_id = ruby_extension_binary_compatibility_id("ruby3.1", cxx_id="x86_64-linux")

        assert ext_id == "ruby-3.1.4-x86_64-linux"
        assert mock_run.call_args.args[0][0] == "ruby3.1"

    def test_ruby_missing(self):
        """测试 Ruby 解释器不存在"""
        with patch("rtpack.platform.compat.subprocess.run", side_effect=FileNotFoundError("ruby")):
            with pytest.raises(CompatibilityError):
                ruby_extension_binary_compatibility_id()

    def test_ruby_fails(self):
        """测试 Ruby 执行失败"""
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="boom")
        with patch("rtpack.platform.compat.subprocess.run", return_value=completed):
            with pytest.raises(CompatibilityError, match="boom"):
                ruby_extension_binary_compatibility_id(cxx_id="x86_64-linux")

    def test_empty_output(self):
        """测试 Ruby 没有输出"""
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="  ", stderr="")
        with patch("rtpack.platform.compat.subprocess.run", return_value=completed):
            with pytest.raises(CompatibilityError):
                ruby_extension_binary_compatibility_id(cxx_id="x86_64-linux")

    def test_error_is_config_error(self):
        """测试兼容性错误属于配置错误"""
        assert issubclass(CompatibilityError, ConfigError)


class TestCompatibilityIds:
    """CompatibilityIds 测试"""

    def test_overrides_skip_detection(self):
        """测试设置中的值优先且不会运行 Ruby"""
        with patch("rtpack.platform.compat.subprocess.run") as mock_run:
            ids = CompatibilityIds.detect(CompatModel(cxx_id="x86_64-linux", ext_id="ruby-3.1"))

        assert ids == CompatibilityIds(cxx_id="x86_64-linux", ext_id="ruby-3.1")
        mock_run.assert_not_called()

    def test_ext_id_uses_cxx_override(self):
        """测试探测扩展标识时使用覆盖后的原生标识"""
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="jruby-9.4.0", stderr="")
        with patch("rtpack.platform.compat.subprocess.run", return_value=completed):
            ids = CompatibilityIds.detect(CompatModel(cxx_id="arm64-linux"))

        assert ids.ext_id == "jruby-9.4.0-arm64-linux"
