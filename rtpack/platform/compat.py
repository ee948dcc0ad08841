"""
二进制兼容性标识

提供两个不透明字符串：原生二进制兼容性标识和 Ruby 扩展兼容性标识。
它们被原样拼接进输出目录名，下游安装代码会按同样规则重建这些名字，
因此格式一旦发布就不能改变。
"""

import platform
import subprocess
from dataclasses import dataclass
from typing import Optional

from ..config.loader import ConfigError
from ..config.schema import CompatModel
from ..utils.logging import debug, LogStage

_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "arm64": "arm64",
    "aarch64": "arm64",
}

_OS_ALIASES = {
    "darwin": "macosx",
    "sunos": "solaris",
}

# 打印 [引擎, 版本] 的 Ruby 脚本
_RUBY_PROBE = (
    'engine = defined?(RUBY_ENGINE) ? RUBY_ENGINE : "ruby"; '
    'print "#{engine}-#{RUBY_VERSION}"'
)


class CompatibilityError(ConfigError):
    """无法确定兼容性标识"""
    pass


def normalize_arch(machine: str) -> str:
    machine = machine.strip().lower()
    return _ARCH_ALIASES.get(machine, machine)


def normalize_os(system: str) -> str:
    system = system.strip().lower()
    return _OS_ALIASES.get(system, system)


def cxx_binary_compatibility_id(machine: Optional[str] = None, system: Optional[str] = None) -> str:
    """原生二进制兼容性标识: <arch>-<os>，如 x86_64-linux"""
    arch = normalize_arch(machine if machine is not None else platform.machine())
    os_name = normalize_os(system if system is not None else platform.system())
    if not arch or not os_name:
        raise CompatibilityError("无法识别当前平台的 CPU 架构或操作系统")
    return f"{arch}-{os_name}"


def ruby_extension_binary_compatibility_id(ruby: str = "ruby", cxx_id: Optional[str] = None) -> str:
    """Ruby 扩展兼容性标识: <engine>-<ruby_version>-<arch>-<os>

    通过运行 Ruby 解释器获取引擎和版本。

    Raises:
        CompatibilityError: 解释器不存在或执行失败
    """
    try:
        completed = subprocess.run(
            [ruby, "-e", _RUBY_PROBE],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise CompatibilityError(f"无法运行 Ruby 解释器 {ruby}: {e}") from e

    if completed.returncode != 0:
        raise CompatibilityError(
            f"Ruby 解释器 {ruby} 返回错误 ({completed.returncode}): {completed.stderr.strip()}"
        )

    engine_version = completed.stdout.strip()
    if not engine_version:
        raise CompatibilityError(f"Ruby 解释器 {ruby} 没有输出版本信息")

    debug(f"Ruby 引擎: {engine_version}", stage=LogStage.INIT)
    return f"{engine_version}-{cxx_id or cxx_binary_compatibility_id()}"


@dataclass(frozen=True)
class CompatibilityIds:
    """已确定的兼容性标识"""
    cxx_id: str
    ext_id: str

    @classmethod
    def detect(cls, compat: CompatModel) -> 'CompatibilityIds':
        """优先使用设置中的值，其余自动探测"""
        cxx_id = compat.cxx_id or cxx_binary_compatibility_id()
        ext_id = compat.ext_id or ruby_extension_binary_compatibility_id(compat.ruby, cxx_id)
        return cls(cxx_id=cxx_id, ext_id=ext_id)
