"""
运行时安装步骤模块

调用安装器构建全部三个组件。始终禁止下载预编译二进制，
保证打包产物全部来自同一次源码构建。
"""

from ...utils.logging import info, error, LogStage
from rtpack.build.build_context import PackagingContext, PackagingError, InstallError
from rtpack.build.installer import ALL_TARGETS, InstallOptions
from .build_step import BuildStep


class InstallStep(BuildStep):
    """运行时安装步骤"""

    def __init__(self):
        super().__init__("install", "构建运行时组件")

    def get_progress_range(self) -> tuple[int, int]:
        return (10, 60)

    def execute(self, context: PackagingContext) -> None:
        if context.paths is None:
            raise PackagingError("输出路径尚未解析")

        request = context.request
        options = InstallOptions(
            nginx_version=request.server_version,
            nginx_tarball=request.server_tarball_path,
            download_binaries=False,
        )

        start, end = self.get_progress_range()
        context.report("构建组件", start, "开始构建...")
        info(f"构建组件: {', '.join(t.value for t in ALL_TARGETS)}", stage=LogStage.INSTALL)

        try:
            context.installer.install(ALL_TARGETS, context.paths, options)
        except InstallError as e:
            error(f"安装失败: {e}", stage=LogStage.INSTALL)
            raise
        except Exception as e:
            # 安装器是外部实现，其他异常统一视为安装失败
            error(f"安装器异常: {e}", stage=LogStage.INSTALL)
            raise InstallError(f"安装器异常: {e}") from e

        context.report("构建组件", end, "构建完成")
