"""
Package 命令实现

把独立运行时打包为一组 .tar.gz 文件。
"""

import traceback
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ...build.archiver import ArchiverFactory
from ...build.installer import CommandRuntimeInstaller
from ...build.packager import Packager
from ...config import ConfigError
from ...utils.logging import get_output_facade, set_log_level, set_log_file, OutputLevel
from .common import build_request, print_config_error


console = Console()


def package_command(
    directory: Optional[str] = typer.Argument(
        None, help="输出目录 (默认: ./passenger-standalone)", show_default=False
    ),
    nginx_version: Optional[str] = typer.Option(
        None, "--nginx-version", metavar="VERSION", help="作为核心使用的 Nginx 版本 (默认取自设置文件)"
    ),
    nginx_tarball: Optional[str] = typer.Option(
        None, "--nginx-tarball", metavar="FILENAME",
        help="使用指定的源码包而不是从网络下载。该源码包必须与 --nginx-version 一致！"
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="设置文件路径 (YAML)"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志 (DEBUG 级别)"),
) -> None:
    """打包独立运行时

    构建 support 二进制、Ruby 扩展和 Nginx，并把它们分别压缩为
    DIRECTORY/<版本>/ 下的 .tar.gz 文件。

    示例:
        rtpack package
        rtpack package /tmp/out --nginx-version 1.24.0 --nginx-tarball nginx-1.24.0.tar.gz
    """
    # 未指定时沿用全局 `rtpack -v` 设置的级别
    if verbose:
        set_log_level(OutputLevel.DEBUG)
    show_progress = get_output_facade().get_level() == OutputLevel.DEBUG

    if log_file:
        try:
            set_log_file(log_file)
        except OSError as e:
            console.print(f"[yellow]无法写入日志文件 {log_file}: {e}[/yellow]")

    try:
        settings, request = build_request(directory, config, nginx_version, nginx_tarball)
    except ConfigError as e:
        print_config_error(console, e)
        raise typer.Exit(1)

    if not settings.installer.command:
        console.print("[red]配置错误[/red]: 未配置安装器命令 (installer.command)")
        raise typer.Exit(1)

    installer = CommandRuntimeInstaller(settings.installer.command, settings.installer.env)
    archiver = ArchiverFactory.create_archiver(settings.archive.method, settings.archive.gzip_level)
    packager = Packager(installer, archiver)

    def progress_callback(stage: str, current: int, total: int, message: str = "") -> None:
        if show_progress and total > 0:
            percentage = (current / total) * 100
            console.print(f"[blue]{stage}[/blue]: {message} ({percentage:.0f}%)")

    try:
        result = packager.package(request, progress_callback=progress_callback)
    except Exception as e:
        console.print(f"[red]✗ 打包过程中发生意外错误[/red]: {escape(str(e))}")
        if log_file:
            console.print("[yellow]详细错误信息:[/yellow]")
            console.print(traceback.format_exc(), markup=False)
        raise typer.Exit(1)

    if not result.success:
        console.print(f"[red]✗ 打包失败[/red]: {escape(result.error or '')}")
        if log_file:
            console.print(f"[yellow]请检查日志文件 {log_file} 获取详细信息。[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓ 运行时打包完成[/green]: {result.runtime_dir}")
    for archive in result.archives:
        console.print(f"  {archive.name}")
