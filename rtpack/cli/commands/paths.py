"""
Paths 命令实现

显示打包时会使用的输出目录，不修改文件系统。
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...build.archiver import ArchiveJob
from ...build.paths import resolve
from ...config import ConfigError
from .common import build_request, print_config_error


console = Console()


def paths_command(
    directory: Optional[str] = typer.Argument(None, help="输出目录 (默认: ./passenger-standalone)", show_default=False),
    nginx_version: Optional[str] = typer.Option(None, "--nginx-version", metavar="VERSION", help="Nginx 版本"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="设置文件路径 (YAML)"),
) -> None:
    """显示输出目录布局"""
    try:
        _, request = build_request(directory, config, nginx_version)
    except ConfigError as e:
        print_config_error(console, e)
        raise typer.Exit(1)

    paths = resolve(request)

    table = Table(title=f"运行时目录: {paths.runtime_dir}")
    table.add_column("组件", style="cyan")
    table.add_column("暂存目录", style="white")
    table.add_column("归档文件", style="green")

    for label, directory_path in zip(("support", "extension", "nginx"), paths.staging_dirs()):
        job = ArchiveJob.for_directory(directory_path)
        table.add_row(label, directory_path.name, job.archive_name)

    console.print(table)
