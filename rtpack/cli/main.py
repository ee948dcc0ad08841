"""
rtpack CLI 主入口

提供命令行接口，支持 package/paths/validate/info/example 等命令。
"""

import platform
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..config import ConfigError, DEFAULT_NGINX_VERSION
from ..utils import configure_logging
from .commands import package, paths, validate


app = typer.Typer(
    name="rtpack",
    help="rtpack - 独立运行时打包工具",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        console.print(f"rtpack v{__version__}")
        raise typer.Exit()


def verbose_callback(verbose: bool) -> None:
    """配置详细输出"""
    configure_logging(level="DEBUG" if verbose else "INFO")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        callback=verbose_callback,
        help="启用详细输出"
    )
) -> None:
    """rtpack - 独立运行时打包工具

    使用 --help 查看可用命令的详细信息。
    """
    pass


app.command("package", help="打包独立运行时")(package.package_command)
app.command("paths", help="显示输出目录布局")(paths.paths_command)
app.command("validate", help="验证设置文件")(validate.validate_command)


@app.command("info")
def info_command(
    ruby: str = typer.Option("ruby", "--ruby", help="用于探测扩展兼容性标识的 Ruby 解释器"),
) -> None:
    """显示版本和兼容性标识"""
    from ..build.archiver import ArchiverFactory
    from ..platform import cxx_binary_compatibility_id, ruby_extension_binary_compatibility_id

    table = Table(title="版本信息")
    table.add_column("组件", style="cyan")
    table.add_column("值", style="green")

    table.add_row("rtpack", __version__)
    table.add_row("Python", platform.python_version())
    table.add_row("默认 Nginx 版本", DEFAULT_NGINX_VERSION)

    cxx_id = cxx_binary_compatibility_id()
    table.add_row("原生二进制兼容性标识", cxx_id)
    try:
        table.add_row("Ruby 扩展兼容性标识", ruby_extension_binary_compatibility_id(ruby, cxx_id))
    except ConfigError as e:
        table.add_row("Ruby 扩展兼容性标识", f"[red]✗ {escape(str(e))}[/red]")

    table.add_row("归档方式", ", ".join(m.value for m in ArchiverFactory.get_available_methods()))
    console.print(table)


@app.command("example")
def example_command(
    output: str = typer.Option(
        "rtpack.yaml",
        "--output", "-o",
        help="输出设置文件路径"
    )
) -> None:
    """生成示例设置文件"""
    from ..config import RtpackSettings, save_settings
    from ..config.schema import InstallerModel, NginxModel

    settings = RtpackSettings(
        nginx=NginxModel(version=DEFAULT_NGINX_VERSION),
        installer=InstallerModel(command=["./build-runtime.sh"]),
    )

    try:
        save_settings(settings, output)
    except ConfigError as e:
        console.print(f"[red]生成示例设置失败: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"✓ 示例设置文件已生成: [green]{output}[/green]")
    console.print("请根据需要修改设置文件，然后运行:")
    console.print(f"  [cyan]rtpack package -c {output}[/cyan]")


if __name__ == "__main__":
    app()
