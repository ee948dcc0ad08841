"""
Validate 命令实现

验证设置文件。
"""

import typer
from rich.console import Console
from rich.markup import escape

from ...config import ConfigError, ConfigValidationError, config_loader


console = Console()


def validate_command(
    config: str = typer.Option(..., "--config", "-c", help="设置文件路径"),
    json_output: bool = typer.Option(False, "--json", help="以 JSON 格式输出错误"),
) -> None:
    """验证设置文件"""
    try:
        config_loader.load_from_file(config)
    except ConfigValidationError as e:
        if json_output:
            console.print_json(e.format_errors_json())
        else:
            console.print("[red]配置验证失败:[/red]")
            console.print(e.format_errors(), markup=False)
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]✓ 配置文件有效[/green]: {config}")
