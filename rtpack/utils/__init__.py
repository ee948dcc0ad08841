"""通用工具模块"""

from .logging import (
    configure_logging,
    set_log_level,
    set_log_file,
    OutputLevel,
    LogStage,
)

from .paths import (
    expand_path,
    ensure_directory,
    format_size,
    is_safe_path_component,
)

from .process import (
    CommandError,
    format_command,
    run_command,
    run_pipeline,
)

__all__ = [
    # 日志相关
    "configure_logging",
    "set_log_level",
    "set_log_file",
    "OutputLevel",
    "LogStage",

    # 路径相关
    "expand_path",
    "ensure_directory",
    "format_size",
    "is_safe_path_component",

    # 命令执行
    "CommandError",
    "format_command",
    "run_command",
    "run_pipeline",
]
