"""
外部命令执行

提供"在指定工作目录中运行命令"的原语。工作目录只传递给子进程，
不修改当前进程的 cwd。命令执行是同步阻塞的，没有超时。
"""

import os
import subprocess
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from .logging import info, debug, LogStage

Command = Union[str, Sequence[str]]


class CommandError(Exception):
    """外部命令以非零状态退出"""

    def __init__(self, command_line: str, returncode: int):
        super().__init__(f"Cannot run command: {command_line}")
        self.command_line = command_line
        self.returncode = returncode


def format_command(command: Command) -> str:
    """将命令格式化为回显用的命令行字符串"""
    if isinstance(command, str):
        return command
    return " ".join(str(part) for part in command)


def run_command(
    command: Command,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
) -> int:
    """运行外部命令并等待其结束

    字符串形式的命令交给 shell 执行（支持管道和重定向），
    序列形式的命令直接执行。

    Args:
        command: 命令行字符串或参数序列
        cwd: 子进程的工作目录
        env: 追加到当前环境中的环境变量

    Returns:
        int: 退出码（总是 0）

    Raises:
        CommandError: 命令以非零状态退出或无法启动
    """
    command_line = format_command(command)
    if cwd is not None:
        info(f"cd {cwd}", stage=LogStage.SHELL)
    info(command_line, stage=LogStage.SHELL)

    child_env = None
    if env:
        child_env = dict(os.environ)
        child_env.update(env)

    try:
        completed = subprocess.run(
            command if isinstance(command, str) else [str(part) for part in command],
            cwd=str(cwd) if cwd is not None else None,
            env=child_env,
            shell=isinstance(command, str),
        )
    except OSError as e:
        debug(f"无法启动命令: {e}", stage=LogStage.SHELL)
        raise CommandError(command_line, 127) from e

    if completed.returncode != 0:
        raise CommandError(command_line, completed.returncode)
    return completed.returncode


def run_pipeline(
    producer: Sequence[str],
    consumer: Sequence[str],
    output_path: Union[str, Path],
    cwd: Optional[Union[str, Path]] = None,
) -> int:
    """运行 `producer | consumer > output_path`

    两个子进程直接相连，不经过 shell。任何一端以非零状态退出都视为失败，
    错误中携带完整的命令行。

    Raises:
        CommandError: 任一命令以非零状态退出或无法启动
    """
    command_line = f"{format_command(producer)} | {format_command(consumer)} > {output_path}"
    if cwd is not None:
        info(f"cd {cwd}", stage=LogStage.SHELL)
    info(command_line, stage=LogStage.SHELL)

    workdir = str(cwd) if cwd is not None else None
    try:
        with open(output_path, "wb") as output:
            first = subprocess.Popen([str(p) for p in producer], cwd=workdir, stdout=subprocess.PIPE)
            try:
                second = subprocess.Popen(
                    [str(p) for p in consumer], cwd=workdir, stdin=first.stdout, stdout=output
                )
            except OSError:
                first.kill()
                first.wait()
                raise
            finally:
                # 只保留消费端持有的管道读端，生产端才能收到 SIGPIPE
                first.stdout.close()
            consumer_status = second.wait()
            producer_status = first.wait()
    except OSError as e:
        debug(f"无法启动命令: {e}", stage=LogStage.SHELL)
        raise CommandError(command_line, 127) from e

    if producer_status != 0:
        raise CommandError(command_line, producer_status)
    if consumer_status != 0:
        raise CommandError(command_line, consumer_status)
    return 0
