"""
暂存目录清理
"""

import shutil
from pathlib import Path
from typing import Iterable

from ..utils.logging import info, debug, LogStage
from .build_context import CleanupError


def remove_path(path: Path) -> None:
    """递归强制删除路径，不存在时什么也不做

    Raises:
        CleanupError: 删除失败
    """
    info(f"rm -rf {path}", stage=LogStage.CLEAN)
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        else:
            debug(f"路径不存在，跳过: {path}", stage=LogStage.CLEAN)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise CleanupError(path, e.strerror or str(e)) from e


def clean(paths: Iterable[Path]) -> None:
    """依次删除每个路径，第一次失败即中止"""
    for path in paths:
        remove_path(Path(path))
