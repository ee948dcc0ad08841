"""
打包步骤基类模块

定义打包步骤的抽象接口。
"""

from abc import ABC, abstractmethod

from rtpack.build.build_context import PackagingContext


class BuildStep(ABC):
    """打包步骤抽象基类"""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description

    @abstractmethod
    def execute(self, context: PackagingContext) -> None:
        """执行打包步骤"""
        pass

    @abstractmethod
    def get_progress_range(self) -> tuple[int, int]:
        """获取此步骤的进度范围 (start_percent, end_percent)"""
        pass
