"""打包步骤"""

from .build_step import BuildStep
from .plan_paths_step import PlanPathsStep
from .clean_steps import PreCleanStep, PostCleanStep
from .install_step import InstallStep
from .archive_step import ArchiveStep

__all__ = [
    "BuildStep",
    "PlanPathsStep",
    "PreCleanStep",
    "InstallStep",
    "ArchiveStep",
    "PostCleanStep",
]
