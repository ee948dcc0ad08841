"""
输出路径解析

根据打包请求计算运行时目录以及三个组件目录。
目录名的字段顺序和分隔符由下游安装代码依赖，不能改变。
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..config.schema import PackagingRequest

SUPPORT_PREFIX = "support-"
EXTENSION_PREFIX = "rubyext-"
NGINX_PREFIX = "nginx-"


@dataclass(frozen=True)
class ResolvedPaths:
    """解析后的输出路径"""
    runtime_dir: Path
    support_dir: Path
    ext_dir: Path
    server_dir: Path

    def staging_dirs(self) -> List[Path]:
        """需要归档的暂存目录，按归档顺序排列"""
        return [self.support_dir, self.ext_dir, self.server_dir]


def resolve(request: PackagingRequest) -> ResolvedPaths:
    """计算输出路径（纯函数，无副作用）"""
    runtime_dir = request.destination_root / request.runtime_version
    return ResolvedPaths(
        runtime_dir=runtime_dir,
        support_dir=runtime_dir / f"{SUPPORT_PREFIX}{request.cxx_compat_id}",
        ext_dir=runtime_dir / f"{EXTENSION_PREFIX}{request.ext_compat_id}",
        server_dir=runtime_dir / f"{NGINX_PREFIX}{request.server_version}-{request.cxx_compat_id}",
    )
