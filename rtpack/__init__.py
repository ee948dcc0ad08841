"""
rtpack - 独立运行时打包工具

Packages a pre-built standalone runtime (native support binaries, the Ruby
extension build and the bundled Nginx build) into versioned tarballs.
"""

__version__ = "6.0.0"
__license__ = "MIT"

from .config.schema import PackagingRequest, RtpackSettings  # noqa: E402
from .build.packager import Packager, PackageResult  # noqa: E402

__all__ = ["PackagingRequest", "RtpackSettings", "Packager", "PackageResult", "__version__"]
