"""平台相关信息"""

from .compat import (
    CompatibilityError,
    CompatibilityIds,
    cxx_binary_compatibility_id,
    ruby_extension_binary_compatibility_id,
)

__all__ = [
    "CompatibilityError",
    "CompatibilityIds",
    "cxx_binary_compatibility_id",
    "ruby_extension_binary_compatibility_id",
]
