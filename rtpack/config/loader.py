"""
配置加载器

负责从 YAML 文件加载设置并进行验证。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .schema import RtpackSettings


class ConfigError(Exception):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def __init__(self, message: str, errors: List[Dict[str, Any]]):
        super().__init__(message)
        self.errors = errors

    def format_errors(self) -> str:
        """格式化错误信息为人类可读的格式"""
        formatted = []
        for error in self.errors:
            loc = " -> ".join(str(item) for item in error.get('loc', []))
            msg = error.get('msg', '未知错误')
            input_val = error.get('input', '')

            if loc:
                formatted.append(f"字段 '{loc}': {msg}")
                if input_val:
                    formatted.append(f"  输入值: {input_val}")
            else:
                formatted.append(f"根级别: {msg}")

        return "\n".join(formatted)

    def format_errors_json(self) -> str:
        """格式化错误信息为 JSON 格式"""
        return json.dumps(self.errors, ensure_ascii=False, indent=2, default=str)


class ConfigLoader:
    """设置文件加载器"""

    # 需要相对于设置文件目录解析的路径字段
    PATH_FIELDS = [
        ('nginx', 'tarball'),
    ]

    def __init__(self):
        self.yaml = YAML()
        self.yaml.preserve_quotes = True
        self.yaml.width = 4096

    def load_from_file(self, config_path: Union[str, Path]) -> RtpackSettings:
        """从文件加载设置

        Args:
            config_path: 设置文件路径

        Returns:
            RtpackSettings: 验证后的设置实例

        Raises:
            ConfigError: 设置加载或验证错误
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"配置文件不存在: {config_path}")

        if not config_path.is_file():
            raise ConfigError(f"配置路径不是文件: {config_path}")

        if config_path.suffix.lower() not in ['.yaml', '.yml']:
            raise ConfigError(f"配置文件必须是 .yaml 或 .yml 格式: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw_data = self.yaml.load(f)
        except YAMLError as e:
            raise ConfigError(f"YAML 解析错误: {e}") from e
        except OSError as e:
            raise ConfigError(f"文件读取错误: {e}") from e

        if raw_data is None:
            return RtpackSettings()

        if not isinstance(raw_data, dict):
            raise ConfigError("配置文件根级别必须是对象/字典格式")

        # ruamel 返回的 CommentedMap 转为普通字典，便于后续处理
        data = json.loads(json.dumps(raw_data))
        self._resolve_relative_paths(data, config_path.parent)

        return self.load_from_dict(data)

    def load_from_dict(self, data: Dict[str, Any], base_path: Optional[Path] = None) -> RtpackSettings:
        """从字典加载设置

        Raises:
            ConfigValidationError: 设置验证错误
        """
        if base_path:
            data = json.loads(json.dumps(data))
            self._resolve_relative_paths(data, base_path)

        try:
            return RtpackSettings.from_dict(data)
        except ValidationError as e:
            raise ConfigValidationError("配置验证失败", list(e.errors())) from e

    def save_to_file(self, settings: RtpackSettings, output_path: Union[str, Path]) -> None:
        """保存设置到文件

        Raises:
            ConfigError: 保存错误
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                self.yaml.dump(settings.to_dict(), f)
        except OSError as e:
            raise ConfigError(f"保存配置文件失败: {e}") from e

    def validate_file(self, config_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """验证设置文件并返回错误列表，空列表表示验证通过"""
        try:
            self.load_from_file(config_path)
            return []
        except ConfigValidationError as e:
            return e.errors
        except ConfigError as e:
            return [{
                'loc': [],
                'msg': str(e),
                'type': 'config_error'
            }]

    def _resolve_relative_paths(self, data: Dict[str, Any], base_path: Path) -> None:
        for section, key in self.PATH_FIELDS:
            current = data.get(section)
            if not isinstance(current, dict):
                continue
            value = current.get(key)
            if isinstance(value, str) and value and not Path(value).is_absolute():
                current[key] = str((base_path / value).resolve())


# 全局加载器实例
config_loader = ConfigLoader()


def load_settings(config_path: Optional[Union[str, Path]] = None) -> RtpackSettings:
    """便捷函数：加载设置文件，未指定文件时返回默认设置"""
    if config_path is None:
        return RtpackSettings()
    return config_loader.load_from_file(config_path)


def validate_settings(config_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """便捷函数：验证设置文件"""
    return config_loader.validate_file(config_path)


def save_settings(settings: RtpackSettings, output_path: Union[str, Path]) -> None:
    """便捷函数：保存设置文件"""
    config_loader.save_to_file(settings, output_path)
