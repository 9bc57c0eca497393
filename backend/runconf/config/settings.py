"""
运行期设置 - 读取 runconf.yaml

职责：
- 日志级别/日志文件等输出参数
- 运行摘要（RunSummary）的默认行为
- 提供环境变量覆盖机制（RUNCONF_ 前缀，嵌套用 __ 分隔）
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_SETTINGS_PATH = Path("runconf.yaml")
FALLBACK_SETTINGS_PATH = Path("config/runconf.yaml")


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: Path | None = None


class SummaryConfig(BaseModel):
    """运行摘要配置"""

    logfile_name: str = ""  # 空串表示写到标准错误
    write_logfile: bool = True
    sample_interval_sec: float = Field(default=0.0, ge=0.0)  # 0 表示不周期采样


class RunconfSettings(BaseSettings):
    """运行期设置（支持环境变量覆盖）"""

    revision: str = ""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)

    model_config = {
        "env_prefix": "RUNCONF_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RunconfSettings:
        """从YAML文件加载设置（RUNCONF_ 环境变量优先于文件内容）"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        values: dict[str, Any] = {
            "logging": cls._extract(data, "logging"),
            "summary": cls._extract(data, "summary"),
        }
        if "revision" in data:
            values["revision"] = str(data["revision"])
        cls._resolve_paths(values, base_dir=path.parent)

        # 构造参数优先于环境变量，因此把环境变量中显式给出的字段合并到文件值之上
        overrides = cls().model_dump(exclude_unset=True)
        return cls(**_merge(values, overrides))

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（支持 {default: x} 写法）"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    @staticmethod
    def _resolve_paths(values: dict[str, Any], base_dir: Path) -> None:
        """相对路径按设置文件所在目录解析"""
        log_file = values["logging"].get("log_file")
        if log_file and not Path(log_file).is_absolute():
            values["logging"]["log_file"] = (base_dir / log_file).resolve()
        name = values["summary"].get("logfile_name")
        if name and name != "-" and not Path(name).is_absolute():
            values["summary"]["logfile_name"] = str((base_dir / name).resolve())


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """按键递归合并，overrides 优先"""
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


# 全局设置实例
_settings: RunconfSettings | None = None


def _default_path() -> Path:
    if not DEFAULT_SETTINGS_PATH.exists() and FALLBACK_SETTINGS_PATH.exists():
        return FALLBACK_SETTINGS_PATH
    return DEFAULT_SETTINGS_PATH


def get_settings() -> RunconfSettings:
    """获取全局设置（惰性加载）"""
    global _settings
    if _settings is None:
        _settings = RunconfSettings.from_yaml(_default_path())
    return _settings


def reload_settings(yaml_path: str | Path | None = None) -> RunconfSettings:
    """重新加载设置"""
    global _settings
    _settings = RunconfSettings.from_yaml(yaml_path or _default_path())
    return _settings
