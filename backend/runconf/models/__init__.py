"""
数据模型层 - 配置条目与配置表

- ConfigEntry: 单个配置值（原始文本 + 数值解释 + 成功标记）
- ConfigStore: token -> ConfigEntry 映射，逐行解析构建
"""

from .entry import ConfigEntry, Extraction, parse_numeric, resolve_kind
from .store import ConfigSource, ConfigStore

__all__ = [
    "ConfigEntry",
    "Extraction",
    "parse_numeric",
    "resolve_kind",
    "ConfigStore",
    "ConfigSource",
]
