"""
配置表 - token -> ConfigEntry 映射

职责：
1. 逐行解析 "TOKEN VALUE" / "TOKEN=VALUE" 文本并合并进映射
2. 后写入的同名 token 覆盖先前的值
3. 无法打开的源、缺少值的行只告警不中断

测试要点：
- test_append_mixed_syntax: '=' 与空白等价，注释与空行被忽略
- test_append_missing_value: 只有 token 的行告警并跳过
- test_append_trailing_tokens: 多余字段告警但仍接受
- test_append_unopenable: 文件不存在时配置表不变
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator
from typing import Union

from ..interfaces import ILineSource, SourceOpenError
from ..io import READ_ERRORS, open_readable
from .entry import WHITESPACE, ConfigEntry

logger = logging.getLogger(__name__)

ConfigSource = Union[str, os.PathLike, ILineSource]

# 字段只按 ASCII 空白分隔（NBSP 等属于字段内容）
_FIELD_RE = re.compile(f"[^{re.escape(WHITESPACE)}]+")


class ConfigStore:
    """配置表（同一 token 至多一个条目）"""

    def __init__(self, source: ConfigSource | None = None):
        self._entries: dict[str, ConfigEntry] = {}
        if source is not None:
            self.append(source)

    def append(self, source: ConfigSource) -> ConfigStore:
        """
        追加一个配置源的内容

        Args:
            source: 文件名（str/PathLike）或任意逐行可迭代的文本源

        Returns:
            self（支持链式调用）
        """
        if isinstance(source, (str, os.PathLike)):
            return self._append_named(os.fspath(source))
        return self._append_lines(source)

    def _append_named(self, name: str) -> ConfigStore:
        try:
            stream = open_readable(name)
        except SourceOpenError as e:
            logger.warning(f"[config] Could not open config file {name} ! ({e}) (ConfigStore.append)")
            return self
        with stream:
            try:
                return self._append_lines(stream)
            except READ_ERRORS as e:
                # 已读取的行保留
                logger.warning(f"[config] Could not read config file {name} ! ({e}) (ConfigStore.append)")
                return self

    def _append_lines(self, lines: Iterable[str]) -> ConfigStore:
        for line in lines:
            line = line.rstrip("\r\n")
            if not line or line.startswith("#"):
                continue
            fields = _FIELD_RE.findall(line.replace("=", " "))
            if not fields:
                continue
            if len(fields) < 2:
                logger.warning(f"[config] Could not extract config value from line: {line} (ConfigStore.append)")
                continue
            if len(fields) > 2:
                logger.warning(
                    f"[config] An other entry is also present after config value in line: {line} "
                    "(ConfigStore.append)"
                )
            token, value = fields[0], fields[1]
            self._entries[token] = ConfigEntry(value)
        return self

    def clear(self) -> ConfigStore:
        """清空内容"""
        self._entries.clear()
        return self

    def get(self, token: str) -> ConfigEntry | None:
        """纯查询：不存在时返回 None，不修改配置表"""
        entry = self._entries.get(token)
        return entry.copy() if entry is not None else None

    def setdefault(self, token: str) -> ConfigEntry:
        """取出条目；不存在时插入空条目（返回内部对象）"""
        return self._entries.setdefault(token, ConfigEntry())

    def tokens(self) -> list[str]:
        return sorted(self._entries)

    def items(self) -> Iterator[tuple[str, ConfigEntry]]:
        for token in self.tokens():
            yield token, self._entries[token].copy()

    def to_dict(self) -> dict[str, str]:
        """token -> 原始文本"""
        return {token: entry.raw for token, entry in self.items()}

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens())

    def __repr__(self) -> str:
        return f"ConfigStore({self.to_dict()!r})"
