"""
配置查询 - getconfig

使用方式：
    store = ConfigStore().append("run.conf").append("override.conf")
    n = getconfig(store, "n_events", int)
    name = getconfig("run.conf", "output")        # 一次性查询，返回 ConfigEntry

查询缺失的 token 时会在配置表中插入空条目并告警“未指定”，
需要无副作用查询时使用 ConfigStore.get。
"""

from __future__ import annotations

import logging
from typing import Any, overload

from .models import ConfigEntry, ConfigSource, ConfigStore

logger = logging.getLogger(__name__)


@overload
def getconfig(source: ConfigStore | ConfigSource, token: str) -> ConfigEntry: ...


@overload
def getconfig(source: ConfigStore | ConfigSource, token: str, as_type: type | str) -> Any: ...


def getconfig(
    source: ConfigStore | ConfigSource,
    token: str,
    as_type: type | str | None = None,
) -> Any:
    """
    按 token 查询配置

    Args:
        source: 配置表，或文件名/文本流（构建临时配置表后查询）
        token: 配置项名称
        as_type: 目标类型（str/float/int/bool/Decimal 或 "char"/"uint" 等）；
            省略时返回 ConfigEntry

    Returns:
        ConfigEntry 副本，或按 as_type 提取后的值
    """
    store = source if isinstance(source, ConfigStore) else ConfigStore(source)
    entry = store.setdefault(token)
    if not entry.raw:
        logger.warning(f"[config] {token} is not specified in configfile! (getconfig)")
    result = entry.copy()
    if as_type is None:
        return result
    return result.coerce(as_type)
