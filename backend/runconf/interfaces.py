"""
模块接口契约 - 定义外部协作者的抽象接口与异常

设计原则：
1. 配置表只依赖“可逐行读取的文本源”，不关心来源
2. 运行摘要通过 IProcessStats 获取进程统计，便于单元测试中 mock 替换
3. 所有异常继承 RunconfError，由调用方降级为告警

使用方式：
    from runconf.interfaces import IProcessStats

    class FixedStats(IProcessStats):
        def resident_memory_mb(self) -> int:
            return 42
        ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Protocol


# ============================================================================
# 配置源接口
# ============================================================================

class ILineSource(Protocol):
    """逐行文本源协议（文件对象、StringIO、字符串列表均满足）"""

    def __iter__(self) -> Iterator[str]:
        ...


# ============================================================================
# 进程统计接口
# ============================================================================

class IProcessStats(ABC):
    """进程统计接口 - 墙钟时间/CPU时间/内存占用"""

    @abstractmethod
    def wall_time(self) -> int:
        """自 Epoch 起的秒数"""
        ...

    @abstractmethod
    def wall_time_hr(self) -> str:
        """
        人类可读的当前时间

        Returns:
            ctime 格式字符串，以换行结尾
        """
        ...

    @abstractmethod
    def user_cpu_seconds(self) -> int:
        """进程已消耗的用户态CPU秒数"""
        ...

    @abstractmethod
    def system_cpu_seconds(self) -> int:
        """进程已消耗的内核态CPU秒数"""
        ...

    @abstractmethod
    def resident_memory_mb(self) -> int:
        """
        当前常驻内存（MiB）

        Returns:
            查询失败时返回 0（并输出告警）
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class RunconfError(Exception):
    """基础异常"""
    pass


class SourceOpenError(RunconfError):
    """配置源/日志文件无法打开"""
    pass
