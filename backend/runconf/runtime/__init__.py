"""
运行统计层 - 进程资源查询与运行摘要

- ProcessStats: 墙钟/CPU/内存查询（IProcessStats 实现）
- RunSummary: 显式创建与结束的运行摘要上下文
- MemorySampler: 周期内存采样任务
- write_log: 一次性写出当前统计
"""

from .stats import ProcessStats
from .summary import MemorySampler, RunSummary, write_log

__all__ = ["ProcessStats", "RunSummary", "MemorySampler", "write_log"]
