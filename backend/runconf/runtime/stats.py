"""
进程资源统计 - 墙钟时间/CPU时间/内存占用

职责：
- 同步查询当前进程的资源使用（getrusage、/proc/self/statm）
- 查询失败时告警并返回 0，不抛异常

依赖：
- resource 模块（POSIX）；不可用时 CPU 时间与峰值内存均返回 0
"""

from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path

from ..interfaces import IProcessStats

logger = logging.getLogger(__name__)

try:
    import resource
except ImportError:  # Windows
    resource = None  # type: ignore[assignment]
    logger.warning("[config] getrusage is not available on this platform, CPU time reported as 0 (ProcessStats)")

MEGABYTE = 1048576
STATM_PATH = Path("/proc/self/statm")


class ProcessStats(IProcessStats):
    """基于标准库的进程统计实现"""

    def __init__(self, statm_path: Path = STATM_PATH):
        self.statm_path = statm_path

    def wall_time(self) -> int:
        return int(time.time())

    def wall_time_hr(self) -> str:
        return time.ctime() + "\n"

    def user_cpu_seconds(self) -> int:
        usage = self._rusage()
        return int(usage.ru_utime) if usage else 0

    def system_cpu_seconds(self) -> int:
        usage = self._rusage()
        return int(usage.ru_stime) if usage else 0

    def resident_memory_mb(self) -> int:
        """当前常驻内存；/proc 不可用时退回到 getrusage 的峰值"""
        try:
            fields = self.statm_path.read_text().split()
            return int(fields[1]) * os.sysconf("SC_PAGE_SIZE") // MEGABYTE
        except (OSError, IndexError, ValueError):
            pass

        usage = self._rusage()
        if usage is None:
            logger.warning("[config] Could not get memory! (ProcessStats.resident_memory_mb)")
            return 0
        # macOS 以字节计，Linux 以 KiB 计
        scale = 1 if sys.platform == "darwin" else 1024
        return usage.ru_maxrss * scale // MEGABYTE

    @staticmethod
    def _rusage():
        if resource is None:
            return None
        return resource.getrusage(resource.RUSAGE_SELF)
