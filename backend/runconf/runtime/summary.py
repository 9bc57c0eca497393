"""
运行摘要 - 记录启动时间与内存峰值，结束时写出摘要日志

职责：
1. 进程开始时创建 RunSummary，记录启动时间与初始内存
2. 运行期间按需（或由 MemorySampler 周期）采样内存峰值
3. finalize() 时写出固定格式摘要（文件或标准错误），只写一次
4. 写入失败只告警，不影响进程退出

使用方式：
    with RunSummary(logfile_name="run.log") as summary:
        summary.start_sampler(1.0)
        do_work()
    # 退出 with 时自动 finalize

测试要点：
- test_finalize_writes_once: 重复 finalize 只写一次
- test_max_memory_monotonic: 峰值只增不减
- test_write_log_failure: 无法写入时只告警
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import IO

from ..config import SummaryConfig, get_settings
from ..interfaces import IProcessStats, SourceOpenError
from ..io import open_writable
from ..utils import get_revision
from .stats import ProcessStats

logger = logging.getLogger(__name__)


class MemorySampler:
    """基于 threading.Timer 的周期内存采样任务"""

    def __init__(self, summary: RunSummary, interval: float):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.summary = summary
        self.interval = interval
        self._timer: threading.Timer | None = None
        self._stopped = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._stopped.is_set()

    def start(self) -> None:
        self._stopped.clear()
        self._schedule()

    def stop(self) -> None:
        """停止采样；返回后不会再有新的采样"""
        with self._lock:
            self._stopped.set()
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            if timer is not threading.current_thread():
                timer.join()

    def _schedule(self) -> None:
        # 检查与赋值在同一把锁内，stop() 之后不会留下新的定时器
        with self._lock:
            if self._stopped.is_set():
                return
            self._timer = threading.Timer(self.interval, self._tick)
            self._timer.daemon = True
            self._timer.start()

    def _tick(self) -> None:
        if self._stopped.is_set():
            return
        self.summary.acquire_max_mem()
        self._schedule()


class RunSummary:
    """运行摘要上下文（显式创建、显式结束）"""

    def __init__(
        self,
        logfile_name: str = "",
        write_logfile: bool = True,
        stats: IProcessStats | None = None,
    ):
        self.stats = stats or ProcessStats()
        self._lock = threading.Lock()
        self._logfile_name = logfile_name
        self._write_logfile = write_logfile
        self._sampler: MemorySampler | None = None
        self._written = False

        self.start_time = self.stats.wall_time()
        self.start_time_hr = self.stats.wall_time_hr()
        self._max_memory = self.stats.resident_memory_mb()

    @classmethod
    def from_settings(
        cls,
        config: SummaryConfig | None = None,
        stats: IProcessStats | None = None,
    ) -> RunSummary:
        """按 SummaryConfig 创建（采样间隔大于 0 时启动周期采样）"""
        config = config or get_settings().summary
        summary = cls(
            logfile_name=config.logfile_name,
            write_logfile=config.write_logfile,
            stats=stats,
        )
        if config.sample_interval_sec > 0:
            summary.start_sampler(config.sample_interval_sec)
        return summary

    # === 设置项（访问时顺带采样内存） ===

    @property
    def logfile_name(self) -> str:
        self.acquire_max_mem()
        return self._logfile_name

    @logfile_name.setter
    def logfile_name(self, name: str) -> None:
        self._logfile_name = name
        self.acquire_max_mem()

    @property
    def write_logfile(self) -> bool:
        self.acquire_max_mem()
        return self._write_logfile

    @write_logfile.setter
    def write_logfile(self, flag: bool) -> None:
        self._write_logfile = flag
        self.acquire_max_mem()

    @property
    def is_written(self) -> bool:
        return self._written

    # === 内存峰值 ===

    def acquire_max_mem(self) -> None:
        """采样当前内存并更新峰值"""
        memory = self.stats.resident_memory_mb()
        with self._lock:
            if memory > self._max_memory:
                self._max_memory = memory

    def show_max_mem(self) -> int:
        """采样后返回峰值（MiB）"""
        self.acquire_max_mem()
        return self._max_memory

    def start_sampler(self, interval: float) -> MemorySampler:
        """启动周期采样（已在运行时先停止旧的）"""
        self.stop_sampler()
        self._sampler = MemorySampler(self, interval)
        self._sampler.start()
        return self._sampler

    def stop_sampler(self) -> None:
        if self._sampler is not None:
            self._sampler.stop()
            self._sampler = None

    # === 结束 ===

    def format_summary(self) -> str:
        """生成固定格式摘要文本"""
        return (
            f"Started at: {self.start_time_hr}"
            f"Running time: {self.stats.wall_time() - self.start_time} seconds\n"
            f"User time: {self.stats.user_cpu_seconds()} seconds\n"
            f"CPU time: {self.stats.system_cpu_seconds()} seconds\n"
            f"Memory usage: {self._max_memory} MegaBytes\n"
            f"Ended at: {self.stats.wall_time_hr()}"
        )

    def finalize(self) -> bool:
        """
        结束运行：停止采样、最终采样、写出摘要（仅一次）

        Returns:
            本次调用是否写出了摘要
        """
        self.stop_sampler()
        self.acquire_max_mem()
        if self._written or not self._write_logfile:
            return False

        self._written = True
        return _emit(self._logfile_name, self.format_summary(), "RunSummary.finalize")

    def __enter__(self) -> RunSummary:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.finalize()
        return False


def write_log(
    destination: str = "",
    stats: IProcessStats | None = None,
    started_at: str = "",
    revision: str | None = None,
) -> bool:
    """
    写出一次性日志（当前内存而非峰值）

    Args:
        destination: 日志文件名；空串写到标准错误
        stats: 进程统计实现
        started_at: 启动时间文本（通常取自 RunSummary.start_time_hr）
        revision: 版本字符串；省略时取 get_revision()

    Returns:
        是否写入成功
    """
    stats = stats or ProcessStats()
    started_at = started_at or "unknown\n"
    if revision is None:
        revision = get_revision()
    text = (
        f"Revision: {revision}\n"
        f"Started at: {started_at}"
        f"User time: {stats.user_cpu_seconds()} seconds\n"
        f"CPU time: {stats.system_cpu_seconds()} seconds\n"
        f"Memory usage: {stats.resident_memory_mb()} MegaBytes\n"
        f"Logged at: {stats.wall_time_hr()}"
    )
    return _emit(destination, text, "write_log")


def _emit(destination: str, text: str, operation: str) -> bool:
    """写出文本；失败时告警并返回 False"""
    if not destination:
        return _write_stream(sys.stderr, text, "stderr", operation)

    try:
        stream = open_writable(destination)
    except SourceOpenError as e:
        logger.warning(f"[config] Could not open logfile {destination} ! ({e}) ({operation})")
        return False
    with stream:
        return _write_stream(stream, text, destination, operation)


def _write_stream(stream: IO[str], text: str, name: str, operation: str) -> bool:
    try:
        stream.write(text)
        stream.flush()
    except (OSError, ValueError) as e:
        logger.warning(f"[config] Could not write into logfile {name} ! ({e}) ({operation})")
        return False
    return True
