"""
进程统计单元测试
"""

import logging
import time
from pathlib import Path

from runconf.runtime import ProcessStats


class TestProcessStats:
    """标准库实现测试"""

    def test_wall_time(self):
        stats = ProcessStats()
        assert abs(stats.wall_time() - int(time.time())) <= 1
        assert stats.wall_time_hr().endswith("\n")

    def test_cpu_seconds_non_negative(self):
        stats = ProcessStats()
        assert stats.user_cpu_seconds() >= 0
        assert stats.system_cpu_seconds() >= 0

    def test_resident_memory_from_statm(self, temp_dir: Path, monkeypatch):
        """测试从 statm 读取常驻页数"""
        statm = temp_dir / "statm"
        statm.write_text("1000 512 100 10 0 200 0\n")
        monkeypatch.setattr("os.sysconf", lambda name: 4096)
        assert ProcessStats(statm_path=statm).resident_memory_mb() == 2

    def test_resident_memory_fallback(self, temp_dir: Path, caplog):
        """测试 statm 不可用时退回峰值"""
        with caplog.at_level(logging.WARNING):
            value = ProcessStats(statm_path=temp_dir / "missing").resident_memory_mb()
        assert value >= 0

    def test_missing_resource_is_silent(self, temp_dir: Path, monkeypatch, caplog):
        """测试无 resource 模块时按 0 返回且不重复告警"""
        monkeypatch.setattr("runconf.runtime.stats.resource", None)
        stats = ProcessStats(statm_path=temp_dir / "missing")
        with caplog.at_level(logging.WARNING):
            assert stats.user_cpu_seconds() == 0
            assert stats.system_cpu_seconds() == 0
            assert stats.user_cpu_seconds() == 0
        assert "getrusage" not in caplog.text
