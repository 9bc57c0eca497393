"""
运行摘要单元测试
"""

import logging
import time
from pathlib import Path

import pytest

from runconf.config import SummaryConfig
from runconf.runtime import MemorySampler, RunSummary, write_log


class TestRunSummary:
    """运行摘要测试"""

    def test_start_state(self, fake_stats):
        summary = RunSummary(stats=fake_stats)
        assert summary.start_time == fake_stats.now
        assert summary.start_time_hr == f"T{fake_stats.now}\n"
        assert not summary.is_written

    def test_max_memory_monotonic(self, fake_stats):
        """测试峰值只增不减（读数 10, 25, 5, 30）"""
        summary = RunSummary(stats=fake_stats)
        assert summary.show_max_mem() == 25
        assert summary.show_max_mem() == 25
        assert summary.show_max_mem() == 30

    def test_accessors_sample_memory(self, fake_stats):
        summary = RunSummary(stats=fake_stats)
        calls = fake_stats.memory_calls
        summary.logfile_name = "x.log"
        assert summary.logfile_name == "x.log"
        summary.write_logfile = False
        assert summary.write_logfile is False
        assert fake_stats.memory_calls == calls + 4

    def test_format_summary(self, make_stats):
        stats = make_stats(memory=[7])
        summary = RunSummary(stats=stats)
        stats.now += 42
        assert summary.format_summary() == (
            "Started at: T1700000000\n"
            "Running time: 42 seconds\n"
            "User time: 3 seconds\n"
            "CPU time: 1 seconds\n"
            "Memory usage: 7 MegaBytes\n"
            "Ended at: T1700000042\n"
        )

    def test_finalize_writes_once(self, temp_dir: Path, make_stats):
        """测试重复 finalize 只写一次"""
        path = temp_dir / "run.log"
        summary = RunSummary(logfile_name=str(path), stats=make_stats(memory=[5]))
        assert summary.finalize() is True
        first = path.read_text(encoding="utf-8")
        assert "Memory usage: 5 MegaBytes" in first
        assert summary.finalize() is False
        assert path.read_text(encoding="utf-8") == first
        assert summary.is_written

    def test_finalize_to_stderr(self, make_stats, capsys):
        summary = RunSummary(stats=make_stats())
        summary.finalize()
        assert "Started at: T1700000000" in capsys.readouterr().err

    def test_finalize_disabled(self, temp_dir: Path, make_stats):
        path = temp_dir / "run.log"
        summary = RunSummary(logfile_name=str(path), write_logfile=False, stats=make_stats())
        assert summary.finalize() is False
        assert not path.exists()

    def test_context_manager(self, temp_dir: Path, make_stats):
        path = temp_dir / "ctx.log"
        with RunSummary(logfile_name=str(path), stats=make_stats()):
            pass
        assert path.read_text(encoding="utf-8").startswith("Started at:")

    def test_finalize_unwritable(self, temp_dir: Path, make_stats, caplog):
        """测试无法写入时只告警"""
        blocker = temp_dir / "file"
        blocker.write_text("x")
        summary = RunSummary(logfile_name=str(blocker / "run.log"), stats=make_stats())
        with caplog.at_level(logging.WARNING):
            assert summary.finalize() is False
        assert "Could not open logfile" in caplog.text

    def test_from_settings(self, temp_dir: Path, make_stats):
        config = SummaryConfig(logfile_name=str(temp_dir / "s.log"), write_logfile=False)
        summary = RunSummary.from_settings(config, stats=make_stats())
        assert summary.write_logfile is False
        assert summary.logfile_name.endswith("s.log")


class TestMemorySampler:
    """周期采样测试"""

    def test_invalid_interval(self, fake_stats):
        with pytest.raises(ValueError):
            MemorySampler(RunSummary(stats=fake_stats), 0)

    def test_sampler_updates_peak(self, make_stats):
        stats = make_stats(memory=[1, 1, 50])
        summary = RunSummary(stats=stats)
        sampler = summary.start_sampler(0.01)
        deadline = time.monotonic() + 5
        while stats.memory_calls < 3 and time.monotonic() < deadline:
            time.sleep(0.01)
        summary.stop_sampler()
        assert not sampler.running
        assert summary.show_max_mem() == 50

    def test_no_sampling_after_stop(self, make_stats):
        """测试 stop() 返回后不再采样"""
        stats = make_stats(memory=[1])
        summary = RunSummary(stats=stats)
        sampler = summary.start_sampler(0.001)
        deadline = time.monotonic() + 5
        while stats.memory_calls < 5 and time.monotonic() < deadline:
            time.sleep(0.001)
        sampler.stop()
        calls = stats.memory_calls
        time.sleep(0.05)
        assert stats.memory_calls == calls
        assert not sampler.running

    def test_finalize_stops_sampler(self, make_stats):
        summary = RunSummary(write_logfile=False, stats=make_stats())
        sampler = summary.start_sampler(10)
        assert sampler.running
        summary.finalize()
        assert not sampler.running


class TestWriteLog:
    """一次性日志测试"""

    def test_write_log_file(self, temp_dir: Path, make_stats):
        path = temp_dir / "log.txt"
        assert write_log(str(path), stats=make_stats(memory=[9]), started_at="S\n", revision="r1")
        assert path.read_text(encoding="utf-8") == (
            "Revision: r1\n"
            "Started at: S\n"
            "User time: 3 seconds\n"
            "CPU time: 1 seconds\n"
            "Memory usage: 9 MegaBytes\n"
            "Logged at: T1700000000\n"
        )

    def test_write_log_default_revision(self, temp_dir: Path, make_stats):
        path = temp_dir / "log.txt"
        write_log(str(path), stats=make_stats())
        assert path.read_text(encoding="utf-8").startswith("Revision: 0.1.0\n")

    def test_write_log_failure(self, temp_dir: Path, make_stats, caplog):
        blocker = temp_dir / "file"
        blocker.write_text("x")
        with caplog.at_level(logging.WARNING):
            assert write_log(str(blocker / "a.log"), stats=make_stats()) is False
        assert "write_log" in caplog.text
