"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(config_file, fake_stats):
        store = ConfigStore(config_file)
"""

from __future__ import annotations

import gzip
import io
import logging
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from runconf.config import settings as settings_module
from runconf.interfaces import IProcessStats


SAMPLE_CONFIG = """\
# 示例配置
n_events = 1000
ratio 0.25
name=run42

threshold -1.5e3
flag 1
"""


# ============================================================================
# 设置 Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    """每个测试前后清空全局设置缓存"""
    settings_module._settings = None
    yield
    settings_module._settings = None


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """移除 configure_logging 安装的 handler，恢复默认级别"""
    yield
    logger = logging.getLogger("runconf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# ============================================================================
# 配置源 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_stream() -> io.StringIO:
    """示例配置文本流"""
    return io.StringIO(SAMPLE_CONFIG)


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    """示例配置文件"""
    path = temp_dir / "run.conf"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def gz_config_file(temp_dir: Path) -> Path:
    """gzip 压缩的示例配置文件"""
    path = temp_dir / "run.conf.gz"
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write(SAMPLE_CONFIG)
    return path


# ============================================================================
# 进程统计 Fixtures
# ============================================================================

class FakeStats(IProcessStats):
    """可控的进程统计（内存读数按队列依次返回，耗尽后保持最后一个）"""

    def __init__(self, memory: list[int] | None = None):
        self.memory = list(memory or [10])
        self.now = 1_700_000_000
        self.user = 3
        self.system = 1
        self.memory_calls = 0

    def wall_time(self) -> int:
        return self.now

    def wall_time_hr(self) -> str:
        return f"T{self.now}\n"

    def user_cpu_seconds(self) -> int:
        return self.user

    def system_cpu_seconds(self) -> int:
        return self.system

    def resident_memory_mb(self) -> int:
        self.memory_calls += 1
        if len(self.memory) > 1:
            return self.memory.pop(0)
        return self.memory[0]


@pytest.fixture
def fake_stats() -> FakeStats:
    """固定读数的进程统计"""
    return FakeStats(memory=[10, 25, 5, 30])


@pytest.fixture
def make_stats():
    """按给定内存读数构造 FakeStats"""
    return FakeStats
