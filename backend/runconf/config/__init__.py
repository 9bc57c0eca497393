"""
设置层 - runconf 自身的运行期设置与日志初始化

职责：
- 加载 runconf.yaml（可选）并允许 RUNCONF_* 环境变量覆盖
- 提供类型安全的设置访问接口
"""

from .logging_config import configure_logging
from .settings import (
    LoggingConfig,
    RunconfSettings,
    SummaryConfig,
    get_settings,
    reload_settings,
)

__all__ = [
    "RunconfSettings",
    "LoggingConfig",
    "SummaryConfig",
    "get_settings",
    "reload_settings",
    "configure_logging",
]
