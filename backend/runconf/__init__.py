"""
runconf - 配置文件读取与进程运行统计工具

模块结构：
- models/     配置条目（ConfigEntry）与配置表（ConfigStore）
- lookup      getconfig 查询入口（配置表/文本流/文件名）
- io/         配置源打开（透明解压缩）
- runtime/    进程资源统计与运行摘要（RunSummary）
- config/     工具自身的运行期设置（pydantic-settings）
- cli         命令行入口
"""

__version__ = "0.1.0"

from .lookup import getconfig
from .models import ConfigEntry, ConfigStore, Extraction

__all__ = [
    "ConfigEntry",
    "ConfigStore",
    "Extraction",
    "getconfig",
    "__version__",
]
