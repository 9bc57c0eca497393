"""
日志配置 - 按 LoggingConfig 初始化 runconf 的日志输出

所有诊断信息（解析失败、精度损失、缺失 token 等）都通过
logging.getLogger("runconf.*") 以 WARNING 级别输出到标准错误。
"""

from __future__ import annotations

import logging
import sys

from .settings import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_MARK = "_runconf_handler"


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """
    配置 runconf 根日志器（可重复调用，旧的 handler 会被替换）

    Args:
        config: 日志配置；省略时使用默认值

    Returns:
        runconf 根日志器
    """
    config = config or LoggingConfig()
    logger = logging.getLogger("runconf")
    logger.setLevel(_parse_level(config.log_level))

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_to_file and config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, _HANDLER_MARK, True)
        logger.addHandler(handler)
    return logger


def _parse_level(level: str) -> int:
    """解析日志级别名称，未知名称按 INFO 处理"""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO
