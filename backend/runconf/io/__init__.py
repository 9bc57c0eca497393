"""
输入输出层 - 配置源与日志文件的打开
"""

from .sources import READ_ERRORS, open_readable, open_writable

__all__ = ["open_readable", "open_writable", "READ_ERRORS"]
