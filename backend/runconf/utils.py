"""
通用工具 - 文件编号与版本字符串
"""

from __future__ import annotations

from .config import get_settings


def file_numbering(index: int, max_index: int) -> str:
    """
    按最大编号的位数左补零

    Examples:
        >>> file_numbering(7, 120)
        '007'
        >>> file_numbering(0, 9)
        '0'
    """
    if index < 0 or max_index < 0:
        raise ValueError(f"indices must be non-negative, got {index}, {max_index}")
    width = len(str(max_index))
    return str(index).zfill(width)


def get_revision() -> str:
    """版本字符串：优先取设置中的 revision，否则取包版本"""
    from . import __version__

    return get_settings().revision or __version__
