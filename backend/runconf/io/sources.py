"""
配置源打开 - 按文件后缀透明压缩/解压

职责：
- open_readable: 打开文本源（"-" 为标准输入；.gz/.bz2/.xz/.lzma 自动解压）
- open_writable: 打开文本输出（"-" 为标准输出；同样按后缀压缩）
- 打开失败统一抛出 SourceOpenError

测试要点：
- test_open_plain / test_open_gzip: 纯文本与压缩文件
- test_open_missing: 文件不存在
- test_open_writable_creates_parent: 自动创建父目录
"""

from __future__ import annotations

import bz2
import gzip
import lzma
import sys
from pathlib import Path
from typing import IO, Callable

from ..interfaces import SourceOpenError

ENCODING = "utf-8"

# 压缩流读取时可能抛出的异常（格式损坏等）
READ_ERRORS = (OSError, EOFError, lzma.LZMAError, UnicodeDecodeError)

_OPENERS: dict[str, Callable[..., IO[str]]] = {
    ".gz": gzip.open,
    ".bz2": bz2.open,
    ".xz": lzma.open,
    ".lzma": lzma.open,
}


def _opener_for(path: Path) -> Callable[..., IO[str]]:
    return _OPENERS.get(path.suffix.lower(), open)


def _open_std(stream: IO[str], mode: str) -> IO[str]:
    """包装标准流（关闭时不关闭底层文件描述符）"""
    try:
        return open(stream.fileno(), mode, encoding=ENCODING, closefd=False)
    except (OSError, ValueError) as e:
        raise SourceOpenError(f"无法打开标准流: {e}") from e


def open_readable(name: str | Path) -> IO[str]:
    """
    打开可读文本源

    Args:
        name: 文件名；"-" 表示标准输入

    Returns:
        文本流（调用方负责关闭）

    Raises:
        SourceOpenError: 文件不存在/无权限
    """
    if str(name) == "-":
        return _open_std(sys.stdin, "r")

    path = Path(name)
    if path.is_dir():
        raise SourceOpenError(f"是目录而不是文件: {path}")
    try:
        return _opener_for(path)(path, "rt", encoding=ENCODING)
    except OSError as e:
        raise SourceOpenError(f"无法打开: {path}: {e}") from e


def open_writable(name: str | Path, append: bool = False) -> IO[str]:
    """
    打开可写文本输出

    Args:
        name: 文件名；"-" 表示标准输出
        append: 追加而不是覆盖

    Raises:
        SourceOpenError: 无法创建或打开
    """
    if str(name) == "-":
        return _open_std(sys.stdout, "w")

    path = Path(name)
    mode = "at" if append else "wt"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return _opener_for(path)(path, mode, encoding=ENCODING)
    except OSError as e:
        raise SourceOpenError(f"无法写入: {path}: {e}") from e
