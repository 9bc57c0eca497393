"""
配置条目模型 - 同时保存原始文本与数值解释

职责：
- 构造/重新初始化时立即解析数值（十进制或哨兵值 inf/-inf/nan）
- 提供显式的类型提取方法（as_int/as_float/as_char ...）
- 提取失败或精度损失时只输出告警，仍返回尽力而为的结果

测试要点：
- test_decimal_parse: 合法十进制文本 -> numeric_valid
- test_sentinels: inf/-inf/nan 区分大小写
- test_int_precision_loss: "3.7" -> 3 并告警
- test_char_extraction: 空串/单字符/多字符
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

# 整个 token 必须是一个十进制数（可带符号与指数）
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# C locale 的 isspace 字符集
WHITESPACE = " \t\n\v\f\r"

SENTINELS: dict[str, Decimal] = {
    "inf": Decimal("Infinity"),
    "-inf": Decimal("-Infinity"),
    "nan": Decimal("NaN"),
}

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
UINT_MAX = 2**32 - 1


class Extraction(NamedTuple):
    """类型提取结果（值 + 是否无告警地完成）"""
    value: Any
    ok: bool


def parse_numeric(text: str) -> tuple[Decimal, bool]:
    """
    解析数值文本

    Args:
        text: 原始文本

    Returns:
        (数值, 是否解析成功)；失败时数值为 0
    """
    stripped = text.strip(WHITESPACE)
    if _NUMBER_RE.fullmatch(stripped):
        try:
            return Decimal(stripped), True
        except InvalidOperation:
            pass  # 指数超出 Decimal 可表示范围
    if text in SENTINELS:
        return SENTINELS[text], True
    return Decimal(0), False


def _clamp_integral(value: Decimal, lo: int, hi: int) -> int:
    """向零截断并钳制到目标整数范围（NaN -> 0）"""
    if value.is_nan():
        return 0
    # 在 Decimal 上钳制，int() 只作用于范围内的值
    if value >= hi:
        return hi
    if value <= lo:
        return lo
    return int(value)


@dataclass
class ConfigEntry:
    """配置条目（raw 为准，numeric/numeric_valid 随 raw 一起重算）"""

    raw: str = ""
    numeric: Decimal = field(init=False, default=Decimal(0), compare=False)
    numeric_valid: bool = field(init=False, default=False, compare=False)

    def __post_init__(self) -> None:
        self.reinit(self.raw)

    def reinit(self, raw: str) -> ConfigEntry:
        """以新文本重新初始化整个条目"""
        self.raw = raw
        self.numeric, self.numeric_valid = parse_numeric(raw)
        return self

    def copy(self) -> ConfigEntry:
        """按值复制"""
        return replace(self)

    # === 无副作用访问器 ===

    def text(self) -> str:
        return self.raw

    def numeric_value(self) -> Decimal:
        return self.numeric

    def success(self) -> bool:
        return self.numeric_valid

    # === 类型提取 ===

    def _check_valid(self, type_name: str, method: str) -> bool:
        if not self.numeric_valid:
            logger.warning(
                f'[config] Could not interpret entry "{self.raw}" as {type_name}. '
                f"(ConfigEntry.{method})"
            )
        return self.numeric_valid

    def _check_widened(self, result: int, type_name: str, method: str) -> bool:
        if Decimal(int(result)) != self.numeric:
            logger.warning(
                f'[config] Problems while interpreting entry "{self.raw}" as {type_name}. '
                f"(ConfigEntry.{method})"
            )
            return False
        return True

    def _extract_decimal(self) -> Extraction:
        ok = self._check_valid("decimal", "as_decimal")
        return Extraction(self.numeric, ok)

    def _extract_float(self) -> Extraction:
        ok = self._check_valid("float", "as_float")
        return Extraction(float(self.numeric), ok)

    def _extract_integral(self, type_name: str, method: str, lo: int, hi: int) -> Extraction:
        ok = self._check_valid(type_name, method)
        result = _clamp_integral(self.numeric, lo, hi)
        ok = self._check_widened(result, type_name, method) and ok
        return Extraction(result, ok)

    def _extract_bool(self) -> Extraction:
        ok = self._check_valid("bool", "as_bool")
        result = self.numeric != 0
        ok = self._check_widened(result, "bool", "as_bool") and ok
        return Extraction(result, ok)

    def _extract_char(self) -> Extraction:
        if not self.raw:
            return Extraction("\0", True)
        if len(self.raw) > 1:
            logger.warning(
                f'[config] String "{self.raw}" consists of more than 1 characters. '
                "(ConfigEntry.as_char)"
            )
            return Extraction(self.raw[0], False)
        return Extraction(self.raw, True)

    def as_string(self) -> str:
        return self.raw

    def as_decimal(self) -> Decimal:
        return self._extract_decimal().value

    def as_float(self) -> float:
        return self._extract_float().value

    def as_int(self) -> int:
        """转换为32位有符号整数（截断、钳制，精度损失时告警）"""
        return self._extract_integral("int", "as_int", INT_MIN, INT_MAX).value

    def as_uint(self) -> int:
        """转换为32位无符号整数"""
        return self._extract_integral("unsigned int", "as_uint", 0, UINT_MAX).value

    def as_bool(self) -> bool:
        """非零即真；数值不是 0/1 时告警"""
        return self._extract_bool().value

    def as_char(self) -> str:
        """取首字符；空串返回 '\\0'"""
        return self._extract_char().value

    def extract(self, kind: type | str) -> Extraction:
        """
        显式类型提取

        Args:
            kind: 目标类型（str/float/int/bool/Decimal）或名称（"char"/"uint" 等）

        Returns:
            Extraction(value, ok)；ok 为 False 表示提取过程产生了告警
        """
        name = resolve_kind(kind)
        if name == "string":
            return Extraction(self.raw, True)
        if name == "decimal":
            return self._extract_decimal()
        if name == "float":
            return self._extract_float()
        if name == "int":
            return self._extract_integral("int", "as_int", INT_MIN, INT_MAX)
        if name == "uint":
            return self._extract_integral("unsigned int", "as_uint", 0, UINT_MAX)
        if name == "bool":
            return self._extract_bool()
        return self._extract_char()

    def coerce(self, kind: type | str) -> Any:
        """按类型提取，只返回值"""
        return self.extract(kind).value

    def __str__(self) -> str:
        return self.raw


_KIND_ALIASES: dict[Any, str] = {
    str: "string",
    float: "float",
    int: "int",
    bool: "bool",
    Decimal: "decimal",
    "str": "string",
    "string": "string",
    "float": "float",
    "double": "float",
    "decimal": "decimal",
    "int": "int",
    "uint": "uint",
    "unsigned": "uint",
    "bool": "bool",
    "char": "char",
}

KIND_NAMES = ("string", "float", "decimal", "int", "uint", "bool", "char")


def resolve_kind(kind: type | str) -> str:
    """规范化目标类型名称"""
    try:
        return _KIND_ALIASES[kind]
    except (KeyError, TypeError):
        raise ValueError(f"不支持的提取类型: {kind!r}") from None
