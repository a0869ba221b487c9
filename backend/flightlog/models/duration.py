"""
飞行时长模型 - HH:MM 文本与分钟数之间的换算

约定：
- 规范文本为补零的 HH:MM，小时位数不设上限（累计总时长可超过99小时）
- 分钟分量始终归一化到 [0, 59]，溢出部分进位到小时
- 解析从不抛异常：无法解析的字段按0处理（有损兜底）
- 累加一律按整数分钟进行，避免浮点误差
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

SEPARATOR = ":"

_DIGITS = re.compile(r"^\d+$")
# 单个字段的最大位数，超长字段按0处理
MAX_FIELD_DIGITS = 9


class Duration(BaseModel):
    """飞行时长（小时 + 分钟）"""

    hours: int = Field(0, ge=0)
    minutes: int = Field(0, ge=0, le=59)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _carry_minutes(cls, data: Any) -> Any:
        """分钟溢出进位到小时"""
        if isinstance(data, dict):
            minutes = data.get("minutes", 0)
            if isinstance(minutes, int) and minutes >= 60:
                data = dict(data)
                data["hours"] = data.get("hours", 0) + minutes // 60
                data["minutes"] = minutes % 60
        return data

    # === 构造 ===

    @classmethod
    def zero(cls) -> Duration:
        return cls(hours=0, minutes=0)

    @classmethod
    def from_minutes(cls, total: int) -> Duration:
        """由总分钟数构造（负数按0处理）"""
        total = max(0, int(total))
        return cls(hours=total // 60, minutes=total % 60)

    @classmethod
    def parse(cls, text: str | None) -> Duration:
        """
        解析 HH:MM 文本

        - 必须恰好两个字段，否则返回零时长
        - 每个字段独立转换，非数字或超过 MAX_FIELD_DIGITS 位的字段按0处理
        - 分钟超过59时进位（"1:75" -> 02:15）
        """
        if not isinstance(text, str):
            return cls.zero()

        parts = text.strip().split(SEPARATOR)
        if len(parts) != 2:
            return cls.zero()

        hours, minutes = (cls._to_int(p) for p in parts)
        return cls.from_minutes(hours * 60 + minutes)

    @classmethod
    def between(cls, departure: datetime, arrival: datetime) -> Duration:
        """按起降时刻计算时长（秒数向上取整到分钟，非正区间为0）"""
        seconds = (arrival - departure).total_seconds()
        total = math.ceil(seconds / 60)
        if total <= 0:
            return cls.zero()
        return cls.from_minutes(total)

    @staticmethod
    def _to_int(field: str) -> int:
        field = field.strip()
        if len(field) > MAX_FIELD_DIGITS or not _DIGITS.match(field):
            return 0
        return int(field)

    # === 换算 ===

    def to_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def to_text(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}"

    def compare(self, other: Duration) -> int:
        """按总分钟比较，返回 -1 / 0 / 1"""
        a, b = self.to_minutes(), other.to_minutes()
        return (a > b) - (a < b)

    # === 运算 ===

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_minutes(self.to_minutes() + other.to_minutes())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return self.to_text()
