"""
飞行记录模型 - 外部记录库提供的只读数据 + 报表行

核心模块只读取飞行记录字段，从不修改或删除记录
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .duration import Duration


class FlightRecord(BaseModel):
    """飞行记录（一条记录本条目）"""

    date: date_type
    pilot_name: str = ""
    designation: str = Field("PIC", description="PIC / P/UT")
    aircraft: str = Field("", description="航空器标识(注册号)")
    departure_location: str = Field("", description="起飞机场代码")
    departure_time: datetime | None = None
    arrival_location: str = Field("", description="落地机场代码")
    arrival_time: datetime | None = None
    day_night: str = Field("Day", description="Day / Night")
    takeoffs: int = Field(0, ge=0)
    landings: int = Field(0, ge=0)
    duration: str = Field("00:00", description="规范时长文本(HH:MM)")
    remarks: str = ""

    model_config = {"frozen": True}

    @field_validator("duration", mode="before")
    @classmethod
    def _duration_text(cls, value: Any) -> Any:
        """YAML 1.1 把未加引号的 10:30 读成六十进制整数 630，还原为 HH:MM"""
        if value is None:
            return "00:00"
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return f"{value // 60:02d}:{value % 60:02d}"
        if not isinstance(value, str):
            return str(value)
        return value

    def get_duration(self) -> Duration:
        """解析时长（无法解析时为00:00）"""
        return Duration.parse(self.duration)


class ReportRow(BaseModel):
    """报表单行（每列一个字符串单元格）"""

    cells: tuple[str, ...]

    model_config = {"frozen": True}

    def __len__(self) -> int:
        return len(self.cells)
