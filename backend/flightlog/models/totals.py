"""
飞行统计模型 - 统计结果与展示行

每次查询重新生成，无独立身份、不持久化
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .duration import Duration


class Statistic(BaseModel):
    """统计展示项（标签 + 展示值）"""
    label: str
    value: str

    model_config = {"frozen": True}


class FlightTotals(BaseModel):
    """飞行统计汇总"""

    total_flights: int = 0
    total_time: Duration = Field(default_factory=Duration.zero)
    total_hours_decimal: str = "0.0"
    longest: Duration = Field(default_factory=Duration.zero)
    shortest: Duration = Field(default_factory=Duration.zero)
    average: Duration = Field(default_factory=Duration.zero)

    # 最长/最短记录在输入中的下标（空输入为None）
    longest_index: int | None = None
    shortest_index: int | None = None

    model_config = {"frozen": True}

    def to_statistics(self) -> list[Statistic]:
        """按固定顺序输出展示项"""
        return [
            Statistic(label="Total Flights", value=str(self.total_flights)),
            Statistic(label="Total Hours", value=self.total_time.to_text()),
            Statistic(label="Total Hours Decimal", value=self.total_hours_decimal),
            Statistic(label="Longest Flight", value=self.longest.to_text()),
            Statistic(label="Shortest Flight", value=self.shortest.to_text()),
            Statistic(label="Average Flight Duration", value=self.average.to_text()),
        ]
