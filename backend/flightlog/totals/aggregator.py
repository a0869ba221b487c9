"""
飞行统计引擎 - 汇总飞行记录的时长

职责：
1. 统计架次、总时长、十进制小时
2. 选出最长/最短航程（相同时长取先出现者）
3. 计算平均时长（整数分钟整除）

约定：
- 全程按整数分钟累加，只有十进制小时在展示时做一次定点换算
- 空输入是显式分支：架次0，所有时长 00:00
- 纯函数，无隐藏状态，相同输入得到相同输出

测试要点：
- test_end_to_end_totals: 典型三条记录
- test_empty_records: 空输入
- test_stable_tie_break: 相同时长取先出现者
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from ..models import Duration, FlightRecord, FlightTotals, Statistic

_ONE_PLACE = Decimal("0.1")


class FlightTotalsAggregator:
    """飞行统计计算引擎"""

    def compute(self, records: Iterable[FlightRecord]) -> FlightTotals:
        """计算统计汇总"""
        durations = [r.get_duration() for r in records]
        return self.compute_durations(durations)

    def compute_durations(self, durations: list[Duration]) -> FlightTotals:
        """按时长序列计算统计汇总"""
        if not durations:
            return FlightTotals()

        total_minutes = 0
        longest_index = 0
        shortest_index = 0

        for i, d in enumerate(durations):
            total_minutes += d.to_minutes()
            # 严格大于/小于才替换，保证相同时长取先出现者
            if d > durations[longest_index]:
                longest_index = i
            if d < durations[shortest_index]:
                shortest_index = i

        count = len(durations)
        return FlightTotals(
            total_flights=count,
            total_time=Duration.from_minutes(total_minutes),
            total_hours_decimal=self.format_decimal_hours(total_minutes),
            longest=durations[longest_index],
            shortest=durations[shortest_index],
            average=Duration.from_minutes(total_minutes // count),
            longest_index=longest_index,
            shortest_index=shortest_index,
        )

    def statistics(self, records: Iterable[FlightRecord]) -> list[Statistic]:
        """计算并输出展示项"""
        return self.compute(records).to_statistics()

    @staticmethod
    def format_decimal_hours(total_minutes: int) -> str:
        """分钟 → 一位小数的小时（四舍五入，0.5远离零）"""
        hours = Decimal(total_minutes) / Decimal(60)
        return str(hours.quantize(_ONE_PLACE, rounding=ROUND_HALF_UP))
