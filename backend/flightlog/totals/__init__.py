"""
统计模块 - 飞行时间汇总
"""

from .aggregator import FlightTotalsAggregator

__all__ = ["FlightTotalsAggregator"]
