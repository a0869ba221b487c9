"""
飞行记录来源 - 外部记录库的只读适配

实现：
- YamlFlightRecordSource: 从 YAML/JSON 文件读取（顶层列表或 {flights: [...]}）
- InMemoryFlightRecordSource: 内存记录（测试/嵌入使用）
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..interfaces import IFlightRecordSource, RecordSourceError
from ..models import FlightRecord

logger = logging.getLogger(__name__)


class InMemoryFlightRecordSource(IFlightRecordSource):
    """内存记录来源"""

    def __init__(self, records: list[FlightRecord] | None = None):
        self._records = tuple(records or [])

    def list_flights(self) -> list[FlightRecord]:
        return list(self._records)


class YamlFlightRecordSource(IFlightRecordSource):
    """YAML/JSON 文件记录来源"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list_flights(self) -> list[FlightRecord]:
        if not self.path.exists():
            raise RecordSourceError(f"飞行记录文件不存在: {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise RecordSourceError(f"飞行记录文件读取失败: {self.path}: {e}") from e

        if data is None:
            return []
        if isinstance(data, dict):
            data = data.get("flights", [])
        if not isinstance(data, list):
            raise RecordSourceError(f"飞行记录格式错误（应为列表）: {self.path}")

        records = []
        for i, item in enumerate(data):
            try:
                records.append(FlightRecord(**item))
            except (TypeError, ValidationError) as e:
                raise RecordSourceError(f"第{i + 1}条飞行记录无效: {e}") from e

        logger.debug(f"读取飞行记录: {self.path} ({len(records)}条)")
        return records
