"""
报表行构建 - 飞行记录 → 报表行单元格

列顺序：Date, Pilot, Aircraft, From, To, Duration, T/O, Ldg
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..models import FlightRecord, ReportRow

DEFAULT_DATE_FORMAT = "%d/%m/%Y"


class ReportRowBuilder:
    """报表行构建器"""

    def __init__(self, date_format: str = DEFAULT_DATE_FORMAT):
        self.date_format = date_format

    def build(self, record: FlightRecord) -> ReportRow:
        """单条记录 → 报表行"""
        return ReportRow(cells=(
            record.date.strftime(self.date_format),
            record.pilot_name,
            record.aircraft,
            record.departure_location,
            record.arrival_location,
            record.get_duration().to_text(),
            str(record.takeoffs),
            str(record.landings),
        ))

    def build_all(self, records: Iterable[FlightRecord]) -> Iterator[ReportRow]:
        for record in records:
            yield self.build(record)
