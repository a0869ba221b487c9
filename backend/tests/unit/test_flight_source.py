"""
飞行记录来源单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_flight_source.py -v
"""

from datetime import date
from pathlib import Path

import pytest

from flightlog.interfaces import RecordSourceError
from flightlog.storage import InMemoryFlightRecordSource, YamlFlightRecordSource

FLIGHTS_YAML = """
flights:
  - date: 2025-02-19
    pilot_name: Test Pilot
    aircraft: G-ABCD
    departure_location: EGKA
    arrival_location: EGHR
    takeoffs: 1
    landings: 1
    duration: "01:15"
  - date: 2025-02-20
    pilot_name: Test Pilot
    aircraft: G-WXYZ
    duration: "00:45"
    day_night: Night
"""


class TestYamlFlightRecordSource:
    """YAML记录来源测试"""

    def test_read_flights(self, temp_dir: Path):
        """测试 {flights: [...]} 格式"""
        path = temp_dir / "flights.yaml"
        path.write_text(FLIGHTS_YAML, encoding="utf-8")

        records = YamlFlightRecordSource(path).list_flights()
        assert len(records) == 2
        assert records[0].date == date(2025, 2, 19)
        assert records[0].duration == "01:15"
        assert records[1].day_night == "Night"

    def test_top_level_list(self, temp_dir: Path):
        """测试顶层列表格式（JSON也可）"""
        path = temp_dir / "flights.json"
        path.write_text('[{"date": "2025-02-19", "duration": "02:00"}]', encoding="utf-8")
        records = YamlFlightRecordSource(path).list_flights()
        assert [r.get_duration().to_text() for r in records] == ["02:00"]

    def test_empty_file(self, temp_dir: Path):
        path = temp_dir / "flights.yaml"
        path.write_text("", encoding="utf-8")
        assert YamlFlightRecordSource(path).list_flights() == []

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(RecordSourceError):
            YamlFlightRecordSource(temp_dir / "missing.yaml").list_flights()

    def test_invalid_record(self, temp_dir: Path):
        """测试无效记录"""
        path = temp_dir / "flights.yaml"
        path.write_text("- {pilot_name: No Date}\n", encoding="utf-8")
        with pytest.raises(RecordSourceError):
            YamlFlightRecordSource(path).list_flights()

    def test_wrong_shape(self, temp_dir: Path):
        path = temp_dir / "flights.yaml"
        path.write_text("flights: 3\n", encoding="utf-8")
        with pytest.raises(RecordSourceError):
            YamlFlightRecordSource(path).list_flights()


class TestInMemoryFlightRecordSource:
    """内存记录来源测试"""

    def test_returns_copy(self, sample_records):
        source = InMemoryFlightRecordSource(sample_records)
        flights = source.list_flights()
        flights.clear()
        assert len(source.list_flights()) == 3


class TestUnquotedDurations:
    """未加引号的时长（YAML六十进制整数）"""

    def test_unquoted_duration_read_as_text(self, temp_dir: Path):
        """测试 10:30 / 1:15 不加引号也能读取"""
        path = temp_dir / "flights.yaml"
        path.write_text(
            "- {date: 2025-02-19, duration: 10:30}\n"
            "- {date: 2025-02-20, duration: 1:15}\n"
            "- {date: 2025-02-21, duration: 01:15}\n",
            encoding="utf-8",
        )
        records = YamlFlightRecordSource(path).list_flights()
        assert [r.duration for r in records] == ["10:30", "01:15", "01:15"]
        assert records[0].get_duration().to_minutes() == 630
