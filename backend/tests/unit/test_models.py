"""
数据模型单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_models.py -v
"""

from datetime import date

import pytest
from pydantic import ValidationError

from flightlog.models import (
    FlightRecord,
    FlightTotals,
    JobStatus,
    RenderedDocument,
    ReportJob,
    ReportRow,
)


class TestFlightRecord:
    """飞行记录测试"""

    def test_defaults(self):
        """测试默认字段"""
        record = FlightRecord(date=date(2025, 2, 19), pilot_name="P", aircraft="G-ABCD")
        assert record.designation == "PIC"
        assert record.day_night == "Day"
        assert record.get_duration().to_text() == "00:00"

    def test_negative_counts_rejected(self, make_record):
        """测试起降次数不能为负"""
        with pytest.raises(ValidationError):
            make_record(takeoffs=-1)

    def test_immutable(self, make_record):
        """测试记录只读"""
        record = make_record()
        with pytest.raises(ValidationError):
            record.pilot_name = "Other"

    @pytest.mark.parametrize(
        "value, expected",
        [(630, "10:30"), (75, "01:15"), (0, "00:00"), (None, "00:00"), (1.5, "1.5")],
    )
    def test_duration_coerced_to_text(self, make_record, value, expected):
        """测试非文本时长转换为文本"""
        assert make_record(duration=value).duration == expected

    def test_date_from_text(self, make_record):
        """测试日期文本解析"""
        assert make_record(date="2024-12-31").date == date(2024, 12, 31)


class TestReportRow:
    """报表行测试"""

    def test_len(self):
        assert len(ReportRow(cells=("a", "b", "c"))) == 3


class TestFlightTotals:
    """统计结果测试"""

    def test_empty_defaults(self):
        totals = FlightTotals()
        assert totals.total_flights == 0
        assert totals.total_hours_decimal == "0.0"
        assert totals.shortest_index is None


class TestRenderedDocument:
    """渲染结果测试"""

    def test_size(self):
        document = RenderedDocument(title="Flight Log", data=b"%PDF-1.4")
        assert document.size_bytes == 8
        assert document.page_count == 0


class TestReportJob:
    """报表任务测试"""

    def test_job_lifecycle(self):
        """测试任务状态转换"""
        job = ReportJob(job_id="test-id")
        assert job.status == JobStatus.QUEUED

        job.mark_running()
        assert job.status == JobStatus.RUNNING
        assert job.started_at is not None

        job.mark_succeeded()
        assert job.status == JobStatus.SUCCEEDED
        assert job.progress.percent == 100
        assert job.finished_at is not None

    def test_job_failed(self):
        """测试失败记录错误信息"""
        job = ReportJob(job_id="test-id")
        job.mark_failed("boom")
        assert job.status == JobStatus.FAILED
        assert job.errors == ["boom"]

    def test_job_cancelled(self):
        job = ReportJob(job_id="test-id")
        job.mark_cancelled()
        assert job.status == JobStatus.CANCELLED

    def test_flags_deduplicated(self):
        """测试告警标记去重"""
        job = ReportJob(job_id="test-id")
        job.add_flag("无飞行记录")
        job.add_flag("无飞行记录")
        assert job.flags == ["无飞行记录"]

    def test_save_requested(self):
        assert ReportJob(job_id="a").save_requested is False
        assert ReportJob(job_id="b", options={"save": True}).save_requested is True
