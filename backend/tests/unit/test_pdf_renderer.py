"""
PDF渲染与报表生成单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_pdf_renderer.py -v
"""

import io

import pytest
from PyPDF2 import PdfReader
from reportlab.pdfbase.pdfmetrics import stringWidth

from flightlog.config import LayoutConfig
from flightlog.doc_gen import FlightLogReportGenerator, PDFRenderer, ReportLayoutEngine
from flightlog.interfaces import RenderError
from flightlog.models import PageLayout, ReportRow


def _pdf_pages(data: bytes) -> int:
    return len(PdfReader(io.BytesIO(data)).pages)


class TestPDFRenderer:
    """PDF渲染器测试"""

    @pytest.fixture
    def renderer(self, layout_config: LayoutConfig) -> PDFRenderer:
        return PDFRenderer(layout_config)

    def test_render_page_count(self, renderer: PDFRenderer, layout_config: LayoutConfig):
        """测试PDF页数与排版一致"""
        engine = ReportLayoutEngine(layout_config)
        k = engine.rows_per_page()
        rows = [ReportRow(cells=tuple(["x"] * 8)) for _ in range(k + 1)]
        document = renderer.render("Flight Log", engine.iter_pages("Flight Log", rows))

        assert document.data.startswith(b"%PDF")
        assert document.page_count == 2
        assert _pdf_pages(document.data) == 2

    def test_landscape_page_size(self, renderer: PDFRenderer, layout_config: LayoutConfig):
        """测试横向页面尺寸"""
        engine = ReportLayoutEngine(layout_config)
        document = renderer.render("Flight Log", engine.iter_pages("Flight Log", []))
        box = PdfReader(io.BytesIO(document.data)).pages[0].mediabox
        assert float(box.width) == pytest.approx(841.89, abs=0.01)
        assert float(box.height) == pytest.approx(595.28, abs=0.01)

    def test_render_is_deterministic(self, renderer: PDFRenderer, layout_config: LayoutConfig):
        """测试相同输入字节级一致"""
        engine = ReportLayoutEngine(layout_config)
        rows = [ReportRow(cells=tuple(["cell"] * 8)) for _ in range(5)]
        first = renderer.render("Flight Log", engine.iter_pages("Flight Log", rows))
        second = renderer.render("Flight Log", engine.iter_pages("Flight Log", rows))
        assert first.data == second.data

    def test_render_no_pages_raises(self, renderer: PDFRenderer):
        """测试没有页面时报错"""
        with pytest.raises(RenderError):
            renderer.render("Flight Log", [])

    def test_render_failure_raises(self, renderer: PDFRenderer):
        """测试编码失败不返回产物"""

        def broken_pages():
            yield PageLayout(page_index=0, vertical_cursor=0)
            raise MemoryError("resource exhausted")

        with pytest.raises(RenderError):
            renderer.render("Flight Log", broken_pages())

    def test_fit_text_clips_long_cells(self):
        """测试超宽文本裁切"""
        text = PDFRenderer._fit_text("A very long pilot name indeed", "Helvetica", 10, 40)
        assert text.endswith("...")
        assert len(text) < len("A very long pilot name indeed")
        assert PDFRenderer._fit_text("EGKA", "Helvetica", 10, 80) == "EGKA"
        assert PDFRenderer._fit_text("EGKA", "Helvetica", 10, 0) == ""

    def test_fit_text_very_long_cell(self):
        """测试超长单元格裁切为最长可放下的前缀"""
        name = "Pilot" * 2000
        text = PDFRenderer._fit_text(name, "Helvetica", 10, 152)
        assert text.endswith("...")
        assert name.startswith(text[:-3])
        assert stringWidth(text, "Helvetica", 10) <= 152
        longer = name[: len(text) - 2] + "..."
        assert stringWidth(longer, "Helvetica", 10) > 152


class TestFlightLogReportGenerator:
    """报表生成器测试"""

    def test_generate_report(self, sample_records):
        """测试端到端生成"""
        document = FlightLogReportGenerator().generate(sample_records, title="My Logbook")
        assert document.title == "My Logbook"
        assert document.page_count == 1
        rows = document.pages[0].rows
        assert [r.texts[5] for r in rows] == ["01:15", "00:45", "02:00"]
        assert _pdf_pages(document.data) == 1

    def test_generate_empty_report(self):
        """测试零条记录仍生成1页"""
        document = FlightLogReportGenerator().generate([])
        assert document.page_count == 1
        assert document.pages[0].header is not None
        assert _pdf_pages(document.data) == 1

    def test_generate_many_pages(self, make_record):
        """测试多页报表"""
        records = [make_record("01:00") for _ in range(60)]
        document = FlightLogReportGenerator().generate(records)
        assert document.page_count == _pdf_pages(document.data)
        assert document.page_count >= 3
