"""
飞行记录报表生成器 - 记录 → 报表行 → 分页几何 → PDF

职责：
1. 构建报表行（日期/机长/航空器/起降地/时长/起降次数）
2. 调用排版引擎逐页产出几何
3. 调用渲染器编码为PDF，返回渲染结果（不落盘）

测试要点：
- test_generate_report: 端到端生成
- test_generate_empty_report: 零条记录
"""

from __future__ import annotations

from collections.abc import Iterable

from ..config import LayoutConfig
from ..interfaces import IDocumentRenderer, ILayoutEngine
from ..models import FlightRecord, RenderedDocument
from .layout import ReportLayoutEngine
from .pdf_renderer import PDFRenderer
from .rows import ReportRowBuilder

DEFAULT_TITLE = "Flight Log"


class FlightLogReportGenerator:
    """飞行记录报表生成器"""

    def __init__(
        self,
        config: LayoutConfig | None = None,
        layout_engine: ILayoutEngine | None = None,
        renderer: IDocumentRenderer | None = None,
    ):
        self.config = config or LayoutConfig()
        self.row_builder = ReportRowBuilder(self.config.date_format)
        self.layout_engine = layout_engine or ReportLayoutEngine(self.config)
        self.renderer = renderer or PDFRenderer(self.config)

    def generate(
        self,
        records: Iterable[FlightRecord],
        title: str = DEFAULT_TITLE,
    ) -> RenderedDocument:
        """生成报表（几何只计算一次，渲染后即丢弃）"""
        rows = self.row_builder.build_all(records)
        pages = self.layout_engine.iter_pages(title, rows)
        return self.renderer.render(title, pages)
