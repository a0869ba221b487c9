"""
报表生成模块 - 行构建/分页排版/PDF渲染

子模块：
- rows: 飞行记录 → 报表行
- layout: 分页排版引擎
- pdf_renderer: PDF渲染
- report: 报表生成编排
"""

from .layout import ReportLayoutEngine
from .pdf_renderer import PDFRenderer
from .report import DEFAULT_TITLE, FlightLogReportGenerator
from .rows import ReportRowBuilder

__all__ = [
    "ReportRowBuilder",
    "ReportLayoutEngine",
    "PDFRenderer",
    "FlightLogReportGenerator",
    "DEFAULT_TITLE",
]
