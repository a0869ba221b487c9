"""
PDF渲染器 - 排版几何 → PDF字节

职责：
1. 按页绘制标题、表头背景色带、表头文字、数据行
2. 绘制表头及数据行下方的分隔线
3. 超出列宽的单元格文本裁切（末尾加省略号）
4. 返回PDF字节 + 预览句柄（页面几何），不接触存储

依赖：
- reportlab: PDF绘制（canvas）

约定：
- 排版几何以页面上沿为原点向下，绘制时换算为PDF坐标（左下原点）
- invariant 模式输出，相同输入得到逐字节相同的文档
- 任一步骤失败抛 RenderError，不返回部分文档

测试要点：
- test_render_page_count: 页数与排版一致
- test_render_is_deterministic: 字节级可复现
- test_render_failure_raises: 编码失败不返回产物
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable

from reportlab.lib import colors
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..config import LayoutConfig
from ..interfaces import IDocumentRenderer, RenderError
from ..models import PageLayout, RenderedDocument, RowGeometry, TitleGeometry

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

# 文字基线相对行中线的下移比例（按字号）
_BASELINE_SHIFT = 0.35


class PDFRenderer(IDocumentRenderer):
    """PDF渲染器实现"""

    def __init__(self, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()

    def render(self, title: str, pages: Iterable[PageLayout]) -> RenderedDocument:
        """绘制全部页面并编码为PDF"""
        cfg = self.config
        buffer = io.BytesIO()
        drawn: list[PageLayout] = []

        try:
            pdf = canvas.Canvas(
                buffer,
                pagesize=(cfg.page_width, cfg.page_height),
                invariant=1,
            )
            pdf.setTitle(title)
            pdf.setCreator("flightlog")

            for page in pages:
                self._draw_page(pdf, page)
                pdf.showPage()
                drawn.append(page)

            if not drawn:
                raise RenderError("没有可绘制的页面")

            pdf.save()
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"PDF渲染失败: {e}") from e

        data = buffer.getvalue()
        logger.info(f"PDF渲染完成: {title} ({len(drawn)}页, {len(data)}字节)")
        return RenderedDocument(title=title, data=data, pages=drawn)

    # === 绘制 ===

    def _draw_page(self, pdf: canvas.Canvas, page: PageLayout) -> None:
        if page.title:
            self._draw_title(pdf, page.title)
        if page.header:
            self._draw_header(pdf, page.header)
        for row in page.rows:
            self._draw_row(pdf, row, self.config.body_font, self.config.body_font_size)

    def _draw_title(self, pdf: canvas.Canvas, title: TitleGeometry) -> None:
        cfg = self.config
        pdf.setFillColor(colors.black)
        pdf.setFont(cfg.title_font, cfg.title_font_size)
        baseline = title.y + title.height / 2 + cfg.title_font_size * _BASELINE_SHIFT
        pdf.drawCentredString(title.center_x, self._flip(baseline), title.text)

    def _draw_header(self, pdf: canvas.Canvas, header: RowGeometry) -> None:
        cfg = self.config
        if header.cells:
            x0 = header.cells[0].x
            width = sum(c.width for c in header.cells)
            pdf.setFillColor(colors.HexColor(cfg.header_fill_color))
            pdf.rect(x0, self._flip(header.bottom), width, header.height, fill=1, stroke=0)
        self._draw_row(pdf, header, cfg.header_font, cfg.header_font_size)

    def _draw_row(
        self,
        pdf: canvas.Canvas,
        row: RowGeometry,
        font: str,
        font_size: float,
    ) -> None:
        cfg = self.config
        pdf.setFillColor(colors.black)
        pdf.setFont(font, font_size)
        baseline = self._flip(row.y + row.height / 2 + font_size * _BASELINE_SHIFT)

        for cell in row.cells:
            max_width = cell.width - 2 * cfg.cell_padding
            text = self._fit_text(cell.text, font, font_size, max_width)
            if text:
                pdf.drawString(cell.x + cfg.cell_padding, baseline, text)

        if row.rule_y is not None and row.cells:
            x0 = row.cells[0].x
            x1 = row.cells[-1].x + row.cells[-1].width
            pdf.setStrokeColor(colors.black)
            pdf.setLineWidth(cfg.rule_width)
            pdf.line(x0, self._flip(row.rule_y), x1, self._flip(row.rule_y))

    def _flip(self, y: float) -> float:
        """上沿原点 → PDF左下原点"""
        return self.config.page_height - y

    @staticmethod
    def _fit_text(text: str, font: str, font_size: float, max_width: float) -> str:
        """裁切超宽文本（末尾加省略号）"""
        if max_width <= 0:
            return ""
        if stringWidth(text, font, font_size) <= max_width:
            return text

        # 二分查找最长可放下的前缀
        best = ""
        lo, hi = 1, len(text) - 1
        while lo <= hi:
            mid = (lo + hi) // 2
            candidate = text[:mid].rstrip() + ELLIPSIS
            if stringWidth(candidate, font, font_size) <= max_width:
                best = candidate
                lo = mid + 1
            else:
                hi = mid - 1
        return best
