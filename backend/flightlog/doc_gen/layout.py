"""
表格排版引擎 - 行数据 → 分页几何

职责：
1. 第1页放置居中标题和表头（背景色带）
2. 数据行逐行向下放置，列按配置宽度从左到右排列
3. 放置前检测越界：当前行下沿超过下边距时换页，越界行成为新页首行
4. 续页默认不重复标题/表头（repeat_header 开启时重复表头）
5. 表头和每个数据行下方记录分隔线位置

约定：
- 列宽合计不在运行期逐行校验（配置加载时已校验）
- 单元格文本不换行，超宽由渲染端裁切
- iter_pages 返回生成器，只能迭代一次；几何每次生成后即丢弃
- 零条记录也产出1页（标题 + 表头）

测试要点：
- test_zero_rows_single_page: 零条记录
- test_exact_capacity_single_page: 恰好k行
- test_overflow_starts_new_page: k+1行换页
- test_repeat_header: 续页重复表头
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..config import LayoutConfig
from ..interfaces import ILayoutEngine
from ..models import CellGeometry, PageLayout, ReportRow, RowGeometry, TitleGeometry

logger = logging.getLogger(__name__)


class ReportLayoutEngine(ILayoutEngine):
    """表格排版引擎实现"""

    def __init__(self, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()

    def iter_pages(self, title: str, rows: Iterable[ReportRow]) -> Iterator[PageLayout]:
        """逐页产出排版几何"""
        cfg = self.config
        page, body_top = self._start_page(0, title)
        placed = 0

        for index, row in enumerate(rows):
            if self._overflows(body_top, placed):
                yield page
                page, body_top = self._start_page(page.page_index + 1, title)
                placed = 0

            y = body_top + placed * cfg.row_height
            page.rows.append(self._row_geometry(y, self._cells_of(row), row_index=index))
            placed += 1
            page.vertical_cursor = y + cfg.row_height

        yield page

    def layout(self, title: str, rows: Iterable[ReportRow]) -> list[PageLayout]:
        """一次性排版全部页面"""
        pages = list(self.iter_pages(title, rows))
        logger.debug(
            f"排版完成: {len(pages)}页, {sum(p.row_count for p in pages)}行"
        )
        return pages

    def rows_per_page(self, first_page: bool = True) -> int:
        """单页可容纳的数据行数"""
        body_top = self._body_top(first_page)
        count = 0
        while not self._overflows(body_top, count):
            count += 1
        return count

    # === 内部实现 ===

    def _start_page(self, page_index: int, title: str) -> tuple[PageLayout, float]:
        """新建页面，返回(页面, 数据区上沿)"""
        cfg = self.config
        first = page_index == 0

        title_geom = None
        header = None
        if first:
            title_geom = TitleGeometry(
                text=title,
                center_x=cfg.page_width / 2,
                y=cfg.title_y,
                height=cfg.title_block_height,
            )
        if first or cfg.repeat_header:
            header_y = cfg.header_y if first else cfg.margin_top
            header = self._row_geometry(header_y, cfg.labels, is_header=True)

        body_top = self._body_top(first)
        page = PageLayout(
            page_index=page_index,
            title=title_geom,
            header=header,
            vertical_cursor=body_top,
        )
        return page, body_top

    def _body_top(self, first_page: bool) -> float:
        cfg = self.config
        if first_page:
            return cfg.header_y + cfg.row_height
        if cfg.repeat_header:
            return cfg.margin_top + cfg.row_height
        return cfg.margin_top

    def _overflows(self, body_top: float, placed: int) -> bool:
        """放置第 placed+1 行后是否越过下边距"""
        cfg = self.config
        return body_top + (placed + 1) * cfg.row_height > cfg.bottom_limit

    def _row_geometry(
        self,
        y: float,
        texts: list[str],
        *,
        is_header: bool = False,
        row_index: int | None = None,
    ) -> RowGeometry:
        cfg = self.config
        cells = []
        x = cfg.margin_left
        for column, text in zip(cfg.columns, texts):
            cells.append(CellGeometry(x=x, width=column.width, text=text))
            x += column.width

        return RowGeometry(
            y=y,
            height=cfg.row_height,
            cells=cells,
            is_header=is_header,
            row_index=row_index,
            rule_y=y + cfg.row_height if cfg.draw_rules else None,
        )

    def _cells_of(self, row: ReportRow) -> list[str]:
        expected = len(self.config.columns)
        if len(row.cells) != expected:
            raise ValueError(f"报表行列数不符: {len(row.cells)} != {expected}")
        return list(row.cells)
