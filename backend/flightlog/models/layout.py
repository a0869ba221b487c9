"""
排版几何模型 - 排版引擎的输出、渲染器的输入

坐标约定：x 从页面左边缘起算，y 从页面上边缘向下起算（单位：pt）
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CellGeometry(BaseModel):
    """单元格位置"""
    x: float
    width: float
    text: str = ""


class RowGeometry(BaseModel):
    """行位置（表头或数据行）"""
    y: float                      # 行上沿
    height: float
    cells: list[CellGeometry] = Field(default_factory=list)
    is_header: bool = False
    row_index: int | None = None  # 数据行在整份报表中的序号（0起）
    rule_y: float | None = None   # 行下方分隔线位置（None表示不画线）

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def texts(self) -> list[str]:
        return [c.text for c in self.cells]


class TitleGeometry(BaseModel):
    """标题位置（水平居中）"""
    text: str
    center_x: float
    y: float
    height: float


class PageLayout(BaseModel):
    """单页排版描述"""
    page_index: int               # 0起
    title: TitleGeometry | None = None
    header: RowGeometry | None = None
    rows: list[RowGeometry] = Field(default_factory=list)
    vertical_cursor: float        # 本页下一行的上沿位置

    @property
    def row_count(self) -> int:
        return len(self.rows)
