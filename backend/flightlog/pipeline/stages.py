"""
报表流水线阶段定义

职责：
1. 定义各阶段的名称和进度区间
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """流水线阶段枚举"""
    COLLECT_RECORDS = "COLLECT_RECORDS"
    BUILD_ROWS = "BUILD_ROWS"
    LAYOUT_AND_RENDER = "LAYOUT_AND_RENDER"
    STAGE_DOCUMENT = "STAGE_DOCUMENT"
    PROMOTE_DOCUMENT = "PROMOTE_DOCUMENT"


@dataclass
class PipelineStage:
    """流水线阶段"""
    name: str
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点


# 报表生成流水线各阶段配置
REPORT_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.COLLECT_RECORDS.value, 0, 10),
    PipelineStage(StageEnum.BUILD_ROWS.value, 10, 20),
    PipelineStage(StageEnum.LAYOUT_AND_RENDER.value, 20, 70),
    PipelineStage(StageEnum.STAGE_DOCUMENT.value, 70, 85),
    PipelineStage(StageEnum.PROMOTE_DOCUMENT.value, 85, 100),
]
