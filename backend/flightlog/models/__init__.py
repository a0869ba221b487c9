"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- Duration: 飞行时长
- FlightRecord / ReportRow: 飞行记录与报表行
- FlightTotals / Statistic: 统计结果
- PageLayout: 排版几何
- RenderedDocument / StagedDocument / StoredDocumentRecord: 文档生命周期
- ReportJob: 报表任务
"""

from .document import RenderedDocument, StagedDocument, StoredDocumentRecord
from .duration import Duration
from .flight import FlightRecord, ReportRow
from .job import JobArtifacts, JobProgress, JobStatus, ReportJob
from .layout import CellGeometry, PageLayout, RowGeometry, TitleGeometry
from .totals import FlightTotals, Statistic

__all__ = [
    "Duration",
    "FlightRecord",
    "ReportRow",
    "FlightTotals",
    "Statistic",
    "CellGeometry",
    "RowGeometry",
    "TitleGeometry",
    "PageLayout",
    "RenderedDocument",
    "StagedDocument",
    "StoredDocumentRecord",
    "ReportJob",
    "JobStatus",
    "JobArtifacts",
    "JobProgress",
]
