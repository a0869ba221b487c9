"""
流水线模块 - 报表任务编排与执行

子模块：
- stages: 流水线各阶段定义
- executor: 流水线执行器（同步执行 / 后台线程池）
"""

from .executor import ReportExecutor
from .stages import REPORT_STAGES, PipelineStage, StageEnum

__all__ = [
    "PipelineStage",
    "StageEnum",
    "REPORT_STAGES",
    "ReportExecutor",
]
