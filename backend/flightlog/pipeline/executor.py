"""
报表流水线执行器 - 编排各阶段执行

职责：
1. 按顺序执行各阶段（读取记录 → 构建行 → 排版渲染 → 暂存 → 持久化）
2. 更新任务进度
3. 失败时标记任务并重新抛出，暂存文件保留在任务产物中供重试/丢弃
4. 支持后台线程池提交与取消

测试要点：
- test_execute_without_save: 仅暂存，不持久化
- test_execute_with_save: 暂存并持久化
- test_stage_failure_marks_job_failed: 阶段失败处理
- test_cancelled_job: 取消
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from ..config import RuntimeConfig, get_config
from ..doc_gen import FlightLogReportGenerator
from ..interfaces import (
    IDocumentStore,
    IFlightRecordSource,
    OperationCancelled,
    RecordSourceError,
)
from ..models import FlightRecord, RenderedDocument, ReportJob, Statistic
from ..storage import DocumentStore, YamlFlightRecordSource
from ..totals import FlightTotalsAggregator
from .stages import REPORT_STAGES, PipelineStage, StageEnum

logger = logging.getLogger(__name__)


class ReportExecutor:
    """报表流水线执行器"""

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        record_source: IFlightRecordSource | None = None,
        store: IDocumentStore | None = None,
        generator: FlightLogReportGenerator | None = None,
        aggregator: FlightTotalsAggregator | None = None,
    ):
        self.config = config or get_config()
        self.record_source = record_source
        self.store = store or DocumentStore(self.config)
        self.generator = generator or FlightLogReportGenerator(self.config.layout)
        self.aggregator = aggregator or FlightTotalsAggregator()

        self._pool: ThreadPoolExecutor | None = None
        self._cancel_events: dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    # === 任务 ===

    def create_job(self, title: str | None = None, save: bool = False, **options: Any) -> ReportJob:
        """创建报表任务"""
        job = ReportJob(job_id=str(uuid.uuid4()), options={"save": save, **options})
        if title:
            job.title = title
        return job

    def execute(
        self,
        job: ReportJob,
        records: Iterable[FlightRecord] | None = None,
    ) -> RenderedDocument:
        """同步执行流水线，返回渲染结果（供预览）"""
        cancel_event = self._cancel_event(job.job_id)
        job.mark_running()
        context: dict[str, Any] = {
            "records": list(records) if records is not None else None,
            "rows": [],
            "document": None,
        }

        try:
            for stage in REPORT_STAGES:
                if cancel_event.is_set():
                    raise OperationCancelled(f"任务已取消: {job.job_id}")
                self._execute_stage(job, stage, context, cancel_event)

            job.mark_succeeded()
        except OperationCancelled:
            logger.info(f"[{job.job_id}] 任务已取消")
            job.mark_cancelled()
            raise
        except Exception as e:
            logger.exception(f"报表任务执行失败: {job.job_id}")
            job.mark_failed(str(e))
            raise
        finally:
            with self._lock:
                self._cancel_events.pop(job.job_id, None)

        return context["document"]

    def submit(
        self,
        job: ReportJob,
        records: Iterable[FlightRecord] | None = None,
    ) -> Future:
        """提交到后台线程池执行"""
        with self._lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self.config.concurrency.max_workers,
                    thread_name_prefix="flightlog-report",
                )
            pool = self._pool
        self._cancel_event(job.job_id)
        materialized = list(records) if records is not None else None
        return pool.submit(self.execute, job, materialized)

    def cancel(self, job_id: str) -> bool:
        """请求取消（尽力而为，已完成的阶段不回退）"""
        with self._lock:
            event = self._cancel_events.get(job_id)
        if event is None:
            return False
        event.set()
        return True

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=wait)

    # === 统计 ===

    def totals(self, records: Iterable[FlightRecord] | None = None) -> list[Statistic]:
        """飞行统计展示项"""
        if records is None:
            records = self._require_source().list_flights()
        return self.aggregator.statistics(records)

    # === 阶段 ===

    def _execute_stage(
        self,
        job: ReportJob,
        stage: PipelineStage,
        context: dict[str, Any],
        cancel_event: threading.Event,
    ) -> None:
        """执行单个阶段"""
        job.progress.stage = stage.name
        job.progress.percent = stage.progress_start
        logger.info(f"[{job.job_id}] 开始阶段: {stage.name}")

        try:
            if stage.name == StageEnum.COLLECT_RECORDS.value:
                self._stage_collect(job, context)

            elif stage.name == StageEnum.BUILD_ROWS.value:
                self._stage_build_rows(job, context)

            elif stage.name == StageEnum.LAYOUT_AND_RENDER.value:
                self._stage_render(job, context)

            elif stage.name == StageEnum.STAGE_DOCUMENT.value:
                self._stage_document(job, context)

            elif stage.name == StageEnum.PROMOTE_DOCUMENT.value:
                self._stage_promote(job, cancel_event)

        except Exception as e:
            logger.error(f"[{job.job_id}] 阶段失败 {stage.name}: {e}")
            job.add_flag(f"阶段失败:{stage.name}")
            raise

        job.progress.percent = stage.progress_end
        job.progress.message = f"完成阶段: {stage.name}"

    def _stage_collect(self, job: ReportJob, context: dict[str, Any]) -> None:
        """读取飞行记录"""
        if context["records"] is not None:
            return
        if job.flights_path:
            source: IFlightRecordSource = YamlFlightRecordSource(job.flights_path)
        else:
            source = self._require_source()
        context["records"] = source.list_flights()
        job.progress.message = f"读取飞行记录 {len(context['records'])} 条"

    def _stage_build_rows(self, job: ReportJob, context: dict[str, Any]) -> None:
        """构建报表行"""
        context["rows"] = list(self.generator.row_builder.build_all(context["records"]))
        if not context["rows"]:
            job.add_flag("无飞行记录")

    def _stage_render(self, job: ReportJob, context: dict[str, Any]) -> None:
        """排版并渲染"""
        pages = self.generator.layout_engine.iter_pages(job.title, context["rows"])
        document = self.generator.renderer.render(job.title, pages)
        context["document"] = document
        job.artifacts.page_count = document.page_count
        job.artifacts.size_bytes = document.size_bytes

    def _stage_document(self, job: ReportJob, context: dict[str, Any]) -> None:
        """暂存渲染结果"""
        job.artifacts.staged = self.store.stage(context["document"].data)

    def _stage_promote(self, job: ReportJob, cancel_event: threading.Event) -> None:
        """按需持久化"""
        if not job.save_requested:
            job.progress.message = "未请求保存，保留暂存文件"
            return
        record = self.store.promote(job.artifacts.staged, cancel_event)
        job.artifacts.stored = record
        job.artifacts.staged = None

    def _require_source(self) -> IFlightRecordSource:
        if self.record_source is None:
            raise RecordSourceError("未配置飞行记录来源")
        return self.record_source

    def _cancel_event(self, job_id: str) -> threading.Event:
        with self._lock:
            return self._cancel_events.setdefault(job_id, threading.Event())
