"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from flightlog.interfaces import IDocumentIndex

    class MyIndex(IDocumentIndex):
        def add(self, record: StoredDocumentRecord) -> None:
            ...
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import (
        FlightRecord,
        PageLayout,
        RenderedDocument,
        ReportRow,
        StagedDocument,
        StoredDocumentRecord,
    )


# ============================================================================
# 外部协作方接口
# ============================================================================

class IFlightRecordSource(ABC):
    """飞行记录来源接口 - 外部持久化记录库（只读）"""

    @abstractmethod
    def list_flights(self) -> list[FlightRecord]:
        """
        按记录库自然顺序返回全部飞行记录

        Returns:
            飞行记录列表（可能为空）

        Raises:
            RecordSourceError: 记录库不可读
        """
        ...


# ============================================================================
# 报表生成模块接口
# ============================================================================

class ILayoutEngine(ABC):
    """表格排版引擎接口"""

    @abstractmethod
    def iter_pages(self, title: str, rows: Iterable[ReportRow]) -> Iterator[PageLayout]:
        """
        把行数据排入固定列宽的表格，按页产出几何描述

        流程：
        1. 第1页：居中标题 + 表头（背景色带）
        2. 数据行自上而下逐行放置
        3. 放置前检测是否越过下边距，越过则换页

        Args:
            title: 报表标题
            rows: 行数据（按输出顺序）

        Returns:
            单次可迭代的页面几何序列（至少1页）
        """
        ...


class IDocumentRenderer(ABC):
    """文档渲染器接口"""

    @abstractmethod
    def render(self, title: str, pages: Iterable[PageLayout]) -> RenderedDocument:
        """
        按页面几何绘制文档

        Args:
            title: 报表标题（写入文档元数据）
            pages: 排版引擎产出的页面几何

        Returns:
            渲染结果（字节 + 预览句柄）

        Raises:
            RenderError: 编码失败（不返回部分产物）
        """
        ...


# ============================================================================
# 文档存储模块接口
# ============================================================================

class IDocumentIndex(ABC):
    """已保存文档的元数据索引接口"""

    @abstractmethod
    def add(self, record: StoredDocumentRecord) -> None:
        """新增元数据记录"""
        ...

    @abstractmethod
    def remove(self, record_id: str) -> bool:
        """删除元数据记录，返回是否存在"""
        ...

    @abstractmethod
    def get(self, record_id: str) -> StoredDocumentRecord | None:
        """按ID获取元数据记录"""
        ...

    @abstractmethod
    def list(self) -> list[StoredDocumentRecord]:
        """按插入顺序列出全部元数据记录"""
        ...


class IDocumentStore(ABC):
    """文档存储接口 - 暂存 → 持久化 → 枚举/读取/删除"""

    @abstractmethod
    def stage(self, data: bytes) -> StagedDocument:
        """写入进程级临时目录，返回暂存句柄"""
        ...

    @abstractmethod
    def promote(
        self,
        staged: StagedDocument,
        cancel_event: threading.Event | None = None,
    ) -> StoredDocumentRecord:
        """
        暂存文件转为持久文件并登记元数据

        Raises:
            StorageError: 复制失败（未登记，暂存文件保留）
            PromotionError: 登记失败（已回滚持久文件）
            OperationCancelled: 已取消（无持久状态变化）
        """
        ...

    @abstractmethod
    def list(self) -> list[StoredDocumentRecord]:
        """枚举已保存文档"""
        ...

    @abstractmethod
    def load(self, record: StoredDocumentRecord) -> bytes:
        """
        读取已保存文档

        Raises:
            StaleReferenceError: 元数据存在但文件缺失
        """
        ...

    @abstractmethod
    def delete(self, record: StoredDocumentRecord) -> None:
        """先删文件（尽力而为）再删元数据"""
        ...

    @abstractmethod
    def discard(self, staged: StagedDocument) -> None:
        """丢弃未保存的暂存文件"""
        ...

    @abstractmethod
    def path_for(self, record: StoredDocumentRecord) -> Path:
        """返回持久文件路径（供分享/导出使用）"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class FlightLogError(Exception):
    """基础异常"""
    pass


class RenderError(FlightLogError):
    """渲染错误（不产生部分文档）"""
    pass


class StorageError(FlightLogError):
    """存储I/O错误

    state_changed=False 表示持久状态未变化，可直接重试；
    True 表示已发生部分变化，调用方需要检查。
    """

    def __init__(self, message: str, *, state_changed: bool = False):
        super().__init__(message)
        self.state_changed = state_changed


class PromotionError(StorageError):
    """持久化失败（已回滚复制的文件）"""
    pass


class OperationCancelled(StorageError):
    """存储操作已取消"""
    pass


class StaleReferenceError(FlightLogError):
    """元数据存在但文件缺失"""

    def __init__(self, record: StoredDocumentRecord, path: Path):
        super().__init__(f"文档文件缺失: {path} (id={record.id})")
        self.record = record
        self.path = path


class RecordSourceError(FlightLogError):
    """飞行记录来源读取错误"""
    pass
