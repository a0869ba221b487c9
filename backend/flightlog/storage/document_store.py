"""
文档存储 - 渲染结果的暂存、持久化、枚举、读取与删除

职责：
1. stage: 字节写入进程级临时目录，返回暂存句柄
2. promote: 暂存文件复制到持久目录（FlightLog_<时间戳>.pdf），登记元数据，删除暂存文件
3. list/load/delete/discard: 枚举、读取、删除已保存文档，丢弃暂存文件
4. path_for: 向分享/导出方暴露持久文件路径

一致性约定：
- promote 对调用方是原子的：复制失败不登记、暂存文件保留可重试；
  登记失败回滚已复制的持久文件
- 复制先写 <name>.part，完成后再 os.replace，不覆盖已有文件
- delete 先删文件（缺失不算错误，其他失败记日志后继续）再删元数据，
  中途崩溃最多留下孤立元数据（load 时以 StaleReferenceError 暴露）
- 同一秒内重名时追加 _2、_3 ... 后缀

依赖：
- PyPDF2: 读取已保存PDF的页数

测试要点：
- test_promote_moves_staged_file: 持久化后暂存文件被删除
- test_promote_rolls_back_on_index_failure: 登记失败无孤立文件
- test_promote_copy_failure_keeps_staged: 复制失败保留暂存
- test_delete_then_load_is_stale: 删除后读取报缺失
- test_same_second_names_are_unique: 同秒重名
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from ..config import RuntimeConfig, get_config
from ..interfaces import (
    IDocumentIndex,
    IDocumentStore,
    OperationCancelled,
    PromotionError,
    StaleReferenceError,
    StorageError,
)
from ..models import StagedDocument, StoredDocumentRecord
from .index import JsonDocumentIndex

logger = logging.getLogger(__name__)


class DocumentStore(IDocumentStore):
    """文档存储实现"""

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        index: IDocumentIndex | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or get_config()
        self.documents_dir = self.config.get_documents_dir()
        self.staging_dir = self.config.get_staging_dir()
        self.index = index or JsonDocumentIndex(self.config.get_index_path())
        self._clock = clock

    # === 暂存 ===

    def stage(self, data: bytes) -> StagedDocument:
        """写入暂存文件"""
        storage = self.config.storage
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                prefix=f"{storage.file_prefix}_",
                suffix=f".{storage.extension}",
                dir=self.staging_dir,
            )
        except OSError as e:
            raise StorageError(f"暂存目录不可用: {self.staging_dir}: {e}") from e

        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise StorageError(f"暂存文件写入失败: {path}: {e}") from e

        logger.info(f"文档已暂存: {path} ({len(data)}字节)")
        return StagedDocument(path=path, size_bytes=len(data))

    def discard(self, staged: StagedDocument) -> None:
        """丢弃暂存文件（不持久化）"""
        try:
            staged.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"暂存文件删除失败: {staged.path}: {e}") from e
        logger.info(f"暂存文件已丢弃: {staged.path}")

    # === 持久化 ===

    def promote(
        self,
        staged: StagedDocument,
        cancel_event: threading.Event | None = None,
    ) -> StoredDocumentRecord:
        """暂存 → 持久"""
        src = staged.path
        if not src.is_file():
            raise StorageError(f"暂存文件不存在: {src}")
        self._check_cancel(cancel_event)

        try:
            self.documents_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"文档目录不可用: {self.documents_dir}: {e}") from e

        created_at = self._clock()
        file_name = self._unique_file_name(created_at)
        dest = self.documents_dir / file_name

        # 1. 复制（失败时暂存文件保留，不登记）
        self._copy_atomic(src, dest, cancel_event)

        # 2. 登记元数据（失败时回滚持久文件）
        record = StoredDocumentRecord(file_name=file_name, created_at=created_at)
        try:
            self.index.add(record)
        except Exception as e:
            logger.error(f"元数据登记失败，回滚文件: {dest}: {e}")
            try:
                dest.unlink(missing_ok=True)
            except OSError as cleanup_error:
                raise PromotionError(
                    f"元数据登记失败且回滚失败，遗留文件: {dest}",
                    state_changed=True,
                ) from cleanup_error
            raise PromotionError(f"元数据登记失败，已回滚: {e}") from e

        # 3. 删除暂存文件（失败不影响已完成的持久化）
        try:
            src.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"暂存文件清理失败: {src}: {e}")

        logger.info(f"文档已保存: {file_name} (id={record.id})")
        return record

    # === 查询 ===

    def list(self) -> list[StoredDocumentRecord]:
        """枚举已保存文档（索引自然顺序）"""
        return self.index.list()

    def get(self, record_id: str) -> StoredDocumentRecord | None:
        """按ID获取元数据记录"""
        return self.index.get(record_id)

    def path_for(self, record: StoredDocumentRecord) -> Path:
        """持久文件路径（文件缺失时抛 StaleReferenceError）"""
        path = self.documents_dir / record.file_name
        if not path.is_file():
            logger.warning(f"文档文件缺失: {path} (id={record.id})")
            raise StaleReferenceError(record, path)
        return path

    def load(self, record: StoredDocumentRecord) -> bytes:
        """读取已保存文档"""
        path = self.path_for(record)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise StaleReferenceError(record, path) from e
        except OSError as e:
            raise StorageError(f"文档读取失败: {path}: {e}") from e

    def count_pages(self, record: StoredDocumentRecord) -> int:
        """已保存PDF的页数"""
        data = self.load(record)
        try:
            return len(PdfReader(io.BytesIO(data)).pages)
        except PdfReadError as e:
            raise StorageError(f"PDF解析失败: {record.file_name}: {e}") from e

    def find_stale(self) -> list[StoredDocumentRecord]:
        """元数据存在但文件缺失的记录"""
        return [
            r for r in self.index.list()
            if not (self.documents_dir / r.file_name).is_file()
        ]

    # === 删除 ===

    def delete(self, record: StoredDocumentRecord) -> None:
        """先删文件再删元数据"""
        path = self.documents_dir / record.file_name
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"文档文件删除失败（继续删除元数据）: {path}: {e}")

        if not self.index.remove(record.id):
            logger.warning(f"元数据记录不存在: {record.id}")
        logger.info(f"文档已删除: {record.file_name} (id={record.id})")

    # === 内部实现 ===

    def _unique_file_name(self, created_at: datetime) -> str:
        """FlightLog_<yyyy-MM-dd_HH-mm-ss>.pdf，同名时追加序号"""
        storage = self.config.storage
        base = f"{storage.file_prefix}_{created_at.strftime(storage.timestamp_format)}"
        taken = {r.file_name for r in self.index.list()}

        candidate = f"{base}.{storage.extension}"
        seq = 2
        while self._name_taken(candidate, taken):
            candidate = f"{base}_{seq}.{storage.extension}"
            seq += 1
        return candidate

    def _name_taken(self, file_name: str, taken: set[str]) -> bool:
        path = self.documents_dir / file_name
        return (
            file_name in taken
            or path.exists()
            or path.with_name(path.name + ".part").exists()
        )

    def _copy_atomic(
        self,
        src: Path,
        dest: Path,
        cancel_event: threading.Event | None,
    ) -> None:
        """分块复制到 .part，完成后改名（不覆盖已有文件）"""
        part = dest.with_name(dest.name + ".part")
        chunk_size = self.config.storage.copy_chunk_size

        try:
            with open(src, "rb") as fin, open(part, "xb") as fout:
                while True:
                    self._check_cancel(cancel_event)
                    chunk = fin.read(chunk_size)
                    if not chunk:
                        break
                    fout.write(chunk)
                fout.flush()
                os.fsync(fout.fileno())

            if dest.exists():
                raise StorageError(f"目标文件已存在: {dest}")
            os.replace(part, dest)
        except StorageError:
            part.unlink(missing_ok=True)
            raise
        except OSError as e:
            part.unlink(missing_ok=True)
            raise StorageError(f"文档复制失败: {src} -> {dest}: {e}") from e

    @staticmethod
    def _check_cancel(cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelled("存储操作已取消")
