"""
文档元数据索引 - 已保存文档的 {id, file_name, created_at} 记录

实现：
- JsonDocumentIndex: 单个JSON文件持久化（临时文件 + os.replace 原子替换）
- InMemoryDocumentIndex: 内存实现（测试/嵌入使用）

约定：
- list() 返回插入顺序，不保证按日期排序
- 持久化失败时内存状态不变，抛 StorageError
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path

from ..interfaces import IDocumentIndex, StorageError
from ..models import StoredDocumentRecord

SCHEMA_VERSION = "1.0"


class InMemoryDocumentIndex(IDocumentIndex):
    """内存索引"""

    def __init__(self, records: list[StoredDocumentRecord] | None = None):
        self._records: list[StoredDocumentRecord] = list(records or [])

    def add(self, record: StoredDocumentRecord) -> None:
        if self.get(record.id) is not None:
            raise StorageError(f"元数据记录已存在: {record.id}")
        self._records.append(record)

    def remove(self, record_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        return len(self._records) != before

    def get(self, record_id: str) -> StoredDocumentRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def list(self) -> list[StoredDocumentRecord]:
        return list(self._records)


class JsonDocumentIndex(IDocumentIndex):
    """JSON文件索引"""

    def __init__(self, index_path: str | Path):
        self.index_path = Path(index_path)
        self._records: list[StoredDocumentRecord] | None = None  # 惰性加载
        self._lock = threading.Lock()

    def add(self, record: StoredDocumentRecord) -> None:
        with self._lock:
            records = self._load()
            if any(r.id == record.id for r in records):
                raise StorageError(f"元数据记录已存在: {record.id}")
            updated = records + [record]
            self._persist(updated)
            self._records = updated

    def remove(self, record_id: str) -> bool:
        with self._lock:
            records = self._load()
            updated = [r for r in records if r.id != record_id]
            if len(updated) == len(records):
                return False
            self._persist(updated)
            self._records = updated
            return True

    def get(self, record_id: str) -> StoredDocumentRecord | None:
        with self._lock:
            for record in self._load():
                if record.id == record_id:
                    return record
        return None

    def list(self) -> list[StoredDocumentRecord]:
        with self._lock:
            return list(self._load())

    def _load(self) -> list[StoredDocumentRecord]:
        """从磁盘加载索引（首次访问时）"""
        if self._records is not None:
            return self._records

        if not self.index_path.exists():
            self._records = []
            return self._records

        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise StorageError(f"元数据索引格式错误（应为对象）: {self.index_path}")
            self._records = [StoredDocumentRecord(**d) for d in data.get("documents", [])]
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"元数据索引读取失败: {self.index_path}: {e}") from e
        return self._records

    def _persist(self, records: list[StoredDocumentRecord]) -> None:
        """原子写入索引文件"""
        payload = {
            "schema_version": SCHEMA_VERSION,
            "documents": [r.model_dump(mode="json") for r in records],
        }
        tmp_path = self.index_path.with_name(self.index_path.name + ".tmp")
        try:
            self.index_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.index_path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"元数据索引写入失败: {self.index_path}: {e}") from e
