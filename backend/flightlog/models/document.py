"""
文档模型 - 渲染结果 / 暂存句柄 / 已保存文档元数据

生命周期：
    Ephemeral(RenderedDocument) → Staged(StagedDocument) → Durable(StoredDocumentRecord)
                                                        ↘ Discarded
"""

from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from .layout import PageLayout


class RenderedDocument(BaseModel):
    """渲染结果（仅属于调用会话，保存或丢弃前一直在内存中）"""
    title: str
    data: bytes = Field(repr=False)
    pages: list[PageLayout] = Field(default_factory=list, repr=False)  # 预览句柄
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class StagedDocument(BaseModel):
    """暂存句柄（临时文件）"""
    path: Path
    size_bytes: int
    staged_at: datetime = Field(default_factory=datetime.now)

    model_config = {"arbitrary_types_allowed": True}

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


class StoredDocumentRecord(BaseModel):
    """已保存文档元数据（指向持久目录中的文件）"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    file_name: str
    created_at: datetime = Field(default_factory=datetime.now)
