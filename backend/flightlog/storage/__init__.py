"""
存储模块 - 文档存储与飞行记录来源

子模块：
- document_store: 暂存/持久化/枚举/读取/删除
- index: 已保存文档元数据索引
- flight_source: 外部飞行记录来源（只读）
"""

from .document_store import DocumentStore
from .flight_source import InMemoryFlightRecordSource, YamlFlightRecordSource
from .index import InMemoryDocumentIndex, JsonDocumentIndex

__all__ = [
    "DocumentStore",
    "JsonDocumentIndex",
    "InMemoryDocumentIndex",
    "YamlFlightRecordSource",
    "InMemoryFlightRecordSource",
]
