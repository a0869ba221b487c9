"""
配置层 - 加载运行期配置

职责：
- 加载 config/runtime.yaml（排版/存储/并发/日志参数）
- 提供类型安全的配置访问接口
- 日志初始化
"""

from .log_setup import configure_logging
from .runtime_config import (
    ColumnSpec,
    ConcurrencyConfig,
    LayoutConfig,
    LoggingConfig,
    RuntimeConfig,
    StorageConfig,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "LayoutConfig",
    "ColumnSpec",
    "StorageConfig",
    "ConcurrencyConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
    "configure_logging",
]
