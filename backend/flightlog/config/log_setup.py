"""
日志初始化 - 按运行期配置安装日志处理器

仅由命令行入口调用，导入模块时不做任何日志配置
"""

from __future__ import annotations

import logging

from .runtime_config import RuntimeConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(config: RuntimeConfig) -> None:
    """配置根日志器（重复调用时替换已安装的处理器）"""
    root = logging.getLogger()
    level = getattr(logging, config.logging.log_level.upper(), logging.INFO)
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_flightlog", False):
            root.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.log_to_file:
        config.storage_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(config.storage_dir / config.logging.log_file, encoding="utf-8")
        )

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._flightlog = True  # type: ignore[attr-defined]
        root.addHandler(handler)
