"""
运行期配置 - 读取 config/runtime.yaml

职责：
- 加载排版/存储/并发/日志等运行参数
- 提供环境变量覆盖机制（FLIGHTLOG_ 前缀，嵌套用 __ 分隔）
- 类型安全的配置访问
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_PATH = Path("config/runtime.yaml")


class ColumnSpec(BaseModel):
    """表格列定义"""
    label: str
    width: float = Field(..., gt=0)


def _default_columns() -> list[ColumnSpec]:
    return [
        ColumnSpec(label="Date", width=80),
        ColumnSpec(label="Pilot", width=160),
        ColumnSpec(label="Aircraft", width=110),
        ColumnSpec(label="From", width=90),
        ColumnSpec(label="To", width=90),
        ColumnSpec(label="Duration", width=90),
        ColumnSpec(label="T/O", width=80),
        ColumnSpec(label="Ldg", width=80),
    ]


class LayoutConfig(BaseModel):
    """报表排版配置（单位：pt，横向A4）"""

    page_width: float = 841.89
    page_height: float = 595.28

    margin_left: float = 20.0
    margin_right: float = 20.0
    margin_top: float = 30.0
    margin_bottom: float = 30.0

    # 标题块：第1页顶部，标题居中
    title_y: float = 30.0
    title_block_height: float = 40.0

    row_height: float = 20.0
    columns: list[ColumnSpec] = Field(default_factory=_default_columns)

    # 续页是否重复表头（默认不重复）
    repeat_header: bool = False
    # 表头与数据行下方的分隔线
    draw_rules: bool = True

    # 渲染参数
    title_font: str = "Helvetica-Bold"
    title_font_size: float = 18.0
    header_font: str = "Helvetica-Bold"
    header_font_size: float = 11.0
    body_font: str = "Helvetica"
    body_font_size: float = 10.0
    cell_padding: float = 4.0
    header_fill_color: str = "#D3D3D3"
    rule_width: float = 0.5

    date_format: str = "%d/%m/%Y"

    @model_validator(mode="after")
    def _check_widths(self) -> LayoutConfig:
        """列宽之和 + 左右边距不得超过页宽（配置前置条件）"""
        if not self.columns:
            raise ValueError("报表至少需要一列")
        used = self.table_width + self.margin_left + self.margin_right
        if used > self.page_width:
            raise ValueError(f"列宽超出页宽: {used:.2f} > {self.page_width:.2f}")
        # 首页和续页都至少放得下一行数据
        first_body = self.header_y + self.row_height
        next_body = self.margin_top + (self.row_height if self.repeat_header else 0)
        if max(first_body, next_body) + self.row_height > self.bottom_limit:
            raise ValueError("页面放不下表头和至少一行数据")
        return self

    @property
    def table_width(self) -> float:
        return sum(c.width for c in self.columns)

    @property
    def header_y(self) -> float:
        """第1页表头上沿"""
        return self.title_y + self.title_block_height

    @property
    def bottom_limit(self) -> float:
        """数据行下沿不可越过的位置"""
        return self.page_height - self.margin_bottom

    @property
    def labels(self) -> list[str]:
        return [c.label for c in self.columns]


class StorageConfig(BaseModel):
    """文档存储配置"""

    documents_dir: str = "documents"
    index_file: str = "documents.json"
    staging_dir: Path | None = None  # None 表示系统临时目录下的进程级目录
    file_prefix: str = "FlightLog"
    extension: str = "pdf"
    timestamp_format: str = "%Y-%m-%d_%H-%M-%S"
    copy_chunk_size: int = 64 * 1024


class ConcurrencyConfig(BaseModel):
    """并发配置"""

    max_workers: int = 1


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "flightlog.log"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    # 基础路径
    storage_dir: Path = Path("storage")
    flights_path: Path | None = None

    # 各子配置
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "FLIGHTLOG_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})
        paths = cls._extract(runtime_opts, "paths")

        kwargs: dict[str, Any] = {
            "layout": LayoutConfig(**cls._extract(runtime_opts, "layout")),
            "storage": StorageConfig(**cls._extract(runtime_opts, "storage")),
            "concurrency": ConcurrencyConfig(**cls._extract(runtime_opts, "concurrency")),
            "logging": LoggingConfig(**cls._extract(runtime_opts, "logging")),
        }
        if "storage_dir" in paths:
            kwargs["storage_dir"] = Path(paths["storage_dir"])
        if paths.get("flights_path"):
            kwargs["flights_path"] = Path(paths["flights_path"])

        config = cls(**kwargs)
        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（支持 {default: 值} 写法）"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.storage_dir.is_absolute():
            self.storage_dir = (base_dir / self.storage_dir).resolve()
        if self.flights_path and not self.flights_path.is_absolute():
            self.flights_path = (base_dir / self.flights_path).resolve()
        staging = self.storage.staging_dir
        if staging and not staging.is_absolute():
            self.storage.staging_dir = (base_dir / staging).resolve()

    def get_documents_dir(self) -> Path:
        """获取已保存文档目录"""
        return self.storage_dir / self.storage.documents_dir

    def get_index_path(self) -> Path:
        """获取元数据索引文件路径"""
        return self.storage_dir / self.storage.index_file

    def get_staging_dir(self) -> Path:
        """获取暂存目录"""
        if self.storage.staging_dir:
            return self.storage.staging_dir
        return Path(tempfile.gettempdir()) / "flightlog-staging"

    def ensure_dirs(self) -> None:
        """确保必要目录存在"""
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.get_documents_dir().mkdir(parents=True, exist_ok=True)
        self.get_staging_dir().mkdir(parents=True, exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
